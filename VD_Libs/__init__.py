"""
VD_Libs - Visual Diff Library Modules

This package contains core functionality for the Visual Diff project,
organized into specialized sub-packages:

- CompareLib: Comparison options, pixel analysis and comparison results
- IOLib: Reading input images and writing the diff artifacts
- PipelineLib: Load -> compare -> write orchestration for one request
"""

__version__ = "0.1.0"
