"""
IOLib - Input and output files

This module reads the images to compare and writes the diff image and
statistics report.
"""

from VD_Libs.IOLib.file_loader import load_image_pair, read_file_bytes
from VD_Libs.IOLib.result_writer import (
    ResultWriter,
    ResultWriterConfig,
    write_comparison_result,
)

__all__ = [
    "load_image_pair",
    "read_file_bytes",
    "ResultWriter",
    "ResultWriterConfig",
    "write_comparison_result",
]
