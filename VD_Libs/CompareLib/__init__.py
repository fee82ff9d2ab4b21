"""
CompareLib - Image comparison

This module provides the comparison options, the pixel analysis and the
result model used to diff two images.
"""

from VD_Libs.CompareLib.compare_options import (
    CompareOptions,
    Tolerance,
    resolve_tolerance,
)
from VD_Libs.CompareLib.compare_result import ComparisonResult
from VD_Libs.CompareLib.image_compare import compare_images, decode_image

__all__ = [
    "CompareOptions",
    "Tolerance",
    "resolve_tolerance",
    "ComparisonResult",
    "compare_images",
    "decode_image",
]
