"""
Image comparison entry point.

Decodes two encoded images with Pillow, brings them to a common size and runs
the pixel analysis, returning a ComparisonResult.

Example:
    >>> from pathlib import Path
    >>> from VD_Libs.CompareLib.image_compare import compare_images
    >>>
    >>> result = compare_images(Path("a.png").read_bytes(), Path("b.png").read_bytes())
    >>> result.statistics["misMatchPercentage"]
    >>> Path("diff.png").write_bytes(result.get_buffer())
"""

from typing import Any, Dict, Optional, Tuple

import io
import logging
import time

import numpy as np
from PIL import Image

from VD_Libs.CompareLib.compare_options import CompareOptions
from VD_Libs.CompareLib.compare_result import ComparisonResult
from VD_Libs.CompareLib.pixel_analysis import analyse_pixels
from VD_Libs.constants import (
    FIELD_ANALYSIS_TIME,
    FIELD_DIFF_BOUNDS,
    FIELD_DIMENSION_DIFFERENCE,
    FIELD_IS_SAME_DIMENSIONS,
    FIELD_MISMATCH_PERCENTAGE,
    FIELD_RAW_MISMATCH_PERCENTAGE,
)
from VD_Libs.errors import ComparisonError

logger = logging.getLogger(__name__)


def decode_image(data: bytes, label: str = "image") -> Image.Image:
    """
    Decode an encoded image buffer into an RGBA Pillow image.

    Args:
        data: Raw file contents
        label: Name used in error messages

    Returns:
        Fully loaded RGBA image

    Raises:
        ComparisonError: If the buffer is not a decodable image
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return img.convert("RGBA")
    except Exception as e:
        raise ComparisonError(f"Failed to decode {label}: {str(e)}") from e


def _normalise(image: Image.Image, width: int, height: int) -> np.ndarray:
    """Place the image in the top-left corner of a transparent width x height canvas."""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    source = np.asarray(image, dtype=np.uint8)
    pixels[: source.shape[0], : source.shape[1]] = source
    return pixels


def _prepare_pair(
    reference: Image.Image,
    candidate: Image.Image,
    options: CompareOptions,
) -> Tuple[Image.Image, Image.Image]:
    if options.scale_to_same_size and candidate.size != reference.size:
        logger.debug(f"Scaling candidate from {candidate.size} to {reference.size}")
        candidate = candidate.resize(reference.size, Image.Resampling.BILINEAR)
    return reference, candidate


def compare_images(
    data_a: bytes,
    data_b: bytes,
    options: Optional[CompareOptions] = None,
) -> ComparisonResult:
    """
    Compare two encoded images.

    Args:
        data_a: Reference image file contents
        data_b: Candidate image file contents
        options: Comparison options (default: CompareOptions())

    Returns:
        ComparisonResult with the statistics mapping and, when
        options.output_diff is set, the rendered diff image

    Raises:
        ComparisonError: If either input cannot be decoded or compared
    """
    options = options if options is not None else CompareOptions()
    start = time.perf_counter()

    reference = decode_image(data_a, "reference image")
    candidate = decode_image(data_b, "candidate image")
    reference, candidate = _prepare_pair(reference, candidate, options)

    width = max(reference.width, candidate.width)
    height = max(reference.height, candidate.height)
    if width == 0 or height == 0:
        raise ComparisonError("Cannot compare empty images")

    try:
        analysis = analyse_pixels(
            _normalise(reference, width, height),
            _normalise(candidate, width, height),
            options,
        )
    except ValueError as e:
        raise ComparisonError(f"Comparison failed: {str(e)}") from e

    raw_percentage = analysis.mismatch_count / (width * height) * 100.0
    elapsed_ms = int(round((time.perf_counter() - start) * 1000.0))

    statistics: Dict[str, Any] = {
        FIELD_IS_SAME_DIMENSIONS: reference.size == candidate.size,
        FIELD_DIMENSION_DIFFERENCE: {
            "width": reference.width - candidate.width,
            "height": reference.height - candidate.height,
        },
        FIELD_RAW_MISMATCH_PERCENTAGE: raw_percentage,
        FIELD_MISMATCH_PERCENTAGE: round(raw_percentage, 2),
        FIELD_DIFF_BOUNDS: analysis.diff_bounds,
        FIELD_ANALYSIS_TIME: elapsed_ms,
    }

    diff_image = None
    if analysis.diff_pixels is not None:
        diff_image = Image.fromarray(analysis.diff_pixels)

    logger.info(
        f"Compared {width}x{height} images: {statistics[FIELD_MISMATCH_PERCENTAGE]}% mismatch"
    )
    return ComparisonResult(statistics=statistics, image=diff_image)
