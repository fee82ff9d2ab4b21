"""
Pixel-level analysis for image comparison.

Works on RGBA arrays of identical shape (height, width, 4) and decides for
every pixel whether the two images match under a Tolerance profile. All
operations are vectorized with NumPy.

Functions:
    compute_brightness: Perceived brightness per pixel
    compute_hue: HSV hue (0-1) per pixel
    detect_antialiasing: Mark pixels that sit on anti-aliased edges
    build_sampling_mask: Pixels compared when large-image sampling applies
    render_error_pixels: Colorize mismatched pixels for one error type
    analyse_pixels: Compare two arrays and optionally render the diff raster
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import logging

import numpy as np

from VD_Libs.CompareLib.compare_options import CompareOptions, Tolerance
from VD_Libs.constants import (
    BRIGHTNESS_WEIGHTS,
    ERROR_TYPE_DIFF_ONLY,
    ERROR_TYPE_FLAT,
    ERROR_TYPE_FLAT_INTENSITY,
    ERROR_TYPE_MOVEMENT,
    ERROR_TYPE_MOVEMENT_INTENSITY,
    HUE_DIFFERENCE_LIMIT,
    INTENSITY_RATIO_SCALE,
    LARGE_IMAGE_SKIP_STEP,
)

logger = logging.getLogger(__name__)

NEIGHBOUR_OFFSETS = [
    (dy, dx)
    for dy in (-1, 0, 1)
    for dx in (-1, 0, 1)
    if (dy, dx) != (0, 0)
]


@dataclass
class PixelAnalysis:
    """Outcome of analyse_pixels.

    Attributes:
        mismatch_count: Number of pixels counted as different
        diff_bounds: Bounding box of the mismatches (top, left, bottom, right)
        diff_pixels: Rendered RGBA diff raster, or None when not requested
    """
    mismatch_count: int
    diff_bounds: Dict[str, int]
    diff_pixels: Optional[np.ndarray] = None


def compute_brightness(pixels: np.ndarray) -> np.ndarray:
    """
    Compute perceived brightness for every pixel.

    Args:
        pixels: Array of shape (H, W, 4) or (N, 4)

    Returns:
        Float array of brightness values (0-255)
    """
    rgb = pixels[..., :3].astype(np.float64)
    weights = np.asarray(BRIGHTNESS_WEIGHTS, dtype=np.float64)
    return rgb @ weights


def compute_hue(pixels: np.ndarray) -> np.ndarray:
    """
    Compute HSV hue in the range 0-1 for every pixel.

    Grey pixels (max == min) get hue 0.
    """
    rgb = pixels[..., :3].astype(np.float64) / 255.0
    red, green, blue = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    high = rgb.max(axis=-1)
    low = rgb.min(axis=-1)
    delta = high - low
    safe_delta = np.where(delta == 0, 1.0, delta)

    hue = np.select(
        [high == red, high == green],
        [
            (green - blue) / safe_delta + np.where(green < blue, 6.0, 0.0),
            (blue - red) / safe_delta + 2.0,
        ],
        default=(red - green) / safe_delta + 4.0,
    )
    return np.where(delta == 0, 0.0, hue / 6.0)


def _is_similar(first: np.ndarray, second: np.ndarray, tolerance: float) -> np.ndarray:
    """Values are similar when equal or closer than the tolerance."""
    return (first == second) | (np.abs(first - second) < tolerance)


def _rgba_similar(first: np.ndarray, second: np.ndarray, tolerance: Tolerance) -> np.ndarray:
    a = first.astype(np.int16)
    b = second.astype(np.int16)
    return (
        _is_similar(a[..., 0], b[..., 0], tolerance.red)
        & _is_similar(a[..., 1], b[..., 1], tolerance.green)
        & _is_similar(a[..., 2], b[..., 2], tolerance.blue)
        & _is_similar(a[..., 3], b[..., 3], tolerance.alpha)
    )


def _brightness_similar(
    first: np.ndarray,
    second: np.ndarray,
    first_brightness: np.ndarray,
    second_brightness: np.ndarray,
    tolerance: Tolerance,
) -> np.ndarray:
    alpha = _is_similar(
        first[..., 3].astype(np.int16), second[..., 3].astype(np.int16), tolerance.alpha
    )
    brightness = _is_similar(first_brightness, second_brightness, tolerance.min_brightness)
    return alpha & brightness


def _shift(values: np.ndarray, dy: int, dx: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Return values[y + dy, x + dx] for every (y, x) along with an in-bounds mask.

    Out-of-bounds positions are filled with zeros and flagged False.
    """
    height, width = values.shape[:2]
    shifted = np.zeros_like(values)
    valid = np.zeros((height, width), dtype=bool)

    src_y = slice(max(dy, 0), height + min(dy, 0))
    dst_y = slice(max(-dy, 0), height + min(-dy, 0))
    src_x = slice(max(dx, 0), width + min(dx, 0))
    dst_x = slice(max(-dx, 0), width + min(-dx, 0))

    shifted[dst_y, dst_x] = values[src_y, src_x]
    valid[dst_y, dst_x] = True
    return shifted, valid


def detect_antialiasing(
    pixels: np.ndarray,
    brightness: np.ndarray,
    tolerance: Tolerance,
) -> np.ndarray:
    """
    Mark pixels that look like anti-aliased edges.

    A pixel is anti-aliased when, among its in-bounds neighbours, more than
    one has a brightness contrast above ``tolerance.max_brightness``, or more
    than one has a hue differing by more than 0.3, or fewer than two have
    exactly the same RGB value.

    Args:
        pixels: RGBA array (H, W, 4)
        brightness: Output of compute_brightness(pixels)
        tolerance: Active tolerance profile

    Returns:
        Boolean array (H, W)
    """
    height, width = pixels.shape[:2]
    hue = compute_hue(pixels)
    rgb = pixels[..., :3]

    high_contrast = np.zeros((height, width), dtype=np.int8)
    different_hue = np.zeros((height, width), dtype=np.int8)
    equivalent = np.zeros((height, width), dtype=np.int8)

    for dy, dx in NEIGHBOUR_OFFSETS:
        neighbour_rgb, valid = _shift(rgb, dy, dx)
        neighbour_brightness, _ = _shift(brightness, dy, dx)
        neighbour_hue, _ = _shift(hue, dy, dx)

        contrasting = np.abs(brightness - neighbour_brightness) > tolerance.max_brightness
        same_rgb = np.all(rgb == neighbour_rgb, axis=-1)
        hue_shifted = np.abs(hue - neighbour_hue) > HUE_DIFFERENCE_LIMIT

        high_contrast += contrasting & valid
        equivalent += same_rgb & valid
        different_hue += hue_shifted & valid

    return (high_contrast > 1) | (different_hue > 1) | (equivalent < 2)


def build_sampling_mask(height: int, width: int, options: CompareOptions) -> np.ndarray:
    """
    Build the mask of pixels that take part in the comparison.

    Large images compared with anti-aliasing detection skip every row and
    column whose index is a multiple of LARGE_IMAGE_SKIP_STEP.
    """
    compared = np.ones((height, width), dtype=bool)
    threshold = options.large_image_threshold
    if not threshold or not options.tolerance.ignore_antialiasing:
        return compared
    if width <= threshold and height <= threshold:
        return compared

    logger.debug(
        f"Sampling {width}x{height} image, skipping every {LARGE_IMAGE_SKIP_STEP}th row and column"
    )
    compared[::LARGE_IMAGE_SKIP_STEP, :] = False
    compared[:, ::LARGE_IMAGE_SKIP_STEP] = False
    return compared


def _colors_distance(first: np.ndarray, second: np.ndarray) -> np.ndarray:
    diff = np.abs(first[..., :3].astype(np.float64) - second[..., :3].astype(np.float64))
    return diff.sum(axis=-1) / 3.0


def render_error_pixels(
    reference: np.ndarray,
    candidate: np.ndarray,
    error_color: Tuple[int, int, int],
    error_type: str,
) -> np.ndarray:
    """
    Colorize mismatched pixels.

    Args:
        reference: RGBA values (N, 4) from the reference image
        candidate: RGBA values (N, 4) from the candidate image
        error_color: RGB highlight color
        error_type: One of the ERROR_TYPES constants

    Returns:
        Float array (N, 4) of output RGBA values

    Raises:
        ValueError: If error_type is unknown
    """
    color = np.asarray(error_color, dtype=np.float64)
    cand = candidate.astype(np.float64)
    out = np.empty((len(candidate), 4), dtype=np.float64)

    if error_type == ERROR_TYPE_FLAT:
        out[:, :3] = color
        out[:, 3] = 255.0
    elif error_type == ERROR_TYPE_MOVEMENT:
        out[:, :3] = (cand[:, :3] * (color / 255.0) + color) / 2.0
        out[:, 3] = cand[:, 3]
    elif error_type == ERROR_TYPE_FLAT_INTENSITY:
        out[:, :3] = color
        out[:, 3] = _colors_distance(reference, candidate)
    elif error_type == ERROR_TYPE_MOVEMENT_INTENSITY:
        ratio = (_colors_distance(reference, candidate) / 255.0 * INTENSITY_RATIO_SCALE)[:, None]
        out[:, :3] = (1.0 - ratio) * (cand[:, :3] * (color / 255.0)) + ratio * color
        out[:, 3] = cand[:, 3]
    elif error_type == ERROR_TYPE_DIFF_ONLY:
        out[:] = cand
    else:
        raise ValueError(f"Unsupported error_type: {error_type}")

    return out


def _diff_bounds(mismatches: np.ndarray) -> Dict[str, int]:
    height, width = mismatches.shape
    rows, cols = np.nonzero(mismatches)
    if rows.size == 0:
        return {"top": height, "left": width, "bottom": 0, "right": 0}
    return {
        "top": int(rows.min()),
        "left": int(cols.min()),
        "bottom": int(rows.max()),
        "right": int(cols.max()),
    }


def analyse_pixels(
    reference: np.ndarray,
    candidate: np.ndarray,
    options: CompareOptions,
) -> PixelAnalysis:
    """
    Compare two RGBA arrays pixel by pixel.

    Args:
        reference: uint8 array (H, W, 4)
        candidate: uint8 array (H, W, 4), same shape as reference
        options: Comparison options

    Returns:
        PixelAnalysis with mismatch count, bounds and optional diff raster

    Raises:
        ValueError: If the arrays differ in shape
    """
    if reference.shape != candidate.shape:
        raise ValueError(
            f"Pixel arrays must have the same shape: {reference.shape} vs {candidate.shape}"
        )

    height, width = reference.shape[:2]
    tolerance = options.tolerance
    compared = build_sampling_mask(height, width, options)

    ref_brightness = compute_brightness(reference)
    cand_brightness = compute_brightness(candidate)
    brightness_ok = _brightness_similar(
        reference, candidate, ref_brightness, cand_brightness, tolerance
    )

    # Pixels rendered as the reference copy vs. the candidate's grey level
    if tolerance.ignore_colors:
        color_match = np.zeros((height, width), dtype=bool)
        grey_match = brightness_ok
    else:
        color_match = _rgba_similar(reference, candidate, tolerance)
        grey_match = np.zeros((height, width), dtype=bool)
        if tolerance.ignore_antialiasing:
            antialiased = detect_antialiasing(
                reference, ref_brightness, tolerance
            ) | detect_antialiasing(candidate, cand_brightness, tolerance)
            grey_match = ~color_match & antialiased & brightness_ok

    mismatches = compared & ~color_match & ~grey_match
    mismatch_count = int(mismatches.sum())
    logger.debug(f"Compared {int(compared.sum())} pixels, {mismatch_count} differ")

    diff_pixels = None
    if options.output_diff:
        out = np.zeros((height, width, 4), dtype=np.float64)

        copy_mask = compared & color_match
        out[copy_mask, :3] = reference[copy_mask, :3]
        out[copy_mask, 3] = reference[copy_mask, 3] * options.transparency

        grey_mask = compared & grey_match
        out[grey_mask, :3] = cand_brightness[grey_mask][:, None]
        out[grey_mask, 3] = candidate[grey_mask, 3] * options.transparency

        out[mismatches] = render_error_pixels(
            reference[mismatches],
            candidate[mismatches],
            options.error_color,
            options.error_type,
        )
        diff_pixels = np.clip(np.rint(out), 0, 255).astype(np.uint8)

    return PixelAnalysis(
        mismatch_count=mismatch_count,
        diff_bounds=_diff_bounds(mismatches),
        diff_pixels=diff_pixels,
    )
