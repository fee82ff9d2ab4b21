"""
Pytest configuration and shared fixtures for Visual Diff tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import io

import pytest
from pathlib import Path
from PIL import Image, ImageDraw


def encode_png(image) -> bytes:
    """Encode a PIL Image as PNG bytes."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def solid_image(size=(100, 100), color=(100, 100, 100, 255), block=None, block_color=(255, 0, 0, 255)):
    """
    Create an RGBA image of one color, optionally with a filled rectangle.

    Args:
        size: (width, height)
        color: Background RGBA color
        block: Optional (x0, y0, x1, y1) rectangle, inclusive
        block_color: Rectangle fill color
    """
    image = Image.new("RGBA", size, color)
    if block is not None:
        ImageDraw.Draw(image).rectangle(block, fill=block_color)
    return image


@pytest.fixture
def make_image_file(tmp_path):
    """
    Provide a factory that writes a generated PNG and returns its path.

    Returns:
        Callable(name, image=None, **solid_image kwargs) -> Path
    """
    inputs_dir = tmp_path / "inputs"
    inputs_dir.mkdir()

    def factory(name: str, image=None, **kwargs) -> Path:
        path = inputs_dir / name
        if image is None:
            image = solid_image(**kwargs)
        image.save(path, format="PNG")
        return path

    return factory


@pytest.fixture
def sample_rgba_colors():
    """
    Provide a list of sample RGBA color tuples for testing.

    Returns:
        List of (R, G, B, A) tuples with common test colors
    """
    return [
        (255, 0, 0, 255),    # Red
        (0, 255, 0, 255),    # Green
        (0, 0, 255, 255),    # Blue
        (255, 255, 255, 255),  # White
        (0, 0, 0, 255),      # Black
        (128, 128, 128, 255),  # Gray
    ]
