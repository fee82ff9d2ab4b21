"""
Tests for image comparison.

Tests cover:
- Identical images
- Changed regions and diff rendering
- Different dimensions with and without scaling
- Large image sampling
- Determinism
- Undecodable input
- ComparisonResult encoding
"""

import io
import json
import unittest

import numpy as np
from PIL import Image

from conftest import encode_png, solid_image
from VD_Libs.CompareLib.compare_options import CompareOptions
from VD_Libs.CompareLib.compare_result import ComparisonResult
from VD_Libs.CompareLib.image_compare import compare_images, decode_image
from VD_Libs.errors import ComparisonError


class TestCompareIdentical(unittest.TestCase):
    """Test comparing an image against itself."""

    def setUp(self):
        self.data = encode_png(solid_image((40, 30), (128, 128, 128, 255)))

    def test_zero_mismatch(self):
        """Test that identical images do not differ."""
        result = compare_images(self.data, self.data)

        self.assertEqual(result.statistics["misMatchPercentage"], 0.0)
        self.assertEqual(result.statistics["rawMisMatchPercentage"], 0.0)
        self.assertTrue(result.statistics["isSameDimensions"])
        self.assertEqual(
            result.statistics["diffBounds"],
            {"top": 30, "left": 40, "bottom": 0, "right": 0},
        )

    def test_no_highlighted_pixels(self):
        """Test that the diff image contains only grey unchanged pixels."""
        result = compare_images(self.data, self.data)

        self.assertEqual(result.image.size, (40, 30))
        pixels = np.asarray(result.image)
        self.assertTrue((pixels[..., 0] == pixels[..., 1]).all())
        self.assertTrue((pixels[..., 1] == pixels[..., 2]).all())

    def test_statistics_are_json_serializable(self):
        """Test that the statistics can be written as JSON."""
        result = compare_images(self.data, self.data)

        data = json.loads(result.to_json())

        self.assertIn("analysisTime", data)
        self.assertEqual(data["dimensionDifference"], {"width": 0, "height": 0})


class TestCompareChanged(unittest.TestCase):
    """Test comparing images with a changed region."""

    def setUp(self):
        self.before = encode_png(solid_image((100, 100), (100, 100, 100, 255)))
        self.after = encode_png(
            solid_image((100, 100), (100, 100, 100, 255), block=(10, 10, 29, 29))
        )

    def test_mismatch_percentage(self):
        """Test that the changed block is measured."""
        result = compare_images(self.before, self.after)

        self.assertAlmostEqual(result.statistics["misMatchPercentage"], 4.0)
        self.assertEqual(
            result.statistics["diffBounds"],
            {"top": 10, "left": 10, "bottom": 29, "right": 29},
        )

    def test_movement_highlight(self):
        """Test that changed pixels are drawn with the movement error color."""
        result = compare_images(self.before, self.after)

        self.assertEqual(result.image.getpixel((15, 15)), (255, 0, 128, 255))
        self.assertNotEqual(result.image.getpixel((50, 50))[:3], (255, 0, 128))

    def test_flat_highlight(self):
        """Test a custom error color with the flat error type."""
        options = CompareOptions(error_type="flat", error_color=(0, 255, 0))

        result = compare_images(self.before, self.after, options)

        self.assertEqual(result.image.getpixel((20, 20)), (0, 255, 0, 255))

    def test_deterministic(self):
        """Test that repeated comparisons give the same mismatch metrics."""
        first = compare_images(self.before, self.after)
        second = compare_images(self.before, self.after)

        self.assertEqual(
            first.statistics["rawMisMatchPercentage"],
            second.statistics["rawMisMatchPercentage"],
        )
        self.assertEqual(first.statistics["diffBounds"], second.statistics["diffBounds"])
        self.assertEqual(first.get_buffer(), second.get_buffer())

    def test_small_brightness_change_ignored(self):
        """Test that brightness changes within tolerance are not mismatches."""
        lighter = encode_png(solid_image((100, 100), (110, 110, 110, 255)))

        result = compare_images(self.before, lighter)

        self.assertEqual(result.statistics["misMatchPercentage"], 0.0)


class TestCompareDimensions(unittest.TestCase):
    """Test comparing images of different sizes."""

    def setUp(self):
        self.small = encode_png(solid_image((30, 30), (100, 100, 100, 255)))
        self.large = encode_png(solid_image((50, 50), (100, 100, 100, 255)))

    def test_scaled_to_same_size(self):
        """Test that the candidate is scaled to the reference size."""
        result = compare_images(self.small, self.large)

        self.assertEqual(result.image.size, (30, 30))
        self.assertTrue(result.statistics["isSameDimensions"])
        self.assertEqual(result.statistics["misMatchPercentage"], 0.0)

    def test_padded_without_scaling(self):
        """Test that unscaled images are padded and the padding differs."""
        options = CompareOptions(scale_to_same_size=False)

        result = compare_images(self.small, self.large, options)

        self.assertEqual(result.image.size, (50, 50))
        self.assertFalse(result.statistics["isSameDimensions"])
        self.assertEqual(
            result.statistics["dimensionDifference"], {"width": -20, "height": -20}
        )
        self.assertAlmostEqual(result.statistics["misMatchPercentage"], 64.0)


class TestCompareLargeImages(unittest.TestCase):
    """Test large image sampling."""

    def test_sampled_pixels_transparent(self):
        """Test that skipped rows and columns are left transparent."""
        data = encode_png(solid_image((16, 16), (200, 200, 200, 255)))
        options = CompareOptions(large_image_threshold=8)

        result = compare_images(data, data, options)

        self.assertEqual(result.image.getpixel((0, 0))[3], 0)
        self.assertEqual(result.image.getpixel((6, 1))[3], 0)
        self.assertGreater(result.image.getpixel((1, 1))[3], 0)


class TestCompareErrors(unittest.TestCase):
    """Test error handling."""

    def test_undecodable_input(self):
        """Test that non-image data raises ComparisonError."""
        valid = encode_png(solid_image((10, 10)))

        with self.assertRaises(ComparisonError):
            compare_images(b"not an image", valid)

        with self.assertRaises(ComparisonError):
            compare_images(valid, b"")

    def test_decode_image_converts_to_rgba(self):
        """Test that decoded images are RGBA."""
        buffer = io.BytesIO()
        Image.new("RGB", (5, 5), "red").save(buffer, format="PNG")

        image = decode_image(buffer.getvalue())

        self.assertEqual(image.mode, "RGBA")
        self.assertEqual(image.getpixel((0, 0)), (255, 0, 0, 255))


class TestComparisonResult(unittest.TestCase):
    """Test ComparisonResult behaviour."""

    def test_get_buffer_png(self):
        """Test that get_buffer returns a decodable PNG."""
        data = encode_png(solid_image((8, 8)))
        result = compare_images(data, data)

        buffer = result.get_buffer()

        self.assertTrue(buffer.startswith(b"\x89PNG"))
        with Image.open(io.BytesIO(buffer)) as img:
            self.assertEqual(img.size, (8, 8))

    def test_get_buffer_without_image(self):
        """Test that get_buffer fails when no diff image was rendered."""
        data = encode_png(solid_image((8, 8)))
        result = compare_images(data, data, CompareOptions(output_diff=False))

        self.assertIsNone(result.image)
        with self.assertRaises(ComparisonError):
            result.get_buffer()

    def test_mismatch_percentage_property(self):
        """Test the mismatch_percentage shortcut."""
        result = ComparisonResult(statistics={"misMatchPercentage": 12.5})

        self.assertEqual(result.mismatch_percentage, 12.5)
        self.assertEqual(ComparisonResult().mismatch_percentage, 0.0)

    def test_to_dict_is_a_copy(self):
        """Test that to_dict does not expose the internal mapping."""
        result = ComparisonResult(statistics={"diffBounds": {"top": 1}})

        data = result.to_dict()
        data["diffBounds"]["top"] = 99

        self.assertEqual(result.statistics["diffBounds"]["top"], 1)


if __name__ == "__main__":
    unittest.main()
