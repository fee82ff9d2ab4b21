"""
Comparison result model for Visual Diff.

Classes:
    ComparisonResult: Diff image plus the statistics mapping produced by a comparison
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import io
import json

from PIL import Image

from VD_Libs.constants import DEFAULT_OUTPUT_FORMAT, FIELD_MISMATCH_PERCENTAGE
from VD_Libs.errors import ComparisonError


@dataclass
class ComparisonResult:
    """Outcome of comparing two images.

    Attributes:
        statistics: JSON-compatible mapping describing the mismatch
        image: Rendered RGBA diff image, or None when no diff was requested
    """
    statistics: Dict[str, Any] = field(default_factory=dict)
    image: Optional[Image.Image] = None

    @property
    def mismatch_percentage(self) -> float:
        """Mismatch percentage rounded to two decimals."""
        return float(self.statistics.get(FIELD_MISMATCH_PERCENTAGE, 0.0))

    def get_buffer(self, image_format: str = DEFAULT_OUTPUT_FORMAT) -> bytes:
        """
        Encode the diff image.

        Args:
            image_format: Pillow format name (default: PNG)

        Returns:
            Encoded image bytes

        Raises:
            ComparisonError: If the comparison did not render a diff image
        """
        if self.image is None:
            raise ComparisonError("Comparison did not produce a diff image")

        buffer = io.BytesIO()
        self.image.save(buffer, format=image_format)
        return buffer.getvalue()

    def to_dict(self) -> Dict[str, Any]:
        """Return a copy of the statistics mapping."""
        return json.loads(json.dumps(self.statistics))

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialize the statistics mapping as JSON text."""
        return json.dumps(self.statistics, indent=indent)
