"""
Comparison pipeline for Visual Diff.

Runs one comparison from start to finish: load both inputs, compare them,
write the diff image and statistics report. Each stage consumes only the
previous stage's output; nothing is written unless loading and comparing
both succeed.

Classes:
    ComparisonRequest: The two input paths and the two output paths
    ComparisonOutcome: What a successful run produced

Functions:
    run_comparison: Execute the load -> compare -> write pipeline
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import logging

from VD_Libs.CompareLib.compare_options import CompareOptions
from VD_Libs.CompareLib.image_compare import compare_images
from VD_Libs.IOLib.file_loader import load_image_pair
from VD_Libs.IOLib.result_writer import ResultWriter, ResultWriterConfig
from VD_Libs.constants import (
    DEFAULT_OUTPUT_IMAGE_PATH,
    DEFAULT_OUTPUT_JSON_PATH,
    FIELD_MISMATCH_PERCENTAGE,
)
from VD_Libs.errors import MissingArgumentError

logger = logging.getLogger(__name__)


@dataclass
class ComparisonRequest:
    """Inputs and outputs for one comparison.

    Attributes:
        path_a: Reference image path
        path_b: Candidate image path
        output_image_path: Diff image destination (default: ./output.png)
        output_json_path: Statistics destination (default: ./output.json)
    """
    path_a: str
    path_b: str
    output_image_path: str = DEFAULT_OUTPUT_IMAGE_PATH
    output_json_path: str = DEFAULT_OUTPUT_JSON_PATH

    def __post_init__(self):
        """Validate that both input paths were supplied."""
        if not self.path_a or not self.path_b:
            raise MissingArgumentError("Two image paths are required: <pathA> <pathB>")
        self.path_a = str(self.path_a)
        self.path_b = str(self.path_b)

    @classmethod
    def from_args(cls, args: Sequence[str]) -> "ComparisonRequest":
        """
        Build a request from positional arguments.

        Args:
            args: At least two values; the first is the reference path and
                  the second the candidate path. Extra values are ignored.

        Raises:
            MissingArgumentError: If fewer than two paths are given
        """
        values = list(args)
        if len(values) < 2:
            raise MissingArgumentError(
                f"Two image paths are required, got {len(values)}"
            )
        return cls(path_a=values[0], path_b=values[1])

    def writer_config(self) -> ResultWriterConfig:
        """Result writer configuration targeting this request's outputs."""
        return ResultWriterConfig(
            image_path=self.output_image_path,
            json_path=self.output_json_path,
        )


@dataclass
class ComparisonOutcome:
    """Files and statistics produced by a successful comparison."""
    request: ComparisonRequest
    image_path: Path
    json_path: Path
    statistics: Dict[str, Any] = field(default_factory=dict)

    @property
    def mismatch_percentage(self) -> float:
        return float(self.statistics.get(FIELD_MISMATCH_PERCENTAGE, 0.0))


def run_comparison(
    request: ComparisonRequest,
    options: Optional[CompareOptions] = None,
    use_threading: bool = True,
    writer_config: Optional[ResultWriterConfig] = None,
) -> ComparisonOutcome:
    """
    Execute the load -> compare -> write pipeline for one request.

    Args:
        request: Input and output paths
        options: Comparison options (default: CompareOptions())
        use_threading: Read both inputs in parallel (default: True)
        writer_config: Overrides the writer configuration derived from the request

    Returns:
        ComparisonOutcome describing the written files

    Raises:
        FileAccessError: If an input cannot be read or an output cannot be written
        ComparisonError: If the inputs cannot be decoded or compared
    """
    logger.debug(f"Loading {request.path_a} and {request.path_b}")
    data_a, data_b = load_image_pair(request.path_a, request.path_b, use_threading=use_threading)

    result = compare_images(data_a, data_b, options)

    writer = ResultWriter(writer_config if writer_config is not None else request.writer_config())
    image_path, json_path = writer.write(result)

    return ComparisonOutcome(
        request=request,
        image_path=image_path,
        json_path=json_path,
        statistics=result.to_dict(),
    )
