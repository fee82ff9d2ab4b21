"""
Visual Diff command-line tool.

Compares two images and writes ./output.png (the diff image) and
./output.json (the mismatch statistics).

Usage:
    python visual_diff.py <pathA> <pathB>
"""

from typing import List, Optional

import argparse
import logging
import sys

from VD_Libs.PipelineLib.compare_pipeline import ComparisonRequest, run_comparison
from VD_Libs.constants import (
    DEFAULT_OUTPUT_IMAGE_PATH,
    DEFAULT_OUTPUT_JSON_PATH,
    EXIT_FAILURE,
    EXIT_OK,
)
from VD_Libs.errors import VisualDiffError

logger = logging.getLogger("visual_diff")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="visual-diff",
        description="Compare two images and write a diff image and a JSON report.",
    )
    parser.add_argument("path_a", metavar="pathA", help="Reference image")
    parser.add_argument("path_b", metavar="pathB", help="Candidate image")
    parser.add_argument(
        "--output-image",
        default=DEFAULT_OUTPUT_IMAGE_PATH,
        help=f"Diff image destination (default: {DEFAULT_OUTPUT_IMAGE_PATH})",
    )
    parser.add_argument(
        "--output-json",
        default=DEFAULT_OUTPUT_JSON_PATH,
        help=f"Statistics destination (default: {DEFAULT_OUTPUT_JSON_PATH})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        request = ComparisonRequest(
            path_a=args.path_a,
            path_b=args.path_b,
            output_image_path=args.output_image,
            output_json_path=args.output_json,
        )
        run_comparison(request)
    except VisualDiffError as e:
        logger.error(str(e), exc_info=args.verbose)
        return EXIT_FAILURE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
