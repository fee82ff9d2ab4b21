"""
Result Writer for Visual Diff.

Persists a ComparisonResult as two files: the diff image and a JSON report
of the statistics. Both payloads are encoded before anything touches the
disk. Each file is written to a uniquely named temporary sibling, existing
outputs are moved to backups, and the new files are then moved into place.
If any step fails the backups are restored, so either both outputs are
replaced or neither is.

Classes:
    ResultWriterConfig: Output locations and formatting
    ResultWriter: Writes a ComparisonResult according to a config

Functions:
    write_comparison_result: Write a result to the given (or default) paths
"""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import logging
import os
import tempfile

from VD_Libs.CompareLib.compare_result import ComparisonResult
from VD_Libs.constants import (
    BACKUP_FILE_SUFFIX,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_OUTPUT_IMAGE_PATH,
    DEFAULT_OUTPUT_JSON_PATH,
    JSON_ENCODING,
    OUTPUT_FILE_MODE,
    TEMP_FILE_SUFFIX,
)
from VD_Libs.errors import FileAccessError

logger = logging.getLogger(__name__)


@dataclass
class ResultWriterConfig:
    """Configuration for writing comparison results.

    Attributes:
        image_path: Where the diff image goes (default: ./output.png)
        json_path: Where the statistics go (default: ./output.json)
        save_format: Pillow format for the diff image (default: PNG)
        json_indent: Indentation for the JSON report (default: None, compact)
        overwrite: Replace existing files (default: True)
        create_directories: Create missing parent directories (default: False)
        echo_statistics: Print the statistics to stdout before writing (default: True)
    """
    image_path: str = DEFAULT_OUTPUT_IMAGE_PATH
    json_path: str = DEFAULT_OUTPUT_JSON_PATH
    save_format: str = DEFAULT_OUTPUT_FORMAT
    json_indent: Optional[int] = None
    overwrite: bool = True
    create_directories: bool = False
    echo_statistics: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResultWriterConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)


class ResultWriter:
    """Writes the diff image and the statistics report."""

    def __init__(self, config: Optional[ResultWriterConfig] = None):
        """Initialize writer with configuration."""
        self.config = config if config is not None else ResultWriterConfig()

    @property
    def image_path(self) -> Path:
        return Path(self.config.image_path)

    @property
    def json_path(self) -> Path:
        return Path(self.config.json_path)

    def write(self, result: ComparisonResult) -> Tuple[Path, Path]:
        """
        Write both output files.

        Args:
            result: The comparison result to persist

        Returns:
            Tuple of (image_path, json_path) that were written

        Raises:
            ComparisonError: If the result carries no diff image
            FileAccessError: If a file exists and overwrite=False, or a write fails
        """
        image_bytes = result.get_buffer(self.config.save_format)
        json_bytes = result.to_json(indent=self.config.json_indent).encode(JSON_ENCODING)

        if self.config.echo_statistics:
            print(result.statistics)

        targets = [(self.image_path, image_bytes), (self.json_path, json_bytes)]
        for path, _ in targets:
            self._check_target(path)

        staged: List[Tuple[Path, Path]] = []
        backups: List[Tuple[Path, Path]] = []
        replaced: List[Path] = []
        current = None
        try:
            for path, payload in targets:
                current = path
                staged.append((self._stage(path, payload), path))
            for temp_path, path in staged:
                current = path
                if path.is_file():
                    backups.append((self._backup(path), path))
                os.replace(temp_path, path)
                replaced.append(path)
                logger.debug(f"Wrote {path}")
        except OSError as e:
            self._rollback(replaced, backups)
            self._discard(temp_path for temp_path, _ in staged)
            reason = e.strerror or str(e)
            raise FileAccessError(f"Failed to write {current}: {reason}", path=current) from e

        self._discard(backup_path for backup_path, _ in backups)
        logger.info(f"Wrote diff image to {self.image_path} and report to {self.json_path}")
        return self.image_path, self.json_path

    def _check_target(self, path: Path) -> None:
        if self.config.create_directories:
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FileAccessError(
                    f"Failed to create directory {path.parent}: {e.strerror or e}",
                    path=path.parent,
                ) from e

        if path.exists() and not self.config.overwrite:
            raise FileAccessError(
                f"Output file already exists: {path}. Set overwrite=True to replace.",
                path=path,
            )

    def _stage(self, path: Path, payload: bytes) -> Path:
        """Write payload to a new temporary file next to path and return its path."""
        handle = tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.name}.", suffix=TEMP_FILE_SUFFIX, delete=False
        )
        temp_path = Path(handle.name)
        try:
            with handle:
                handle.write(payload)
            os.chmod(temp_path, OUTPUT_FILE_MODE)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise
        return temp_path

    def _backup(self, path: Path) -> Path:
        """Move an existing output aside and return where it went."""
        with tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.name}.", suffix=BACKUP_FILE_SUFFIX, delete=False
        ) as handle:
            backup_path = Path(handle.name)
        try:
            os.replace(path, backup_path)
        except OSError:
            backup_path.unlink(missing_ok=True)
            raise
        return backup_path

    def _rollback(self, replaced: List[Path], backups: List[Tuple[Path, Path]]) -> None:
        """Remove newly written outputs and put the previous ones back."""
        for path in replaced:
            try:
                path.unlink()
            except OSError as e:
                logger.warning(f"Could not remove partial output {path}: {e}")
        for backup_path, path in backups:
            try:
                os.replace(backup_path, path)
            except OSError as e:
                logger.error(f"Could not restore {path} from {backup_path}: {e}")

    def _discard(self, paths: Iterable[Path]) -> None:
        for temp_path in paths:
            try:
                temp_path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning(f"Could not remove temporary file {temp_path}: {e}")


def write_comparison_result(
    result: ComparisonResult,
    image_path: str = DEFAULT_OUTPUT_IMAGE_PATH,
    json_path: str = DEFAULT_OUTPUT_JSON_PATH,
) -> Tuple[Path, Path]:
    """
    Write a comparison result to disk.

    Existing files at either path are replaced.

    Args:
        result: The comparison result
        image_path: Diff image destination (default: ./output.png)
        json_path: Statistics destination (default: ./output.json)

    Returns:
        Tuple of (image_path, json_path)

    Raises:
        FileAccessError: If either file cannot be written
    """
    config = ResultWriterConfig(image_path=str(image_path), json_path=str(json_path))
    return ResultWriter(config).write(result)
