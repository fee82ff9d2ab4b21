"""
File loading for Visual Diff.

Reads the two input images into memory as raw byte buffers. Decoding is left
to the comparator, so nothing here inspects the file contents.

Functions:
    read_file_bytes: Read one file completely
    load_image_pair: Read the reference and candidate files
"""

from pathlib import Path
from typing import Tuple, Union

import concurrent.futures
import logging

from VD_Libs.errors import FileAccessError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_file_bytes(path: PathLike) -> bytes:
    """
    Read the full contents of a file.

    The file handle is held only for the duration of the read and is
    released whether the read succeeds or fails.

    Args:
        path: Path to the file

    Returns:
        The file's raw bytes

    Raises:
        FileAccessError: If the path does not exist, is not a readable file,
                         or the read fails
    """
    file_path = Path(path)
    try:
        with open(file_path, "rb") as handle:
            data = handle.read()
    except OSError as e:
        reason = e.strerror or str(e)
        raise FileAccessError(f"Failed to read {file_path}: {reason}", path=file_path) from e

    logger.debug(f"Read {len(data)} bytes from {file_path}")
    return data


def load_image_pair(
    path_a: PathLike,
    path_b: PathLike,
    use_threading: bool = True,
) -> Tuple[bytes, bytes]:
    """
    Read the reference and candidate files.

    Both reads finish before this function returns. With threading enabled
    they run concurrently on a two-worker pool; the order in which they
    complete does not matter.

    Args:
        path_a: Reference image path
        path_b: Candidate image path
        use_threading: Read both files in parallel (default: True)

    Returns:
        Tuple of (reference_bytes, candidate_bytes)

    Raises:
        FileAccessError: If either file cannot be read. When both fail, the
                         reference file's error is raised.
    """
    if not use_threading:
        return read_file_bytes(path_a), read_file_bytes(path_b)

    with concurrent.futures.ThreadPoolExecutor(max_workers=2) as executor:
        future_a = executor.submit(read_file_bytes, path_a)
        future_b = executor.submit(read_file_bytes, path_b)
        concurrent.futures.wait([future_a, future_b])
        return future_a.result(), future_b.result()
