"""
Error types raised by Visual Diff.

Classes:
    VisualDiffError: Base class for every error raised by VD_Libs
    MissingArgumentError: A required input path was not supplied
    FileAccessError: An input could not be read or an output could not be written
    ComparisonError: The inputs could not be decoded or compared
"""


class VisualDiffError(Exception):
    """Base class for Visual Diff errors."""


class MissingArgumentError(VisualDiffError, ValueError):
    """Raised when a comparison request is missing one of its paths."""


class FileAccessError(VisualDiffError, OSError):
    """Raised when a file cannot be read or written.

    Attributes:
        path: The path that failed, as given by the caller
    """

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path


class ComparisonError(VisualDiffError):
    """Raised when the comparator cannot decode or compare the inputs."""
