"""
Error types raised by the Recast conversion core.

Clamping of quality and custom dimensions happens silently; everything
else reaches the caller as one of these, carrying the offending file
name or index.
"""

from typing import Optional


class RecastError(Exception):
    """Base class for all Recast errors."""


class InvalidInput(RecastError, ValueError):
    """Input that is not a usable image, or an index with no image behind it."""


class InvalidPolicy(RecastError, ValueError):
    """Resize values that cannot be normalised (e.g. a non-positive scale)."""


class EmptySelection(RecastError, ValueError):
    """Batch conversion requested with nothing selected."""

    def __init__(self, message: str = "No files selected for batch conversion"):
        super().__init__(message)


class CodecFailure(RecastError, RuntimeError):
    """
    The Image Codec could not produce output for one file.

    Attributes:
        file_name: Name of the source file that failed
        output_format: Format that was attempted (e.g. 'jpeg')
        reason: Codec error text, may be empty
    """

    def __init__(self, file_name: Optional[str], output_format: str, reason: str = ""):
        self.file_name = file_name or "<unnamed>"
        self.output_format = output_format
        self.reason = reason
        super().__init__(self._describe())

    def _describe(self) -> str:
        message = f"conversion failed for file {self.file_name} ({self.output_format})"
        if self.reason:
            message += f": {self.reason}"
        return message


class BatchAborted(CodecFailure):
    """
    Fail-fast batch abort. No partial results survive this error.

    Attributes:
        index: Index into the loaded image list of the failing item
        completed: Items converted before the failure
        total: Items that were queued
    """

    def __init__(self, failure: CodecFailure, index: int, completed: int, total: int):
        self.index = index
        self.completed = completed
        self.total = total
        super().__init__(failure.file_name, failure.output_format, failure.reason)

    def _describe(self) -> str:
        return (
            f"{super()._describe()}; batch aborted, "
            f"{self.completed} of {self.total} completed"
        )


class BatchCancelled(RecastError):
    """Batch stopped between items because cancellation was requested."""

    def __init__(self, completed: int, total: int):
        self.completed = completed
        self.total = total
        super().__init__(f"batch cancelled, {completed} of {total} completed")
