"""
Compositing-related exceptions.
"""

from demo_recorder.exceptions.base import DemoRecorderError


class CompositeError(DemoRecorderError):
    """Base exception for compositing errors."""
    pass


class PreconditionError(CompositeError):
    """
    Compositing inputs are unusable.

    Raised before the encoder is invoked; no partial output is produced.
    """
    pass


class TimingRecordError(PreconditionError):
    """
    Timestamp record is missing, malformed or inconsistent.

    Attributes:
        path: Path of the offending record file, if any
    """

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message, {"path": path})
        self.path = path


class RecordingArtifactError(PreconditionError):
    """
    Raw recording cannot be located unambiguously.

    Attributes:
        directory: Directory that was searched
        candidates: Files found there
    """

    def __init__(self, message: str, directory: str, candidates: list[str] | None = None):
        super().__init__(message, {"directory": directory, "candidates": candidates})
        self.directory = directory
        self.candidates = candidates or []


class EncoderError(CompositeError):
    """
    External encoder failed.

    Attributes:
        returncode: Encoder exit status (None if it could not be started)
    """

    def __init__(self, message: str, returncode: int | None = None):
        super().__init__(message, {"returncode": returncode})
        self.returncode = returncode
