"""
Base exceptions for Demo Recorder.
"""


class DemoRecorderError(Exception):
    """
    Base exception for all Demo Recorder errors.

    All custom exceptions inherit from this class, making it easy
    to catch any error from the library.

    Attributes:
        message: Human-readable error message
        details: Optional additional error details
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        details = {k: v for k, v in self.details.items() if v is not None}
        if details:
            return f"{self.message} - Details: {details}"
        return self.message


class ConfigurationError(DemoRecorderError):
    """
    Error in configuration.

    Raised when there's an issue with settings, environment variables,
    config files, or a required local asset (project file, cursor icon).
    """
    pass
