"""
Exceptions module - Custom exception hierarchy.

This module defines all custom exceptions used throughout Demo Recorder,
providing clear error types for structural UI mismatches and unusable
compositing inputs.
"""

from demo_recorder.exceptions.base import (
    DemoRecorderError,
    ConfigurationError,
)
from demo_recorder.exceptions.browser import (
    BrowserError,
    BrowserLaunchError,
    BrowserConnectionError,
    PageError,
    NavigationError,
    StructuralUIError,
    ElementNotFoundError,
    ActionExecutionError,
)
from demo_recorder.exceptions.composite import (
    CompositeError,
    PreconditionError,
    TimingRecordError,
    RecordingArtifactError,
    EncoderError,
)

__all__ = [
    # Base exceptions
    "DemoRecorderError",
    "ConfigurationError",
    # Browser exceptions
    "BrowserError",
    "BrowserLaunchError",
    "BrowserConnectionError",
    "PageError",
    "NavigationError",
    "StructuralUIError",
    "ElementNotFoundError",
    "ActionExecutionError",
    # Composite exceptions
    "CompositeError",
    "PreconditionError",
    "TimingRecordError",
    "RecordingArtifactError",
    "EncoderError",
]
