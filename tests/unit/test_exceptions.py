"""
Tests for custom exceptions.
"""

import pytest

from demo_recorder.exceptions import (
    ActionExecutionError,
    BrowserError,
    CompositeError,
    ConfigurationError,
    DemoRecorderError,
    ElementNotFoundError,
    EncoderError,
    NavigationError,
    PreconditionError,
    RecordingArtifactError,
    StructuralUIError,
    TimingRecordError,
)


class TestDemoRecorderError:
    """Test the base DemoRecorderError exception."""

    def test_create_base_error(self):
        """Test creating a DemoRecorderError."""
        error = DemoRecorderError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.details == {}

    def test_details_in_message(self):
        """Test details are appended, skipping empty ones."""
        error = DemoRecorderError("Failed", {"scene": "3", "step": None})
        assert str(error) == "Failed - Details: {'scene': '3'}"


class TestHierarchy:
    """Test the exception hierarchy."""

    @pytest.mark.parametrize("cls", [
        ConfigurationError,
        BrowserError,
        StructuralUIError,
        CompositeError,
        PreconditionError,
        EncoderError,
    ])
    def test_all_are_base_errors(self, cls):
        """Test every error can be caught as DemoRecorderError."""
        assert issubclass(cls, DemoRecorderError)

    def test_structural_errors(self):
        """Test missing elements and failed actions are structural."""
        assert issubclass(ElementNotFoundError, StructuralUIError)
        assert issubclass(ActionExecutionError, StructuralUIError)
        assert not issubclass(NavigationError, StructuralUIError)

    def test_preconditions(self):
        """Test unusable compositing inputs are preconditions, encoder failures are not."""
        assert issubclass(TimingRecordError, PreconditionError)
        assert issubclass(RecordingArtifactError, PreconditionError)
        assert not issubclass(EncoderError, PreconditionError)


class TestDetails:
    """Test error attributes."""

    def test_element_not_found(self):
        """Test the selector is kept."""
        error = ElementNotFoundError("Required element not found", selector=".audio-cell >> nth=8")
        assert error.selector == ".audio-cell >> nth=8"
        assert "nth=8" in str(error)

    def test_action_execution(self):
        """Test the action type is kept."""
        error = ActionExecutionError("Could not click", action_type="click", selector="#play")
        assert error.details == {"action_type": "click", "selector": "#play"}

    def test_recording_artifact(self):
        """Test the searched directory and candidates are kept."""
        error = RecordingArtifactError("Ambiguous", directory="videos", candidates=["a", "b"])
        assert error.candidates == ["a", "b"]
        assert "videos" in str(error)

    def test_encoder(self):
        """Test the exit status is kept."""
        assert EncoderError("Encoder failed", returncode=1).returncode == 1
