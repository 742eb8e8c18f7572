"""
Settings - Every tunable of a recording run, as validated pydantic models.

Delays are plain configuration: nothing here adapts to how fast the target
application responds.

Example:
    >>> from demo_recorder.config import load_config
    >>> load_config(delays={"action_ms": 150}).delays.action_ms
    150
"""

from pathlib import Path
from typing import Literal, Optional
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"


class BrowserSettings(BaseModel):
    """
    Browser launched for the recording.

    Attributes:
        browser_type: Playwright browser to launch
        headless: Record without showing a window
        timeout_ms: Overall backstop for browser operations and waits
        viewport_width: Viewport and video width in pixels
        viewport_height: Viewport and video height in pixels
        slow_mo: Extra delay Playwright adds to every operation (ms)
    """
    browser_type: Literal["chromium", "firefox", "webkit"] = "chromium"
    headless: bool = False
    timeout_ms: int = Field(default=5 * 60 * 1000, ge=1000, le=60 * 60 * 1000)
    viewport_width: int = Field(default=1280, ge=320, le=3840)
    viewport_height: int = Field(default=720, ge=240, le=2160)
    slow_mo: int = Field(default=0, ge=0, le=5000)


class DelaySettings(BaseModel):
    """
    Fixed pauses inserted between scripted interactions.

    Attributes:
        keyboard_ms: Keyboard-input delay (also per-keystroke typing delay)
        action_ms: Post-action delay
        cell_ms: Inter-cell delay
        cursor_move_ms: Duration of the cursor overlay's eased transition
        load_settle_ms: Window on each side of the loaded anchor
        tail_ms: Pause after the last scene before closing the session
        poll_interval_ms: Poll interval for enablement waits
        count_poll_interval_ms: Poll interval for element-count waits
    """
    keyboard_ms: int = Field(default=100, ge=0, le=10000)
    action_ms: int = Field(default=300, ge=0, le=10000)
    cell_ms: int = Field(default=500, ge=0, le=10000)
    cursor_move_ms: int = Field(default=500, ge=0, le=10000)
    load_settle_ms: int = Field(default=2500, ge=0, le=60000)
    tail_ms: int = Field(default=1000, ge=0, le=60000)
    poll_interval_ms: int = Field(default=100, ge=10, le=10000)
    count_poll_interval_ms: int = Field(default=1000, ge=10, le=60000)


class RecordingSettings(BaseModel):
    """
    Recording phase inputs and outputs.

    Attributes:
        target_url: Address of the application to drive
        project_file: Project file dropped onto the editor
        cursor_file: SVG used for the visible cursor overlay
        videos_dir: Directory Playwright writes the raw recording into
        timings_path: Where the timestamp record is persisted
        window_title: Title text shown in the recorded window
    """
    target_url: str = "https://voicevox.github.io/preview-pages/preview/pr-2433/editor"
    project_file: str = "demo.vvproj"
    cursor_file: str = str(ASSETS_DIR / "cursor.svg")
    videos_dir: str = "./composite/videos"
    timings_path: str = "./composite/timings.json"
    window_title: str = "VOICEVOX - Ver. 0.22.1"


class EncoderSettings(BaseModel):
    """
    External encoder settings.

    Attributes:
        binary: ffmpeg executable name or path
        output_path: Destination of the trimmed video (overwritten)
    """
    binary: str = "ffmpeg"
    output_path: str = "./composite/dist.mp4"


class LoggingSettings(BaseModel):
    """
    Where log records go.

    Attributes:
        level: Minimum level shown
        file: Also append records to this file
    """
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Optional[str] = None


class Settings(BaseSettings):
    """
    All settings of a run.

    Constructor arguments (the YAML file, via ConfigLoader) take precedence
    over DEMO_RECORDER__SECTION__FIELD environment variables, which take
    precedence over the defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="DEMO_RECORDER__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    delays: DelaySettings = Field(default_factory=DelaySettings)
    recording: RecordingSettings = Field(default_factory=RecordingSettings)
    encoder: EncoderSettings = Field(default_factory=EncoderSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def merge_with(self, overrides: dict) -> "Settings":
        """Copy of these settings with nested ``overrides`` applied section by section."""
        return Settings(**_deep_merge(self.model_dump(), overrides))


def _deep_merge(base: dict, updates: dict) -> dict:
    merged = dict(base)
    for key, value in updates.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
