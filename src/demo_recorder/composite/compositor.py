"""
Compositor - Trims the raw recording to start at the loaded anchor.

The setup phase (page load, caching, cleanup) is captured on video between
the start and loaded anchors; the compositor cuts it off by asking the
external encoder to seek past it.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from demo_recorder.config.settings import Settings
from demo_recorder.exceptions import EncoderError, RecordingArtifactError
from demo_recorder.reporting.timing_record import TimingRecord, TimingStore

logger = logging.getLogger(__name__)


@dataclass
class CompositeResult:
    """
    Outcome of a composite run.

    Attributes:
        offset_seconds: Seek-start passed to the encoder
        command: Encoder command line
        input_path: Raw recording
        output_path: Trimmed video
        record: Timing record the offset was computed from
    """
    offset_seconds: float
    command: List[str]
    input_path: Path
    output_path: Path
    record: TimingRecord


def compute_trim_offset(record: TimingRecord) -> float:
    """Seconds of setup to cut: (loaded - start) / 1000."""
    return (record.loaded_time - record.start_time) / 1000


def find_recording(videos_dir: Union[str, Path]) -> Path:
    """
    Locate the single raw recording.

    Raises:
        RecordingArtifactError: If the directory is missing, empty, or
            holds more than one file
    """
    directory = Path(videos_dir)
    if not directory.is_dir():
        raise RecordingArtifactError("Recording directory not found", directory=str(directory))

    candidates = sorted(p for p in directory.iterdir() if p.is_file())
    if not candidates:
        raise RecordingArtifactError("No recording found", directory=str(directory))
    if len(candidates) > 1:
        raise RecordingArtifactError(
            f"Expected exactly one recording, found {len(candidates)}",
            directory=str(directory),
            candidates=[p.name for p in candidates],
        )
    return candidates[0]


def build_encoder_command(
    binary: str,
    input_path: Union[str, Path],
    offset_seconds: float,
    output_path: Union[str, Path],
) -> List[str]:
    """ffmpeg command that drops the first ``offset_seconds`` and overwrites the output."""
    return [
        binary,
        "-i", str(input_path),
        "-ss", str(offset_seconds),
        str(output_path),
        "-y",
    ]


class Compositor:
    """
    Produces the final trimmed video.

    Example:
        >>> compositor = Compositor(settings)
        >>> result = compositor.composite()
        >>> result.offset_seconds
        2.5
    """

    def __init__(
        self,
        settings: Settings,
        log: Optional[logging.Logger] = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        """
        Initialize the compositor.

        Args:
            settings: Configuration settings
            log: Logger to report progress to
            runner: subprocess.run-compatible callable used to start the encoder
        """
        self._settings = settings
        self._log = log or logger
        self._runner = runner

    def prepare(self) -> CompositeResult:
        """
        Validate inputs and build the encoder command without running it.

        Raises:
            PreconditionError: If the record or recording is unusable
        """
        recording = self._settings.recording
        record = TimingStore(recording.timings_path).load()
        input_path = find_recording(recording.videos_dir)
        self._log.info(f"Video path: {input_path}")

        output_path = Path(self._settings.encoder.output_path)
        self._log.info(f"Dist: {output_path}")

        offset = compute_trim_offset(record)
        command = build_encoder_command(self._settings.encoder.binary, input_path, offset, output_path)
        return CompositeResult(
            offset_seconds=offset,
            command=command,
            input_path=input_path,
            output_path=output_path,
            record=record,
        )

    def composite(self) -> CompositeResult:
        """
        Trim the recording.

        Raises:
            PreconditionError: If the record or recording is unusable
            EncoderError: If the encoder cannot be started or exits non-zero
        """
        result = self.prepare()
        result.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._log.info(f"Trimming {result.offset_seconds}s of setup")
        self._log.debug(" ".join(result.command))

        try:
            completed = self._runner(result.command, check=False)
        except FileNotFoundError:
            raise EncoderError(f"Encoder not found: {result.command[0]}")
        except BaseException:
            result.output_path.unlink(missing_ok=True)
            raise

        if completed.returncode != 0:
            # Whatever the encoder managed to write is unusable
            result.output_path.unlink(missing_ok=True)
            raise EncoderError(
                f"Encoder exited with status {completed.returncode}",
                returncode=completed.returncode,
            )
        self._log.info(f"Wrote {result.output_path}")
        return result
