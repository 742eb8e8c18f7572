"""
Sequencer - Runs a recording script end to end.

Owns the browser session for one recording: captures the start anchor,
runs the setup scenes, captures the loaded anchor, runs the narrative and
only persists the timing record once the session has been closed.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Union

from demo_recorder.config.settings import Settings
from demo_recorder.engine.executor import Clock, ExecutionContext, StepExecutor, wall_clock_ms
from demo_recorder.engine.steps import Script
from demo_recorder.exceptions import ConfigurationError, DemoRecorderError
from demo_recorder.interfaces.driver import IRecordingSession
from demo_recorder.reporting.timing_record import TimingRecord, TimingStore

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], IRecordingSession]


@dataclass
class SequenceResult:
    """
    Outcome of a successful recording run.

    Attributes:
        record: Captured anchors and beats
        timings_path: Where the record was written
        videos_dir: Directory holding the raw recording
        steps_executed: Number of steps run
    """
    record: TimingRecord
    timings_path: Path
    videos_dir: Path
    steps_executed: int


def load_assets(paths: Mapping[str, Union[str, Path]]) -> Dict[str, bytes]:
    """
    Read every named asset as raw bytes.

    Raises:
        ConfigurationError: If an asset file cannot be read
    """
    assets: Dict[str, bytes] = {}
    for name, path in paths.items():
        try:
            assets[name] = Path(path).read_bytes()
        except OSError as e:
            raise ConfigurationError(f"Cannot read asset '{name}' from {path}: {e}")
    return assets


class Sequencer:
    """
    Drives one recording session through a Script.

    Example:
        >>> sequencer = Sequencer(settings, lambda: PlaywrightSession(settings))
        >>> result = await sequencer.run(script, {"cursor.svg": "assets/cursor.svg"})
        >>> result.record.event_times
        (1734567890123, ...)
    """

    def __init__(
        self,
        settings: Settings,
        session_factory: SessionFactory,
        clock: Optional[Clock] = None,
        log: Optional[logging.Logger] = None,
    ):
        """
        Initialize the sequencer.

        Args:
            settings: Configuration settings
            session_factory: Creates the (not yet started) recording session
            clock: Source of anchor and beat instants
            log: Logger to report progress to
        """
        self._settings = settings
        self._session_factory = session_factory
        self._clock = clock or wall_clock_ms
        self._log = log or logger
        self._executor = StepExecutor(settings.delays, clock=self._clock, log=self._log)
        self._store = TimingStore(settings.recording.timings_path)
        self._videos_dir = Path(settings.recording.videos_dir)

    def _clear_outputs(self) -> None:
        """Remove artifacts of earlier runs so they cannot be mistaken for this one's."""
        if self._videos_dir.exists():
            self._log.info(f"Clearing {self._videos_dir}")
            shutil.rmtree(self._videos_dir)
        self._store.clear()

    async def _close_after_failure(self, session: IRecordingSession) -> None:
        """Close the session without masking the error that ended the run."""
        try:
            await session.close()
        except DemoRecorderError as e:
            self._log.warning(f"Session did not close cleanly: {e}")

    async def run(
        self,
        script: Script,
        asset_paths: Optional[Mapping[str, Union[str, Path]]] = None,
    ) -> SequenceResult:
        """
        Record the script.

        Args:
            script: Scenes to run
            asset_paths: Files to load for payload steps, by asset name

        Returns:
            SequenceResult with the persisted record

        Raises:
            ConfigurationError: If an asset is missing (before any browser starts)
            DemoRecorderError: If any scene fails; the session is closed and
                no record is written
        """
        assets = load_assets(asset_paths or {})
        missing = sorted(script.assets - assets.keys())
        if missing:
            raise ConfigurationError(f"Script needs assets that were not provided: {missing}")

        self._clear_outputs()
        delays = self._settings.delays

        self._log.info("Start recording")
        session = self._session_factory()
        try:
            await session.start()
            start_time = self._clock()
            self._log.info("Open new page")
            driver = await session.open_page()
            await driver.goto(script.url)

            context = ExecutionContext(driver=driver, assets=assets)
            await self._executor.run_scenes(script.setup, context)

            await driver.sleep(delays.load_settle_ms)
            loaded_time = self._clock()
            self._log.info(f"Loaded: took {loaded_time - start_time}ms")
            await driver.sleep(delays.load_settle_ms)

            await self._executor.run_scenes(script.narrative, context)
            await driver.sleep(delays.tail_ms)
        except BaseException:
            await self._close_after_failure(session)
            raise
        await session.close()

        record = TimingRecord.build(start_time, loaded_time, context.event_times)
        self._store.save(record)
        return SequenceResult(
            record=record,
            timings_path=self._store.path,
            videos_dir=self._videos_dir,
            steps_executed=context.steps_executed,
        )
