"""
Timing Record - Anchor and beat timestamps handed from recording to compositing.

The record is written once, after the browser session has closed, and read
once by the compositor, possibly in a separate process.

Serialized form:
    {"startTime": 1000, "loadedTime": 3500, "eventTimes": [4100, 9800]}
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, model_validator

from demo_recorder.exceptions import TimingRecordError

logger = logging.getLogger(__name__)


class TimingRecord(BaseModel):
    """
    Wall-clock instants (ms since the epoch) captured during one session.

    Attributes:
        start_time: When the recorded page was created
        loaded_time: When the setup phase finished and the narrative began
        event_times: Completion instants of recordable beats, in order
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    start_time: int = Field(alias="startTime", ge=0)
    loaded_time: int = Field(alias="loadedTime", ge=0)
    # "audioTimes" is what records from the first tooling generation used
    event_times: Tuple[int, ...] = Field(
        default=(),
        validation_alias=AliasChoices("eventTimes", "audioTimes", "event_times"),
        serialization_alias="eventTimes",
    )

    @model_validator(mode="after")
    def _check_order(self) -> "TimingRecord":
        instants = [self.start_time, self.loaded_time, *self.event_times]
        for earlier, later in zip(instants, instants[1:]):
            if later < earlier:
                raise ValueError(
                    f"timestamps must be non-decreasing: {later} follows {earlier}"
                )
        return self

    @classmethod
    def build(
        cls,
        start_time: int,
        loaded_time: int,
        event_times: Iterable[int] = (),
    ) -> "TimingRecord":
        """Create a record, raising TimingRecordError if it is inconsistent."""
        try:
            return cls(start_time=start_time, loaded_time=loaded_time, event_times=tuple(event_times))
        except ValidationError as e:
            raise TimingRecordError(f"Inconsistent timing record: {e}")

    @property
    def setup_duration_ms(self) -> int:
        return self.loaded_time - self.start_time

    def relative_event_seconds(self) -> List[float]:
        """Each beat's offset from the loaded anchor, i.e. its time in the trimmed video."""
        return [(t - self.loaded_time) / 1000 for t in self.event_times]

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class TimingStore:
    """
    Persists a TimingRecord at a well-known path.

    Example:
        >>> store = TimingStore("./composite/timings.json")
        >>> store.save(TimingRecord.build(1000, 3500, [4000]))
        >>> store.load().loaded_time
        3500
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def clear(self) -> None:
        """Remove a record left over from a previous run."""
        if self.path.exists():
            logger.info(f"Removing stale timing record: {self.path}")
            self.path.unlink()

    def save(self, record: TimingRecord) -> Path:
        """Write the record atomically (temporary file, then rename)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(record.to_json())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info(f"Timing record written: {self.path}")
        return self.path

    def load(self) -> TimingRecord:
        """
        Read and validate the record.

        Raises:
            TimingRecordError: If the file is missing, unreadable or inconsistent
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise TimingRecordError("Timing record not found", path=str(self.path))
        except OSError as e:
            raise TimingRecordError(f"Cannot read timing record: {e}", path=str(self.path))

        try:
            return TimingRecord.model_validate_json(raw)
        except ValidationError as e:
            raise TimingRecordError(f"Invalid timing record: {e}", path=str(self.path))
