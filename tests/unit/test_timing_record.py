"""
Tests for the timing record and its store.
"""

import json

import pytest
from pydantic import ValidationError

from demo_recorder.exceptions import PreconditionError, TimingRecordError
from demo_recorder.reporting.timing_record import TimingRecord, TimingStore


class TestTimingRecord:
    """Test record validation."""

    def test_build(self):
        """Test a consistent record."""
        record = TimingRecord.build(1000, 3500, [4000, 9000])
        assert record.setup_duration_ms == 2500
        assert record.event_times == (4000, 9000)

    def test_equal_instants_allowed(self):
        """Test non-decreasing rather than strictly increasing."""
        record = TimingRecord.build(1000, 1000, [1000, 1000])
        assert record.loaded_time == 1000

    @pytest.mark.parametrize("start,loaded,events", [
        (3500, 1000, []),
        (1000, 3500, [3000]),
        (1000, 3500, [5000, 4000]),
        (-1, 3500, []),
    ])
    def test_inconsistent_record(self, start, loaded, events):
        """Test out-of-order instants are rejected."""
        with pytest.raises(TimingRecordError):
            TimingRecord.build(start, loaded, events)

    def test_relative_event_seconds(self):
        """Test beats are reported relative to the loaded anchor."""
        record = TimingRecord.build(1000, 3500, [4000, 9750])
        assert record.relative_event_seconds() == [0.5, 6.25]

    def test_serialized_names(self):
        """Test the on-disk field names."""
        record = TimingRecord.build(1000, 3500, [4000])
        assert json.loads(record.to_json()) == {
            "startTime": 1000,
            "loadedTime": 3500,
            "eventTimes": [4000],
        }

    def test_accepts_audio_times(self):
        """Test records written under the older field name still load."""
        record = TimingRecord.model_validate_json(
            '{"startTime": 1000, "loadedTime": 3500, "audioTimes": [4000]}'
        )
        assert record.event_times == (4000,)

    def test_immutable(self):
        """Test records cannot be altered after capture."""
        record = TimingRecord.build(1000, 3500)
        with pytest.raises(ValidationError):
            record.loaded_time = 0


class TestTimingStore:
    """Test persistence."""

    def test_save_and_load(self, tmp_path):
        """Test a saved record loads back unchanged."""
        store = TimingStore(tmp_path / "composite" / "timings.json")
        record = TimingRecord.build(1000, 3500, [4000])

        path = store.save(record)

        assert path.exists()
        assert store.load() == record

    def test_save_leaves_no_temporary_files(self, tmp_path):
        """Test only the record remains after an atomic write."""
        store = TimingStore(tmp_path / "timings.json")
        store.save(TimingRecord.build(1, 2))
        assert [p.name for p in tmp_path.iterdir()] == ["timings.json"]

    def test_save_replaces_previous(self, tmp_path):
        """Test a second save overwrites the first."""
        store = TimingStore(tmp_path / "timings.json")
        store.save(TimingRecord.build(1, 2))
        store.save(TimingRecord.build(10, 20, [30]))
        assert store.load().event_times == (30,)

    def test_clear(self, tmp_path):
        """Test clearing removes the file and tolerates absence."""
        store = TimingStore(tmp_path / "timings.json")
        store.save(TimingRecord.build(1, 2))
        store.clear()
        assert not store.exists()
        store.clear()

    def test_missing_record(self, tmp_path):
        """Test loading a missing record is a precondition failure."""
        store = TimingStore(tmp_path / "timings.json")
        with pytest.raises(PreconditionError) as exc_info:
            store.load()
        assert isinstance(exc_info.value, TimingRecordError)
        assert exc_info.value.path == str(tmp_path / "timings.json")

    @pytest.mark.parametrize("content", [
        "not json",
        '{"startTime": 1000}',
        '{"startTime": 3500, "loadedTime": 1000, "eventTimes": []}',
        '{"startTime": "soon", "loadedTime": 1000, "eventTimes": []}',
    ])
    def test_invalid_record(self, tmp_path, content):
        """Test malformed or inconsistent records are rejected."""
        path = tmp_path / "timings.json"
        path.write_text(content)
        with pytest.raises(TimingRecordError):
            TimingStore(path).load()
