"""
Reporting module for demo-recorder.

Provides the timing record handed from the recording phase to compositing.
"""

from demo_recorder.reporting.timing_record import (
    TimingRecord,
    TimingStore,
)

__all__ = [
    "TimingRecord",
    "TimingStore",
]
