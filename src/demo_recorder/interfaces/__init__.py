"""
Interfaces module - Abstract contracts between the core and the automation engine.
"""

from demo_recorder.interfaces.driver import (
    Axis,
    Target,
    IDriver,
    IRecordingSession,
)

__all__ = [
    "Axis",
    "Target",
    "IDriver",
    "IRecordingSession",
]
