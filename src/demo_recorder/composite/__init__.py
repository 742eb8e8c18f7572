"""
Composite module - Turns the raw recording into the final trimmed video.
"""

from demo_recorder.composite.compositor import (
    CompositeResult,
    Compositor,
    build_encoder_command,
    compute_trim_offset,
    find_recording,
)

__all__ = [
    "CompositeResult",
    "Compositor",
    "build_encoder_command",
    "compute_trim_offset",
    "find_recording",
]
