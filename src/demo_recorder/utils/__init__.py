"""
Utilities module - Common utility functions.
"""

from demo_recorder.utils.logging import setup_logging
from demo_recorder.utils.interpolation import inverse_lerp, lerp

__all__ = [
    "setup_logging",
    "inverse_lerp",
    "lerp",
]
