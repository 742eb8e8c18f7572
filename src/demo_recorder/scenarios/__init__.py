"""
Scenarios module - Concrete recording scripts for target applications.
"""

from demo_recorder.scenarios import editor_tour

SCENARIOS = {
    "editor-tour": editor_tour,
}

__all__ = [
    "SCENARIOS",
    "editor_tour",
]
