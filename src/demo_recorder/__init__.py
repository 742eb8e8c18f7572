"""
Demo Recorder - Scripted, reproducible web app demo recordings.

This package drives a web application through a declarative script of UI
interactions while recording video, captures timestamps of the moments
that matter, and trims the recording to start where the narrative does.

Example:
    >>> from demo_recorder import Sequencer, Compositor, load_config
    >>> settings = load_config()
    >>> await Sequencer(settings, lambda: PlaywrightSession(settings)).run(script, assets)
    >>> Compositor(settings).composite()
"""

__version__ = "0.1.0"

# Public API exports
from demo_recorder.config import Settings, load_config
from demo_recorder.engine.sequencer import Sequencer
from demo_recorder.composite.compositor import Compositor
from demo_recorder.reporting.timing_record import TimingRecord

__all__ = [
    "Settings",
    "load_config",
    "Sequencer",
    "Compositor",
    "TimingRecord",
    "__version__",
]
