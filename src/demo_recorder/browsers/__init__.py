"""
Browsers module - Browser automation implementations.
"""

from demo_recorder.browsers.playwright_browser import PlaywrightDriver, PlaywrightSession

__all__ = [
    "PlaywrightDriver",
    "PlaywrightSession",
]
