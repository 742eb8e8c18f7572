"""
Exceptions raised while driving the recorded browser.
"""

from demo_recorder.exceptions.base import DemoRecorderError


class BrowserError(DemoRecorderError):
    """Base exception for anything that goes wrong in the browser."""
    pass


class BrowserLaunchError(BrowserError):
    """
    Playwright could not start the browser.

    Usually the browser binaries are missing (`playwright install chromium`).
    """
    pass


class BrowserConnectionError(BrowserError):
    """
    Error talking to the browser.

    Raised when a page is requested from a session that was never started.
    """
    pass


class PageError(BrowserError):
    """Base exception for errors on the recorded page."""
    pass


class NavigationError(PageError):
    """
    The target application could not be opened.
    """

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message, {"url": url})
        self.url = url


class StructuralUIError(PageError):
    """
    The page no longer has the shape the script expects.

    Raised when a required element or control is absent, or a page
    script fails while inspecting the DOM. Never retried.
    """
    pass


class ElementNotFoundError(StructuralUIError):
    """
    A required element is absent.

    Raised instead of reporting a wait condition as false.
    """

    def __init__(self, message: str, selector: str):
        super().__init__(message, {"selector": selector})
        self.selector = selector


class ActionExecutionError(StructuralUIError):
    """
    Error dispatching an action.

    Raised when a click, keystroke or drop cannot reach its target.
    """

    def __init__(self, message: str, action_type: str, selector: str | None = None):
        super().__init__(message, {"action_type": action_type, "selector": selector})
        self.action_type = action_type
        self.selector = selector
