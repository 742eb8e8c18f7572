"""
Driver Interface - Abstract base classes for the UI automation engine.

The sequencer only talks to the page through IDriver, and only acquires a
page through IRecordingSession. The Playwright implementation lives in
demo_recorder.browsers; tests replay scripts against in-memory fakes.

Example:
    >>> session = PlaywrightSession(settings)
    >>> await session.start()
    >>> driver = await session.open_page()
    >>> await driver.goto("https://example.com")
    >>> await session.close()
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple


class Axis(Enum):
    """Direction along which a slider's value varies."""
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class Target:
    """
    Locator description for one element.

    Resolution is lazy: the driver re-resolves the chain every time it is
    used, so ``index`` always refers to the page as it is at that moment.

    Attributes:
        selector: CSS selector
        has_text: Only match elements containing this text
        index: Which match to use (first match when None)
        parent: Scope the search within another target
    """
    selector: str
    has_text: Optional[str] = None
    index: Optional[int] = None
    parent: Optional["Target"] = None

    def nth(self, index: int) -> "Target":
        """Same locator, pinned to the match at ``index``."""
        return Target(self.selector, self.has_text, index, self.parent)

    def child(self, selector: str, has_text: Optional[str] = None) -> "Target":
        """First descendant of this target matching ``selector``."""
        return Target(selector, has_text, None, self)

    def describe(self) -> str:
        """Human-readable locator chain, used in logs and error details."""
        part = self.selector
        if self.has_text is not None:
            part += f' :has-text("{self.has_text}")'
        if self.index is not None:
            part += f" >> nth={self.index}"
        if self.parent is not None:
            return f"{self.parent.describe()} >> {part}"
        return part

    def __str__(self) -> str:
        return self.describe()


class IDriver(ABC):
    """
    Abstract interface over a single live page.

    Query methods raise ElementNotFoundError when a required element is
    absent; they never report absence as a false condition.
    """

    @abstractmethod
    async def goto(self, url: str) -> None:
        """Navigate to the target application."""
        pass

    @abstractmethod
    async def count(self, target: Target) -> int:
        """Number of elements currently matching ``target`` (index ignored)."""
        pass

    @abstractmethod
    async def is_enabled(self, target: Target) -> bool:
        """Whether the control's disabled flag is clear."""
        pass

    @abstractmethod
    async def extent(self, target: Target) -> Tuple[float, float]:
        """Client width and height of the element."""
        pass

    @abstractmethod
    async def click(
        self,
        target: Target,
        position: Optional[Tuple[float, float]] = None,
        force: bool = False,
    ) -> None:
        """Click the element, optionally at an offset from its top-left corner."""
        pass

    @abstractmethod
    async def type_text(self, target: Target, text: str, delay_ms: int = 0) -> None:
        """Type text one key at a time."""
        pass

    @abstractmethod
    async def press(self, target: Target, key: str) -> None:
        """Press a single key on the element."""
        pass

    @abstractmethod
    async def drop_file(self, target: Target, filename: str, data: bytes) -> None:
        """Dispatch a file drop of ``data`` onto the element."""
        pass

    @abstractmethod
    async def inject_cursor(self, svg: bytes) -> None:
        """Install the visible cursor overlay."""
        pass

    @abstractmethod
    async def move_cursor(self, target: Target, fx: float, fy: float) -> None:
        """Start moving the cursor overlay to a fractional point of the target's box."""
        pass

    @abstractmethod
    async def evaluate(self, script: str, arg: Any = None) -> Any:
        """Run a page script; a script that throws raises StructuralUIError."""
        pass

    @abstractmethod
    async def sleep(self, ms: int) -> None:
        """Suspend for a fixed duration."""
        pass


class IRecordingSession(ABC):
    """
    A browser session that records video of exactly one page.

    ``close`` must be safe to call on every exit path, including after a
    failed ``start``.
    """

    @abstractmethod
    async def start(self) -> None:
        """Launch the browser."""
        pass

    @abstractmethod
    async def open_page(self) -> IDriver:
        """Create the recorded page; recording starts here."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the page and browser, flushing the recording to disk."""
        pass
