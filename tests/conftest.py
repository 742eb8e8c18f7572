"""
Pytest configuration and fixtures.

The recording core only talks to the browser through IDriver and
IRecordingSession, so every test runs against the in-memory fakes below;
no browser or encoder is launched.
"""

import itertools
from typing import Any, Dict, List, Optional, Tuple

import pytest

from demo_recorder.exceptions import ElementNotFoundError
from demo_recorder.interfaces.driver import IDriver, IRecordingSession, Target


# =============================================================================
# FAKE DRIVER
# =============================================================================

class FakeDriver(IDriver):
    """
    Scripted stand-in for a page.

    Attributes:
        counts: Successive count() results per selector; the last value repeats
        enabled: Successive is_enabled() results per target description
        missing: Target descriptions that raise ElementNotFoundError when queried
        calls: Every call as (method, target description, extra)
        sleeps: Every sleep duration, in order
    """

    def __init__(
        self,
        counts: Optional[Dict[str, List[int]]] = None,
        enabled: Optional[Dict[str, List[bool]]] = None,
        missing: Optional[set] = None,
        extent: Tuple[float, float] = (80.0, 200.0),
    ):
        self.counts = {k: list(v) for k, v in (counts or {}).items()}
        self.enabled = {k: list(v) for k, v in (enabled or {}).items()}
        self.missing = set(missing or ())
        self._extent = extent
        self.calls: List[Tuple[str, Optional[str], Any]] = []
        self.sleeps: List[int] = []

    def _next(self, table: Dict[str, list], key: str, default: Any) -> Any:
        values = table.get(key)
        if not values:
            return default
        if len(values) > 1:
            return values.pop(0)
        return values[0]

    def _check(self, target: Target) -> None:
        if str(target) in self.missing:
            raise ElementNotFoundError(f"Required element not found: {target}", selector=str(target))

    def calls_of(self, method: str) -> List[Tuple[str, Optional[str], Any]]:
        return [c for c in self.calls if c[0] == method]

    async def goto(self, url: str) -> None:
        self.calls.append(("goto", None, url))

    async def count(self, target: Target) -> int:
        value = self._next(self.counts, target.selector, 0)
        self.calls.append(("count", str(target), value))
        return value

    async def is_enabled(self, target: Target) -> bool:
        self._check(target)
        value = self._next(self.enabled, str(target), True)
        self.calls.append(("is_enabled", str(target), value))
        return value

    async def extent(self, target: Target) -> Tuple[float, float]:
        self._check(target)
        return self._extent

    async def click(self, target: Target, position=None, force: bool = False) -> None:
        self._check(target)
        self.calls.append(("click", str(target), {"position": position, "force": force}))

    async def type_text(self, target: Target, text: str, delay_ms: int = 0) -> None:
        self._check(target)
        self.calls.append(("type_text", str(target), {"text": text, "delay_ms": delay_ms}))

    async def press(self, target: Target, key: str) -> None:
        self._check(target)
        self.calls.append(("press", str(target), key))

    async def drop_file(self, target: Target, filename: str, data: bytes) -> None:
        self._check(target)
        self.calls.append(("drop_file", str(target), {"filename": filename, "data": data}))

    async def inject_cursor(self, svg: bytes) -> None:
        self.calls.append(("inject_cursor", None, svg))

    async def move_cursor(self, target: Target, fx: float, fy: float) -> None:
        self._check(target)
        self.calls.append(("move_cursor", str(target), (fx, fy)))

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        self.calls.append(("evaluate", None, arg))
        return None

    async def sleep(self, ms: int) -> None:
        self.sleeps.append(ms)
        self.calls.append(("sleep", None, ms))


class CollectionDriver(FakeDriver):
    """
    FakeDriver holding a live list of items matched by ``item_selector``.

    Clicking an item's remove control deletes whatever item currently sits
    at that index, the way a real DOM shifts after a removal.
    """

    def __init__(self, items: List[str], item_selector: str, remove_selector: str, **kwargs):
        super().__init__(**kwargs)
        self.items = list(items)
        self.item_selector = item_selector
        self.remove_selector = remove_selector
        self.removed: List[str] = []

    async def count(self, target: Target) -> int:
        if target.selector == self.item_selector:
            return len(self.items)
        return await super().count(target)

    async def click(self, target: Target, position=None, force: bool = False) -> None:
        await super().click(target, position, force)
        parent = target.parent
        if (
            target.selector == self.remove_selector
            and parent is not None
            and parent.selector == self.item_selector
        ):
            index = parent.index or 0
            if index >= len(self.items):
                raise ElementNotFoundError(f"No item at {index}", selector=str(target))
            self.removed.append(self.items.pop(index))


# =============================================================================
# FAKE SESSION
# =============================================================================

class FakeSession(IRecordingSession):
    """Records lifecycle calls; hands out a prepared FakeDriver."""

    def __init__(
        self,
        driver: FakeDriver,
        events: List[str],
        start_error: Exception | None = None,
        close_error: Exception | None = None,
    ):
        self.driver = driver
        self.events = events
        self.start_error = start_error
        self.close_error = close_error
        self.closed = False

    async def start(self) -> None:
        self.events.append("start")
        if self.start_error:
            raise self.start_error

    async def open_page(self) -> IDriver:
        self.events.append("open_page")
        return self.driver

    async def close(self) -> None:
        self.events.append("close")
        self.closed = True
        if self.close_error:
            raise self.close_error


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def settings(tmp_path):
    """Provide test settings writing into a temporary directory."""
    from demo_recorder.config import Settings, BrowserSettings, RecordingSettings, EncoderSettings

    return Settings(
        browser=BrowserSettings(headless=True),
        recording=RecordingSettings(
            target_url="http://localhost:5173",
            project_file=str(tmp_path / "demo.vvproj"),
            videos_dir=str(tmp_path / "videos"),
            timings_path=str(tmp_path / "timings.json"),
        ),
        encoder=EncoderSettings(output_path=str(tmp_path / "dist.mp4")),
    )


@pytest.fixture
def fake_driver():
    """Provide a fake driver where every query succeeds immediately."""
    return FakeDriver()


@pytest.fixture
def driver_factory():
    """Provide the FakeDriver class for tests that script its answers."""
    return FakeDriver


@pytest.fixture
def collection_driver_factory():
    """Provide the CollectionDriver class."""
    return CollectionDriver


@pytest.fixture
def session_events():
    """Lifecycle events shared by the fake session and the test."""
    return []


@pytest.fixture
def session_factory(session_events):
    """Build a session factory around a given driver."""

    def make(
        driver: FakeDriver,
        start_error: Exception | None = None,
        close_error: Exception | None = None,
    ):
        sessions: List[FakeSession] = []

        def factory() -> FakeSession:
            session = FakeSession(driver, session_events, start_error, close_error)
            sessions.append(session)
            return session

        factory.sessions = sessions
        return factory

    return make


@pytest.fixture
def clock():
    """Deterministic clock advancing 100 ms per reading, starting at 1000."""
    ticks = itertools.count(1000, 100)
    return lambda: next(ticks)
