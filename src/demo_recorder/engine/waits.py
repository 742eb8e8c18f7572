"""
Waits - Poll-until-true primitives over observable UI state.

A predicate either returns a bool or raises. False means "not yet" and is
polled again after a fixed interval; an exception means the condition
cannot be evaluated at all (typically a required element is missing) and
is propagated immediately. There is no timeout here: the browser session's
own timeout is the backstop.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from demo_recorder.interfaces.driver import IDriver, Target

logger = logging.getLogger(__name__)

Predicate = Callable[[], Awaitable[bool]]
Sleeper = Callable[[int], Awaitable[None]]


async def _asyncio_sleep(ms: int) -> None:
    await asyncio.sleep(ms / 1000)


async def poll_until(
    predicate: Predicate,
    interval_ms: int,
    description: str = "condition",
    sleep: Optional[Sleeper] = None,
    log: Optional[logging.Logger] = None,
) -> int:
    """
    Evaluate ``predicate`` until it returns True.

    Args:
        predicate: Async callable returning whether the condition holds
        interval_ms: Pause between evaluations
        description: What is being waited for (for logs)
        sleep: Suspension function (defaults to asyncio.sleep)
        log: Logger to report progress to

    Returns:
        Number of evaluations performed
    """
    sleep = sleep or _asyncio_sleep
    log = log or logger
    attempts = 0
    while True:
        attempts += 1
        if await predicate():
            log.debug(f"{description}: satisfied after {attempts} poll(s)")
            return attempts
        await sleep(interval_ms)


async def wait_for_count(
    driver: IDriver,
    target: Target,
    expected: int,
    interval_ms: int,
    log: Optional[logging.Logger] = None,
) -> int:
    """
    Wait until exactly ``expected`` elements match ``target``.

    Used to make sure content has fully rendered rather than racing a
    partial render.
    """
    log = log or logger

    async def reached() -> bool:
        current = await driver.count(target)
        if current == expected:
            return True
        log.info(f"Waiting for {target}: {current}/{expected}")
        return False

    return await poll_until(
        reached, interval_ms, f"count({target}) == {expected}", driver.sleep, log
    )


async def wait_for_enabled(
    driver: IDriver,
    target: Target,
    interval_ms: int,
    log: Optional[logging.Logger] = None,
) -> int:
    """
    Wait until the control's disabled flag clears.

    A missing control raises ElementNotFoundError from the driver.
    """

    async def enabled() -> bool:
        return await driver.is_enabled(target)

    return await poll_until(enabled, interval_ms, f"enabled({target})", driver.sleep, log)


class WaitKind(Enum):
    """Which primitive a WaitFor uses."""
    COUNT = "count"
    ENABLED = "enabled"


@dataclass(frozen=True)
class WaitFor:
    """
    Declarative post-condition for a step.

    Attributes:
        kind: Which primitive to use
        target: Element(s) the condition is about
        expected: Element count for COUNT waits
        interval_ms: Poll interval (falls back to the configured default)
        label: Name used in logs
    """
    kind: WaitKind
    target: Target
    expected: Optional[int] = None
    interval_ms: Optional[int] = None
    label: Optional[str] = None

    @classmethod
    def count(cls, target: Target, expected: int, interval_ms: Optional[int] = None,
              label: Optional[str] = None) -> "WaitFor":
        return cls(WaitKind.COUNT, target, expected, interval_ms, label)

    @classmethod
    def enabled(cls, target: Target, interval_ms: Optional[int] = None,
                label: Optional[str] = None) -> "WaitFor":
        return cls(WaitKind.ENABLED, target, None, interval_ms, label)

    def __post_init__(self) -> None:
        if self.kind is WaitKind.COUNT and self.expected is None:
            raise ValueError("COUNT waits need an expected count")

    def describe(self) -> str:
        if self.label:
            return self.label
        if self.kind is WaitKind.COUNT:
            return f"count({self.target}) == {self.expected}"
        return f"enabled({self.target})"


async def await_condition(
    driver: IDriver,
    wait: WaitFor,
    default_interval_ms: int,
    log: Optional[logging.Logger] = None,
) -> int:
    """Run the primitive a WaitFor describes."""
    interval = wait.interval_ms if wait.interval_ms is not None else default_interval_ms
    (log or logger).info(f"Waiting for {wait.describe()}")
    if wait.kind is WaitKind.COUNT:
        return await wait_for_count(driver, wait.target, wait.expected, interval, log)
    return await wait_for_enabled(driver, wait.target, interval, log)
