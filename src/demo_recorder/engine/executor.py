"""
Executor - Interprets scripted steps against a driver.

Steps run strictly one after another and are never retried: a failure
aborts the whole run with the scene and step names attached.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from demo_recorder.config.settings import DelaySettings
from demo_recorder.engine.steps import ActionKind, Scene, SettleClass, Step
from demo_recorder.engine.waits import await_condition
from demo_recorder.exceptions import ConfigurationError, DemoRecorderError
from demo_recorder.interfaces.driver import IDriver

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def wall_clock_ms() -> int:
    """Milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


@dataclass
class ExecutionContext:
    """
    State carried across scenes.

    Attributes:
        driver: Page driver
        assets: Opaque payloads by name
        event_times: Recorded beat instants, in order
        steps_executed: Number of steps completed
    """
    driver: IDriver
    assets: Mapping[str, bytes] = field(default_factory=dict)
    event_times: List[int] = field(default_factory=list)
    steps_executed: int = 0


class StepExecutor:
    """
    Generic step interpreter.

    Example:
        >>> executor = StepExecutor(settings.delays)
        >>> context = ExecutionContext(driver=driver, assets={"cursor": svg})
        >>> await executor.run_scenes(script.narrative, context)
        >>> context.event_times
        [1734567890123, ...]
    """

    def __init__(
        self,
        delays: DelaySettings,
        clock: Optional[Clock] = None,
        log: Optional[logging.Logger] = None,
    ):
        """
        Initialize the executor.

        Args:
            delays: Settle durations and poll intervals
            clock: Source of recorded instants (wall-clock ms by default)
            log: Logger to report progress to
        """
        self._delays = delays
        self._clock = clock or wall_clock_ms
        self._log = log or logger
        self._settle_ms: Dict[SettleClass, int] = {
            SettleClass.NONE: 0,
            SettleClass.KEYBOARD: delays.keyboard_ms,
            SettleClass.ACTION: delays.action_ms,
            SettleClass.CELL: delays.cell_ms,
        }

    def settle_duration(self, settle: SettleClass) -> int:
        return self._settle_ms[settle]

    async def run_scenes(self, scenes: Sequence[Scene], context: ExecutionContext) -> None:
        """Run scenes in order."""
        for scene in scenes:
            await self.run_scene(scene, context)

    async def run_scene(self, scene: Scene, context: ExecutionContext) -> None:
        """
        Run one scene.

        Raises:
            DemoRecorderError: Whatever a step raised, with ``scene`` and
                ``step`` added to its details
        """
        self._log.info(scene.name)
        for step in scene.steps:
            try:
                await self.run_step(step, context)
            except DemoRecorderError as e:
                e.details.setdefault("scene", scene.name)
                e.details.setdefault("step", step.name)
                self._log.error(f"Scene '{scene.name}' failed at step '{step.name}': {e.message}")
                raise

    async def run_step(self, step: Step, context: ExecutionContext) -> None:
        """Run one step: move, act, wait, record, settle."""
        driver = context.driver
        self._log.debug(f"Step: {step.name}")

        if step.cursor is not None:
            await driver.move_cursor(step.target, *step.cursor)
            await driver.sleep(self._delays.cursor_move_ms)
        await self._sleep(driver, step.move_settle)

        await self._act(step, context)

        if step.wait is not None:
            await await_condition(driver, step.wait, self._delays.poll_interval_ms, self._log)

        if step.record:
            instant = self._clock()
            context.event_times.append(instant)
            self._log.info(f"Recorded beat #{len(context.event_times)} at {instant}")

        await self._sleep(driver, step.settle)
        context.steps_executed += 1

    async def _act(self, step: Step, context: ExecutionContext) -> None:
        driver = context.driver
        action = step.action

        if action in (ActionKind.NONE, ActionKind.MOVE):
            return
        if action is ActionKind.CLICK:
            await driver.click(step.target)
        elif action is ActionKind.TYPE:
            await driver.type_text(step.target, step.text, self._delays.keyboard_ms)
        elif action is ActionKind.PRESS:
            await driver.press(step.target, step.text)
        elif action is ActionKind.SLIDE:
            width, height = await driver.extent(step.target)
            position = step.slide.position(width, height)
            await driver.click(step.target, position=position, force=step.slide.force)
        elif action is ActionKind.DROP_FILE:
            await driver.drop_file(step.target, step.payload, self._asset(step, context))
        elif action is ActionKind.INJECT_CURSOR:
            await driver.inject_cursor(self._asset(step, context))
        elif action is ActionKind.EVALUATE:
            await driver.evaluate(step.script, step.script_arg)

    def _asset(self, step: Step, context: ExecutionContext) -> bytes:
        try:
            return context.assets[step.payload]
        except KeyError:
            raise ConfigurationError(f"Asset '{step.payload}' was not loaded")

    async def _sleep(self, driver: IDriver, settle: SettleClass) -> None:
        duration = self._settle_ms[settle]
        if duration > 0:
            await driver.sleep(duration)
