"""
Steps - Declarative description of a scripted recording.

A Script is plain data: named scenes made of immutable steps. The executor
interprets them one at a time, so the same script can be replayed against
a fake driver in tests.

Each step runs in a fixed order:
    cursor move -> cursor transition -> move settle -> action -> wait
    -> record timestamp -> settle
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

from demo_recorder.engine.waits import WaitFor
from demo_recorder.interfaces.driver import Axis, Target
from demo_recorder.utils.interpolation import inverse_lerp


class ActionKind(str, Enum):
    """What a step does once the cursor has arrived."""
    NONE = "none"
    MOVE = "move"
    CLICK = "click"
    TYPE = "type"
    PRESS = "press"
    SLIDE = "slide"
    DROP_FILE = "drop_file"
    INJECT_CURSOR = "inject_cursor"
    EVALUATE = "evaluate"


class SettleClass(str, Enum):
    """Named fixed pauses; durations come from DelaySettings."""
    NONE = "none"
    KEYBOARD = "keyboard"
    ACTION = "action"
    CELL = "cell"


@dataclass(frozen=True)
class SlideSpec:
    """
    Positional click on a continuous control.

    ``start`` is the domain value at the control's leading edge (left or
    top) and ``end`` the value at the trailing edge, so a vertical slider
    whose top is the maximum has ``start > end``.

    Attributes:
        value: Domain value to set
        start: Value at the leading edge
        end: Value at the trailing edge
        axis: Direction the value varies along
        cross_offset: Pixel offset on the other axis
        force: Skip actionability checks (for thin tracks under other handles)
    """
    value: float
    start: float
    end: float
    axis: Axis = Axis.HORIZONTAL
    cross_offset: float = 0.0
    force: bool = False

    @property
    def fraction(self) -> float:
        return inverse_lerp(self.value, self.start, self.end)

    def position(self, width: float, height: float) -> Tuple[float, float]:
        """Click position in element coordinates for a control of this size."""
        if self.axis is Axis.HORIZONTAL:
            return (width * self.fraction, self.cross_offset)
        return (self.cross_offset, height * self.fraction)


@dataclass(frozen=True)
class Step:
    """
    One atomic scripted interaction.

    Attributes:
        name: Label used in logs and error details
        action: What to do
        target: Element the step acts on
        cursor: Fractional (x, y) destination of the cursor within the target
        move_settle: Pause after the cursor arrives, before the action
        text: Text for TYPE, key for PRESS
        slide: Slider position for SLIDE
        payload: Asset name for DROP_FILE and INJECT_CURSOR
        script: Page script for EVALUATE
        script_arg: Argument passed to the page script
        wait: Post-condition to wait for after the action
        record: Append the completion instant to the event times
        settle: Pause at the end of the step
    """
    name: str
    action: ActionKind = ActionKind.NONE
    target: Optional[Target] = None
    cursor: Optional[Tuple[float, float]] = None
    move_settle: SettleClass = SettleClass.NONE
    text: Optional[str] = None
    slide: Optional[SlideSpec] = None
    payload: Optional[str] = None
    script: Optional[str] = None
    script_arg: Any = None
    wait: Optional[WaitFor] = None
    record: bool = False
    settle: SettleClass = SettleClass.NONE

    def __post_init__(self) -> None:
        needs_target = {
            ActionKind.MOVE, ActionKind.CLICK, ActionKind.TYPE, ActionKind.PRESS,
            ActionKind.SLIDE, ActionKind.DROP_FILE,
        }
        if self.action in needs_target and self.target is None:
            raise ValueError(f"Step '{self.name}': {self.action.value} needs a target")
        if self.cursor is not None and self.target is None:
            raise ValueError(f"Step '{self.name}': cursor moves need a target")
        if self.action in (ActionKind.TYPE, ActionKind.PRESS) and not self.text:
            raise ValueError(f"Step '{self.name}': {self.action.value} needs text")
        if self.action is ActionKind.SLIDE and self.slide is None:
            raise ValueError(f"Step '{self.name}': slide needs a SlideSpec")
        if self.action in (ActionKind.DROP_FILE, ActionKind.INJECT_CURSOR) and not self.payload:
            raise ValueError(f"Step '{self.name}': {self.action.value} needs a payload")
        if self.action is ActionKind.EVALUATE and not self.script:
            raise ValueError(f"Step '{self.name}': evaluate needs a script")


@dataclass(frozen=True)
class Scene:
    """A named block of steps; failures are reported against its name."""
    name: str
    steps: Tuple[Step, ...]

    @property
    def beats(self) -> int:
        return sum(1 for step in self.steps if step.record)


@dataclass(frozen=True)
class Script:
    """
    A complete recording script.

    Attributes:
        url: Address of the application
        setup: Scenes run before the loaded anchor (excluded from the video)
        narrative: Scenes run after the loaded anchor
    """
    url: str
    setup: Tuple[Scene, ...] = field(default_factory=tuple)
    narrative: Tuple[Scene, ...] = field(default_factory=tuple)

    @property
    def assets(self) -> frozenset:
        names = set()
        for scene in self.setup + self.narrative:
            names.update(step.payload for step in scene.steps if step.payload)
        return frozenset(names)

    @property
    def beats(self) -> int:
        return sum(scene.beats for scene in self.narrative)


def scene(name: str, *steps: Iterable[Step] | Step) -> Scene:
    """Build a scene from steps and lists of steps."""
    flat: List[Step] = []
    for item in steps:
        if isinstance(item, Step):
            flat.append(item)
        else:
            flat.extend(item)
    return Scene(name, tuple(flat))


# =============================================================================
# STEP BUILDERS
# =============================================================================

def click(
    target: Target,
    name: Optional[str] = None,
    cursor: Optional[Tuple[float, float]] = None,
    move_settle: SettleClass = SettleClass.NONE,
    wait: Optional[WaitFor] = None,
    record: bool = False,
    settle: SettleClass = SettleClass.NONE,
) -> Step:
    return Step(
        name=name or f"click {target}",
        action=ActionKind.CLICK,
        target=target,
        cursor=cursor,
        move_settle=move_settle,
        wait=wait,
        record=record,
        settle=settle,
    )


def move(
    target: Target,
    cursor: Tuple[float, float],
    name: Optional[str] = None,
    settle: SettleClass = SettleClass.NONE,
) -> Step:
    return Step(
        name=name or f"move to {target}",
        action=ActionKind.MOVE,
        target=target,
        cursor=cursor,
        settle=settle,
    )


def type_text(
    target: Target,
    text: str,
    name: Optional[str] = None,
    settle: SettleClass = SettleClass.KEYBOARD,
) -> Step:
    return Step(
        name=name or f"type into {target}",
        action=ActionKind.TYPE,
        target=target,
        text=text,
        settle=settle,
    )


def press(
    target: Target,
    key: str,
    name: Optional[str] = None,
    settle: SettleClass = SettleClass.NONE,
) -> Step:
    return Step(
        name=name or f"press {key}",
        action=ActionKind.PRESS,
        target=target,
        text=key,
        settle=settle,
    )


def slide(
    target: Target,
    spec: SlideSpec,
    name: Optional[str] = None,
    cursor_cross: float = 0.5,
    move_settle: SettleClass = SettleClass.KEYBOARD,
    settle: SettleClass = SettleClass.ACTION,
) -> Step:
    """
    Set a slider by clicking at the fraction ``spec.value`` occupies in its range.

    The cursor goes to the same fraction along the slider's axis and to
    ``cursor_cross`` across it.
    """
    fraction = spec.fraction
    if spec.axis is Axis.HORIZONTAL:
        cursor = (fraction, cursor_cross)
    else:
        cursor = (cursor_cross, fraction)
    return Step(
        name=name or f"slide {target} to {spec.value}",
        action=ActionKind.SLIDE,
        target=target,
        cursor=cursor,
        move_settle=move_settle,
        slide=spec,
        settle=settle,
    )


def drop_file(target: Target, payload: str, name: Optional[str] = None) -> Step:
    """Drop the asset named ``payload`` onto the target; the asset name is also the file name."""
    return Step(name=name or f"drop {payload}", action=ActionKind.DROP_FILE, target=target, payload=payload)


def inject_cursor(payload: str, name: str = "inject cursor") -> Step:
    return Step(name=name, action=ActionKind.INJECT_CURSOR, payload=payload)


def evaluate(name: str, script: str, arg: Any = None,
             settle: SettleClass = SettleClass.NONE) -> Step:
    return Step(name=name, action=ActionKind.EVALUATE, script=script, script_arg=arg, settle=settle)


def wait_only(name: str, wait: WaitFor, record: bool = False,
              settle: SettleClass = SettleClass.NONE) -> Step:
    return Step(name=name, wait=wait, record=record, settle=settle)


# =============================================================================
# SUB-PROTOCOLS
# =============================================================================

def caching_pass(
    items: Target,
    count: int,
    select: str,
    trigger: Target,
    active: WaitFor,
) -> List[Step]:
    """
    Force every item to be computed once before the timed portion.

    For each of ``count`` items: select it, press the trigger, wait until
    the result is active, press the trigger again to stop it.

    Args:
        items: Locator of the collection
        count: Known size of the collection
        select: Selector, within an item, that selects it
        trigger: Control that starts and stops the computation
        active: Condition meaning the computed result is available
    """
    steps: List[Step] = []
    for index in range(count):
        item = items.nth(index)
        steps.append(click(item.child(select), name=f"select item {index}"))
        steps.append(click(trigger, name=f"start item {index}", wait=active))
        steps.append(click(trigger, name=f"stop item {index}"))
    return steps


def removal_order(indices: Iterable[int]) -> List[int]:
    """Distinct indices, highest first, so removals never shift pending ones."""
    ordered = sorted(set(indices), reverse=True)
    if ordered and ordered[-1] < 0:
        raise ValueError(f"Negative index in removal set: {ordered[-1]}")
    return ordered


def cleanup_pass(
    items: Target,
    indices: Iterable[int],
    select: str,
    remove: str,
    remove_text: Optional[str] = None,
) -> List[Step]:
    """
    Remove a subset of items by their original indices.

    Args:
        items: Locator of the collection
        indices: Original indices of the items to remove
        select: Selector, within an item, that selects it
        remove: Selector, within an item, of its remove control
        remove_text: Text the remove control must contain
    """
    steps: List[Step] = []
    for index in removal_order(indices):
        item = items.nth(index)
        steps.append(click(item.child(select), name=f"select item {index}"))
        steps.append(click(item.child(remove, remove_text), name=f"remove item {index}"))
    return steps
