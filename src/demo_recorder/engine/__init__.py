"""
Engine module - Wait primitives, scripted steps and the sequencer.

Components:
- waits: Poll-until-true primitives (count reached, control enabled)
- steps: Declarative step, scene and script descriptors plus builders
- executor: Generic step interpreter
- sequencer: Session lifecycle, anchors and timing record persistence
- cursor_overlay: Visible cursor for recordings
"""

from demo_recorder.engine.waits import (
    WaitFor,
    WaitKind,
    poll_until,
    wait_for_count,
    wait_for_enabled,
    await_condition,
)
from demo_recorder.engine.steps import (
    ActionKind,
    SettleClass,
    SlideSpec,
    Step,
    Scene,
    Script,
    scene,
    caching_pass,
    cleanup_pass,
    removal_order,
)
from demo_recorder.engine.executor import ExecutionContext, StepExecutor, wall_clock_ms
from demo_recorder.engine.sequencer import Sequencer, SequenceResult, load_assets

__all__ = [
    # Waits
    "WaitFor",
    "WaitKind",
    "poll_until",
    "wait_for_count",
    "wait_for_enabled",
    "await_condition",
    # Steps
    "ActionKind",
    "SettleClass",
    "SlideSpec",
    "Step",
    "Scene",
    "Script",
    "scene",
    "caching_pass",
    "cleanup_pass",
    "removal_order",
    # Execution
    "ExecutionContext",
    "StepExecutor",
    "wall_clock_ms",
    "Sequencer",
    "SequenceResult",
    "load_assets",
]
