"""
Editor Tour - Demo script for the VOICEVOX speech-synthesis editor.

Everything specific to the target application (selectors, button labels,
slider ranges, which cells exist only to warm the synthesis cache) lives
in this module.

The project file holds nine text cells. Cells 1, 4, 6 and 8 are copies of
the text the tour produces later, synthesized up front so the narrative
plays back instantly; they are removed before the loaded anchor.
"""

from pathlib import Path
from typing import Dict, List

from demo_recorder.config.settings import Settings
from demo_recorder.engine.steps import (
    Scene,
    Script,
    SettleClass,
    SlideSpec,
    Step,
    caching_pass,
    cleanup_pass,
    click,
    drop_file,
    evaluate,
    inject_cursor,
    move,
    press,
    scene,
    slide,
    type_text,
    wait_only,
)
from demo_recorder.engine.waits import WaitFor
from demo_recorder.interfaces.driver import Axis, Target

CURSOR_ASSET = "cursor.svg"

CELL_COUNT = 9
CACHE_CELLS = (1, 4, 6, 8)

# Intonation sliders run from 6.5 (top) to 3.0 (bottom), length sliders
# from 0.3 (top) to 0.0 (bottom)
PITCH_RANGE = (6.5, 3.0)
LENGTH_RANGE = (0.3, 0.0)

CELLS = Target(".audio-cell")
CELL_PANE = Target(".audio-cell-pane")
PLAY_BUTTON = Target(".play-button-wrapper button")
PITCH_SLIDERS = Target(".pitch-cell .q-slider__track")

# The play button turns enabled once synthesis finishes and playback starts
PLAYBACK_STARTED = WaitFor.enabled(PLAY_BUTTON, label="playback started")
# End of playback is observed on the first cell's text input, not on the play button
PLAYBACK_FINISHED = WaitFor.enabled(CELLS.child("input"), label="playback finished")

SET_TITLE_JS = """
(title) => {
    const windowTitle = document.querySelector('.window-title');
    if (!windowTitle) {
        throw new Error('Window title not found');
    }
    windowTitle.textContent = title;
}
"""

RESET_SCROLL_JS = """
() => {
    const pane = document.querySelector('.audio-cells');
    if (!pane) {
        throw new Error('.audio-cells not found');
    }
    pane.scrollTo(0, 0);
}
"""


def project_asset(settings: Settings) -> str:
    return Path(settings.recording.project_file).name


def asset_paths(settings: Settings) -> Dict[str, Path]:
    """Files the tour needs, by the asset name its steps refer to."""
    return {
        project_asset(settings): Path(settings.recording.project_file),
        CURSOR_ASSET: Path(settings.recording.cursor_file),
    }


def detail_tab(label: str) -> Target:
    return Target(".detail-selector .q-tab", has_text=label)


def cell_input(index: int) -> Target:
    return CELLS.nth(index).child("input")


def select_cell(index: int) -> Step:
    return click(
        cell_input(index),
        name=f"select cell {index}",
        cursor=(0.2, 1),
        settle=SettleClass.ACTION,
    )


def play(settle: SettleClass = SettleClass.CELL) -> List[Step]:
    """Play the selected cell; playback start is a recordable beat."""
    return [
        click(PLAY_BUTTON, name="play", cursor=(0.5, 0.5), wait=PLAYBACK_STARTED, record=True),
        wait_only("wait for playback to finish", PLAYBACK_FINISHED, settle=settle),
    ]


def setup_scenes(settings: Settings) -> List[Scene]:
    """Everything before the loaded anchor: trimmed out of the final video."""
    remove_cells = cleanup_pass(
        CELLS,
        CACHE_CELLS,
        select="input",
        remove="i",
        remove_text="delete_outline",
    )
    return [
        scene(
            "Initializing",
            click(Target("button", has_text="同意して使用開始"), name="accept terms"),
            click(Target("button", has_text="完了"), name="finish setup"),
            click(Target("button", has_text="許可"), name="allow"),
        ),
        scene(
            "Loading project file",
            drop_file(CELL_PANE, project_asset(settings), name="drop project file"),
            inject_cursor(CURSOR_ASSET),
            evaluate("set window title", SET_TITLE_JS, settings.recording.window_title),
        ),
        scene(
            "Waiting for cells",
            wait_only(
                "all cells rendered",
                WaitFor.count(
                    CELLS,
                    CELL_COUNT,
                    interval_ms=settings.delays.count_poll_interval_ms,
                    label=f"{CELL_COUNT} cells",
                ),
            ),
        ),
        scene(
            "0: Do initial set up",
            click(CELLS, name="select first cell"),
        ),
        scene(
            "Caching audios",
            caching_pass(CELLS, CELL_COUNT, "input", PLAY_BUTTON, PLAYBACK_STARTED),
        ),
        scene(
            "Confirming tips",
            click(detail_tab("ｲﾝﾄﾈｰｼｮﾝ"), name="open intonation tab"),
            click(Target(".tip-tweakable-slider-by-scroll button", has_text="OK"), name="dismiss tip"),
            click(detail_tab("ｱｸｾﾝﾄ"), name="back to accent tab"),
        ),
        scene("Deleting cache cells", remove_cells),
        scene(
            "Resetting scroll position",
            evaluate("scroll cells to top", RESET_SCROLL_JS),
            move(cell_input(0), (0.2, 1), name="park cursor"),
        ),
    ]


def narrative_scenes() -> List[Scene]:
    """The timed portion: every play is a beat."""
    return [
        scene(
            "1: Typing new text",
            type_text(cell_input(0), "ここに文章を入力します", settle=SettleClass.KEYBOARD),
            press(cell_input(0), "Enter", settle=SettleClass.CELL),
        ),
        scene(
            "2: Play",
            select_cell(1),
            play(),
        ),
        scene(
            "3: Adjust accent",
            select_cell(2),
            play(settle=SettleClass.ACTION),
            slide(
                Target(".accent-phrase-table .mora-table:nth-child(4) .q-slider"),
                SlideSpec(value=3 / 8, start=0.0, end=1.0, axis=Axis.HORIZONTAL),
                name="move accent",
                cursor_cross=1,
                move_settle=SettleClass.ACTION,
            ),
            play(),
        ),
        scene(
            "4: Adjust intonation",
            select_cell(3),
            play(settle=SettleClass.ACTION),
            click(detail_tab("ｲﾝﾄﾈｰｼｮﾝ"), name="open intonation tab", cursor=(0.5, 0.5)),
            slide(
                PITCH_SLIDERS.nth(0),
                SlideSpec(5.85, *PITCH_RANGE, axis=Axis.VERTICAL),
                name="raise first mora",
            ),
            slide(
                PITCH_SLIDERS.nth(18),
                SlideSpec(5.91, *PITCH_RANGE, axis=Axis.VERTICAL),
                name="raise last mora",
            ),
            click(
                detail_tab("長さ"),
                name="open length tab",
                cursor=(0.5, 0.5),
                move_settle=SettleClass.KEYBOARD,
                settle=SettleClass.ACTION,
            ),
            # Clicks further right land on the neighbouring mora's handle
            slide(
                PITCH_SLIDERS.nth(1),
                SlideSpec(0.207, *LENGTH_RANGE, axis=Axis.VERTICAL, cross_offset=5, force=True),
                name="lengthen second mora",
            ),
            play(),
        ),
        scene(
            "5: Change character",
            select_cell(4),
            click(
                CELLS.nth(4).child(".character-button"),
                name="open character menu",
                cursor=(0.5, 0.5),
                settle=SettleClass.ACTION,
            ),
            click(
                Target("button", has_text="ずんだもん"),
                name="pick character",
                cursor=(0.5, 0.5),
                settle=SettleClass.ACTION,
            ),
            play(),
        ),
    ]


def build_script(settings: Settings) -> Script:
    """Assemble the full tour."""
    return Script(
        url=settings.recording.target_url,
        setup=tuple(setup_scenes(settings)),
        narrative=tuple(narrative_scenes()),
    )
