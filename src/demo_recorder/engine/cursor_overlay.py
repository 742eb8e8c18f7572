"""
Cursor Overlay - A visible pointer for recordings.

Headless and automated browsers do not draw the mouse pointer, so the
recording would show controls reacting to nothing. This module injects an
SVG pointer into the page and glides it to each interaction target with a
CSS transition. The overlay is cosmetic only.
"""

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


CURSOR_ID = "demo-recorder-cursor"


# ============================================================================
# JAVASCRIPT
# ============================================================================

INJECT_CURSOR_JS = """
({ svg, id, size, transitionMs }) => {
    const existing = document.getElementById(id);
    if (existing) existing.remove();

    const container = document.createElement('div');
    container.style.position = 'fixed';
    container.style.pointerEvents = 'none';
    container.innerHTML = svg;
    document.body.appendChild(container);

    const cursor = container.firstElementChild;
    if (!cursor) {
        throw new Error('Cursor markup has no root element');
    }
    cursor.id = id;
    cursor.style.strokeWidth = '2px';
    cursor.style.position = 'fixed';
    cursor.style.pointerEvents = 'none';
    cursor.style.zIndex = '99999999';
    cursor.style.width = size + 'px';
    cursor.style.height = size + 'px';
    cursor.style.left = '10px';
    cursor.style.top = '10px';
    cursor.style.transition =
        'left ' + transitionMs + 'ms ease-out, top ' + transitionMs + 'ms ease-out';
}
"""

MOVE_CURSOR_JS = """
(target, { id, fx, fy }) => {
    const cursor = document.getElementById(id);
    if (!cursor) {
        throw new Error('Cursor overlay not injected');
    }
    const box = target.getBoundingClientRect();
    cursor.style.left = (box.left + box.width * fx) + 'px';
    cursor.style.top = (box.top + box.height * fy) + 'px';
}
"""


# ============================================================================
# OVERLAY MANAGER
# ============================================================================

@dataclass
class CursorConfig:
    """Configuration for the cursor overlay."""
    size_px: int = 32
    transition_ms: int = 500


class CursorOverlay:
    """
    Injects and moves the recording cursor.

    Usage:
        overlay = CursorOverlay(CursorConfig(transition_ms=500))
        await overlay.inject(page, svg_bytes)
        await overlay.move_to(page.locator("#play").first, 0.5, 0.5)
    """

    def __init__(self, config: CursorConfig | None = None):
        self.config = config or CursorConfig()

    async def inject(self, page: Any, svg: bytes) -> None:
        """
        Install the cursor element.

        Args:
            page: Playwright page
            svg: Raw SVG markup, passed through untouched
        """
        await page.evaluate(
            INJECT_CURSOR_JS,
            {
                "svg": svg.decode("utf-8"),
                "id": CURSOR_ID,
                "size": self.config.size_px,
                "transitionMs": self.config.transition_ms,
            },
        )
        logger.debug("Cursor overlay injected")

    async def move_to(self, locator: Any, fx: float, fy: float) -> None:
        """Start the transition towards ``origin + size * (fx, fy)`` of the locator's box."""
        await locator.evaluate(MOVE_CURSOR_JS, {"id": CURSOR_ID, "fx": fx, "fy": fy})
