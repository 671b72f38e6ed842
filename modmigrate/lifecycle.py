"""Render lifecycle tracking.

The renderer enters and leaves named phases ("the_content",
"wp_ajax_et_fb_retrieve_builder_data", ...). Phases nest; the outermost
active phase identifies where a migration call originates. Each phase's
fire count for the current request drives the render-pass gate.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum


class PhaseState(Enum):
    """How often a phase has fired during this request."""

    UNSEEN = "unseen"
    SEEN_ONCE = "seen_once"
    SEEN_MORE = "seen_more"


class RenderLifecycle:
    """Stack of active render phases plus per-phase fire counts."""

    def __init__(self):
        self._stack: list[str] = []
        self._fired: Counter[str] = Counter()

    def enter(self, phase: str) -> None:
        self._stack.append(phase)
        self._fired[phase] += 1

    def leave(self) -> str:
        if not self._stack:
            raise RuntimeError("No render phase to leave")
        return self._stack.pop()

    @contextmanager
    def phase(self, name: str) -> Iterator[RenderLifecycle]:
        """Run a block inside a render phase.

        Usage:
            with lifecycle.phase("the_content"):
                context.migrate_attrs(...)
        """
        self.enter(name)
        try:
            yield self
        finally:
            self.leave()

    @property
    def current_phase(self) -> str:
        """Outermost active phase, or "" outside any phase."""
        return self._stack[0] if self._stack else ""

    def fire_count(self, phase: str) -> int:
        return self._fired[phase]

    def state(self, phase: str) -> PhaseState:
        count = self._fired[phase]
        if count == 0:
            return PhaseState.UNSEEN
        if count == 1:
            return PhaseState.SEEN_ONCE
        return PhaseState.SEEN_MORE

    def reset(self) -> None:
        self._stack.clear()
        self._fired.clear()
