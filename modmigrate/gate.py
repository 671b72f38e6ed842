"""Render-pass gate: decide whether migrations run for the current phase.

The same module can be processed several times within one page render
(markup generation, then a builder data feed). The gate allows a pass
unless its phase is watched and has fired more than once, and keeps only
the decision for the most recent phase.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from modmigrate.lifecycle import PhaseState, RenderLifecycle

logger = logging.getLogger(__name__)

KnownModuleTypes = Callable[[], Iterable[str]]


class RenderPassGate:
    """Single-slot memo of the last phase's allow/deny decision."""

    def __init__(
        self,
        lifecycle: RenderLifecycle,
        known_module_types: KnownModuleTypes,
        watched_phases: Iterable[str],
    ):
        self.lifecycle = lifecycle
        self.known_module_types = known_module_types
        self.watched_phases = frozenset(watched_phases)
        self._last_phase: str | None = None
        self._last_decision = False
        self._known: frozenset[str] = frozenset()

    def should_run(self, module_type: str) -> bool:
        """Check whether migrations should run for this module now.

        Args:
            module_type: Module type about to be rendered

        Returns:
            False for module types the renderer does not know, otherwise
            the decision for the current phase
        """
        phase = self.lifecycle.current_phase

        if phase != self._last_phase:
            self._refill(phase)

        if module_type not in self._known:
            return False

        return self._last_decision

    def _refill(self, phase: str) -> None:
        self._last_phase = phase
        self._known = frozenset(self.known_module_types())

        if phase in self.watched_phases and self.lifecycle.state(phase) is PhaseState.SEEN_MORE:
            logger.debug(f"Skipping migrations: phase '{phase}' fired more than once")
            self._last_decision = False
        else:
            self._last_decision = True

    def reset(self) -> None:
        self._last_phase = None
        self._last_decision = False
        self._known = frozenset()
