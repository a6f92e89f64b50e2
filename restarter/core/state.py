"""Engine state container shared by reference between components."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class EngineState:
    """
    Process-wide slots for one restarter instance.

    ``generation`` is written only by the SettingsCache (via bump_generation);
    ``last_handled_target`` is written only by the ResetEngine. Everyone else
    reads. Separate instances never share state, so tests can run many side
    by side.
    """

    generation: int = 0
    last_handled_target: str | None = None

    def bump_generation(self) -> int:
        self.generation += 1
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation
