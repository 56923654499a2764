"""SimulationClock — fixed-timestep accumulator for host loops.

The engine only knows ``step(dt)``.  A host that runs on wall-clock
time feeds elapsed seconds to ``advance`` and calls ``step`` once per
returned tick, so the simulation always advances in whole ``dt`` steps.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SimulationClock:
    """Converts elapsed real time into whole fixed-size ticks.

    Attributes:
        dt: Fixed tick duration in seconds.
        max_steps: Upper bound on ticks returned by one ``advance``;
            leftover time is dropped so a slow host cannot fall into an
            ever-growing backlog.
        accumulator: Unconsumed time carried to the next ``advance``.
    """

    dt: float = 1.0 / 60.0
    max_steps: int = 5
    accumulator: float = 0.0

    def __post_init__(self) -> None:
        if self.dt <= 0:
            msg = f"dt must be positive, got {self.dt}"
            raise ValueError(msg)
        if self.max_steps < 1:
            msg = f"max_steps must be >= 1, got {self.max_steps}"
            raise ValueError(msg)

    def advance(self, elapsed: float) -> int:
        """Add ``elapsed`` seconds and return how many ticks are due.

        Args:
            elapsed: Wall-clock seconds since the previous call.

        Returns:
            Number of ``dt`` ticks the host should run now.
        """
        self.accumulator += max(0.0, elapsed)
        steps = int(self.accumulator // self.dt)
        if steps > self.max_steps:
            self.accumulator = 0.0
            return self.max_steps
        self.accumulator -= steps * self.dt
        return steps
