from __future__ import annotations

from dataclasses import dataclass

DEFAULT_QUANTUM_FRACTION = 0.1
DEFAULT_FLOOR = 0.1


@dataclass(frozen=True)
class SimulationConfig:
    """
    Tunables for the decaying quantum.

    Each slice is ``quantum_fraction`` of the running process's remaining time;
    once remaining time drops to ``floor`` or below the process runs to
    completion in a single slice.
    """

    quantum_fraction: float = DEFAULT_QUANTUM_FRACTION
    floor: float = DEFAULT_FLOOR
    start_time: float = 0.0

    def __post_init__(self) -> None:
        if not 0 < self.quantum_fraction <= 1:
            raise ValueError(f"quantum_fraction must be in (0, 1], got {self.quantum_fraction}")
        if self.floor <= 0:
            raise ValueError(f"floor must be positive, got {self.floor}")
        if self.start_time < 0:
            raise ValueError(f"start_time must be non-negative, got {self.start_time}")
