# data_sampler/core/model.py
from __future__ import annotations
from dataclasses import dataclass, field
import numpy as np

DEFAULT_PRESSURE_FIELD = "F_pri_pressure_bar"
DEFAULT_DISPLACEMENT_FIELD = "Displacement_A_mm"
DEFAULT_MIN_MAX_FIELD = "Displacement_A_mm"
DEFAULT_PRESSURE_THRESHOLD = 101.0


@dataclass(frozen=True)
class ThresholdConfig:
    pressure_field: str = DEFAULT_PRESSURE_FIELD          # gate signal while seeking a start
    displacement_field: str = DEFAULT_DISPLACEMENT_FIELD  # zero-crossing signal
    min_max_field: str = DEFAULT_MIN_MAX_FIELD            # tracked for min/max
    pressure_threshold: float = DEFAULT_PRESSURE_THRESHOLD


@dataclass
class Extremum:
    """Running (min, max) of float32 samples; starts at (+inf, -inf)."""
    min: np.float32 = field(default_factory=lambda: np.float32(np.inf))
    max: np.float32 = field(default_factory=lambda: np.float32(-np.inf))

    def observe(self, value) -> None:
        value = np.float32(value)
        if value > self.max:
            self.max = value
        if value < self.min:
            self.min = value

    @property
    def is_empty(self) -> bool:
        return self.min > self.max

    def bounds(self) -> tuple[np.float32, np.float32] | None:
        if self.is_empty:
            return None
        return self.min, self.max


@dataclass(frozen=True)
class CycleEntry:
    index: int             # 1-based, assigned in commit order
    extremum: Extremum
    samples: int           # counter value at the closing crossing


Dataset = dict[int, CycleEntry]
