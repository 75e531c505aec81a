from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from utils.coords import ScreenPoint

# Scalar attributes every iteration result carries, in storage order.
SCALAR_FIELDS: Tuple[str, ...] = (
    "iterations",
    "normalised_iteration_count",
    "exponential_iteration_count",
    "real",
    "imag",
    "modulus",
    "average_distance",
    "angle",
    "lyapunov_exponent",
    "curvature",
    "striping",
    "min_gaussian_distance",
    "avg_gaussian_distance",
    "exterior_distance",
    "orbit_trap_disk",
    "orbit_trap_cross_stalks",
    "orbit_trap_sine",
    "orbit_trap_tangens",
    "root_index",
)

RESULT_DTYPE = np.dtype([(name, np.float64) for name in SCALAR_FIELDS])


@dataclass(frozen=True)
class Orbit:
    """
    Orbit of a single point: the visited complex values and where each of
    them lands on screen.
    """
    points: Tuple[complex, ...] = ()
    screen_points: Tuple[ScreenPoint, ...] = ()

    def __len__(self) -> int:
        return len(self.points)


@dataclass(frozen=True)
class IterationResult:
    """
    Outcome of iterating one pixel. Never instantiated directly: a result is
    either an InteriorResult (bounded orbit) or an ExteriorResult (escaped or
    converged).
    """
    iterations: float = 0.0
    normalised_iteration_count: float = 0.0
    exponential_iteration_count: float = 0.0
    real: float = 0.0
    imag: float = 0.0
    modulus: float = 0.0
    average_distance: float = 0.0
    angle: float = 0.0
    lyapunov_exponent: float = 0.0
    curvature: float = 0.0
    striping: float = 0.0
    min_gaussian_distance: float = 0.0
    avg_gaussian_distance: float = 0.0
    exterior_distance: float = 0.0
    orbit_trap_disk: float = 0.0
    orbit_trap_cross_stalks: float = 0.0
    orbit_trap_sine: float = 0.0
    orbit_trap_tangens: float = 0.0
    root_index: float = 0.0
    orbit: Optional[Orbit] = None

    interior = False

    def sector(self, nr_of_sectors: int) -> int:
        angle = self.angle
        if angle < 0.0:
            angle += 2.0 * math.pi
        sector = int(math.floor(angle / (2.0 * math.pi) * nr_of_sectors)) + 1
        return min(sector, nr_of_sectors)

    def scalars(self) -> Tuple[float, ...]:
        return tuple(getattr(self, name) for name in SCALAR_FIELDS)


@dataclass(frozen=True)
class InteriorResult(IterationResult):
    interior = True


@dataclass(frozen=True)
class ExteriorResult(IterationResult):
    interior = False


def result_from_record(record, interior: bool,
                       orbit: Optional[Orbit] = None) -> IterationResult:
    cls = InteriorResult if interior else ExteriorResult
    values = {name: float(record[name]) for name in SCALAR_FIELDS}
    return cls(orbit=orbit, **values)
