import cmath
import math
from typing import Optional

import numpy as np
import pytest

from fractals.base import IterationEngine, RenderSettings
from fractals.buffer import IterationBuffer
from fractals.results import ExteriorResult, InteriorResult
from utils.coords import ComplexRect, ScreenPoint


class DiskEngine(IterationEngine):
    """
    Stand-in engine: points closer than `radius` to the origin are interior,
    everything else escapes after a count proportional to its modulus.
    """
    name = "disk"

    def __init__(self, width: int = 8, height: int = 6,
                 settings: Optional[RenderSettings] = None,
                 radius: float = 0.6, suggested_max: Optional[int] = None,
                 convergent: bool = False) -> None:
        self.radius = radius
        self.suggested_max = suggested_max
        self.is_convergent = convergent
        self.recalc_count = 0
        super().__init__(width, height, settings)

    def default_bounds(self) -> ComplexRect:
        return ComplexRect(complex(-2.0, -1.5), complex(1.0, 1.5))

    def auto_determine_max_iterations(self) -> int:
        if self.suggested_max is None:
            return self.max_iterations
        return self.suggested_max

    def iterate(self, point: ScreenPoint):
        z = self.screen_to_complex(point)
        r = abs(z)
        if r < self.radius:
            return InteriorResult(iterations=float(self.max_iterations),
                                  real=z.real, imag=z.imag, modulus=r,
                                  angle=cmath.phase(z))
        return ExteriorResult(iterations=float(math.floor(r * 10.0)),
                              normalised_iteration_count=r * 10.0,
                              exponential_iteration_count=r,
                              real=z.real, imag=z.imag, modulus=r,
                              angle=cmath.phase(z), root_index=1.0)

    def recalc(self) -> IterationBuffer:
        self.recalc_count += 1
        return super().recalc()


@pytest.fixture
def engine():
    return DiskEngine()


@pytest.fixture
def four_pixel_buffer():
    """Two interior and two exterior cells, exterior NIC values 10 and 20."""
    return IterationBuffer.from_results(2, 2, [
        InteriorResult(iterations=100.0),
        ExteriorResult(iterations=5.0, normalised_iteration_count=10.0),
        InteriorResult(iterations=100.0),
        ExteriorResult(iterations=6.0, normalised_iteration_count=20.0),
    ])


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
