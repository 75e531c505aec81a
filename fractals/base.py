from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np

from fractals.buffer import IterationBuffer
from fractals.results import IterationResult
from utils.coords import (ComplexRect, ScreenPoint, complex_to_screen,
                          screen_to_complex)

logger = logging.getLogger(__name__)


@dataclass
class RenderSettings:
    """
    Holds the iteration settings shared between an engine and its callers.
    Max_iterations bounds the escape-time loop.
    Use_fixed_iterations runs every point for exactly max_iterations steps,
    which also disables the coloring visibility gate.
    """
    max_iterations: int = 1000
    use_fixed_iterations: bool = False


class IterationEngine(ABC):
    """
    An abstract base class for escape-time engines feeding the coloring
    pipeline.

    Subclasses evaluate a single screen point in iterate() and describe their
    default region of the complex plane. Everything else (bounds bookkeeping,
    coordinate conversion, filling a buffer) is provided here.
    """
    name: str = "engine"
    is_convergent: bool = False

    def __init__(self, width: int, height: int,
                 settings: Optional[RenderSettings] = None) -> None:
        self.width = int(width)
        self.height = int(height)
        self.settings = settings or RenderSettings()
        self._bounds: ComplexRect = self.default_bounds().normalized()
        self._max_exponential_iteration_count = 0.0

    # ---- Abstract API ----

    @abstractmethod
    def iterate(self, point: ScreenPoint) -> IterationResult:
        ...

    @abstractmethod
    def default_bounds(self) -> ComplexRect:
        ...

    @abstractmethod
    def auto_determine_max_iterations(self) -> int:
        ...

    # ---- Settings ----

    @property
    def max_iterations(self) -> int:
        return self.settings.max_iterations

    @max_iterations.setter
    def max_iterations(self, value: int) -> None:
        self.settings.max_iterations = int(value)

    @property
    def use_fixed_iterations(self) -> bool:
        return self.settings.use_fixed_iterations

    # ---- Bounds & coordinates ----

    def complex_bounds(self) -> ComplexRect:
        return self._bounds

    def set_complex_bounds(self, p1: complex, p2: complex) -> None:
        self._bounds = ComplexRect(p1, p2).normalized()

    def screen_to_complex(self, point: ScreenPoint) -> complex:
        return screen_to_complex(point, self._bounds, self.width, self.height)

    def complex_to_screen(self, z: complex) -> ScreenPoint:
        return complex_to_screen(z, self._bounds, self.width, self.height)

    def max_observed_exponential_iteration_count(self) -> float:
        return self._max_exponential_iteration_count

    # ---- Computation ----

    def recalc(self) -> IterationBuffer:
        """
        Evaluate every pixel of the current bounds into a fresh buffer.
        Engines with a vectorised kernel should override this and write
        straight into IterationBuffer.records.
        """
        buf = IterationBuffer(self.width, self.height)
        for y in range(self.height):
            for x in range(self.width):
                result = self.iterate(ScreenPoint(x, y))
                if result is not None:
                    buf.set(y * self.width + x, result)

        exterior = buf.exterior_mask()
        if self.is_convergent and np.any(exterior):
            self._max_exponential_iteration_count = float(
                np.max(buf.records["exponential_iteration_count"][exterior]))
        logger.debug("%s computed %dx%d buffer", self.name, self.width, self.height)
        return buf
