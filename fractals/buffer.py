from __future__ import annotations
from typing import Dict, Iterable, Iterator, Optional

import numpy as np

from fractals.results import (IterationResult, Orbit, RESULT_DTYPE,
                              SCALAR_FIELDS, result_from_record)


class IterationBuffer:
    """
    Fixed-size field of per-pixel iteration results, stored column-wise.

    Each scalar attribute of IterationResult lives in one float64 column of
    a structured array so the coloring passes can work on whole populations
    at once. `filled` marks cells that hold a result, `interior` marks which
    of those are interior points. Orbits are sparse and kept per index.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid buffer size {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        n = self.width * self.height
        self.records = np.zeros(n, dtype=RESULT_DTYPE)
        self.filled = np.zeros(n, dtype=bool)
        self.interior = np.zeros(n, dtype=bool)
        self.orbits: Dict[int, Orbit] = {}

    @classmethod
    def from_results(cls, width: int, height: int,
                     results: Iterable[Optional[IterationResult]]) -> "IterationBuffer":
        buf = cls(width, height)
        results = list(results)
        if len(results) != buf.size:
            raise ValueError(
                f"Expected {buf.size} results for a {width}x{height} buffer, got {len(results)}")
        for i, result in enumerate(results):
            if result is not None:
                buf.set(i, result)
        return buf

    @property
    def size(self) -> int:
        return self.width * self.height

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[Optional[IterationResult]]:
        for i in range(self.size):
            yield self.get(i)

    def _check(self, index: int) -> int:
        if not 0 <= index < self.size:
            raise IndexError(f"Cell {index} outside buffer of {self.size} cells")
        return int(index)

    def index_of(self, x: int, y: int) -> int:
        return self._check(y * self.width + x)

    def get(self, index: int) -> Optional[IterationResult]:
        index = self._check(index)
        if not self.filled[index]:
            return None
        return result_from_record(self.records[index],
                                  bool(self.interior[index]),
                                  self.orbits.get(index))

    def set(self, index: int, result: IterationResult) -> None:
        index = self._check(index)
        self.records[index] = result.scalars()
        self.filled[index] = True
        self.interior[index] = result.interior
        if result.orbit is not None:
            self.orbits[index] = result.orbit
        else:
            self.orbits.pop(index, None)

    def clear(self, index: int) -> None:
        index = self._check(index)
        self.records[index] = tuple(0.0 for _ in SCALAR_FIELDS)
        self.filled[index] = False
        self.interior[index] = False
        self.orbits.pop(index, None)

    # ---- Population masks ----

    def interior_mask(self) -> np.ndarray:
        return self.filled & self.interior

    def exterior_mask(self) -> np.ndarray:
        return self.filled & ~self.interior
