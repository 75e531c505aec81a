from __future__ import annotations
import copy
import csv
import logging
from typing import Iterator, List, Union
from os import PathLike

from utils.coords import ComplexRect

logger = logging.getLogger(__name__)


class ZoomStackError(IndexError):
    pass


class ZoomStack:
    """
    History of viewed complex-plane rectangles.

    The last entry is the active viewport. Levels are counted from the
    bottom starting at 1, so the level of the top entry equals len(stack).
    """

    def __init__(self) -> None:
        self._rects: List[ComplexRect] = []

    # ---- Mutators ----

    def push(self, rect: ComplexRect) -> None:
        self._rects.append(rect)

    def pop(self) -> ComplexRect:
        if not self._rects:
            raise ZoomStackError("pop from an empty zoom stack")
        return self._rects.pop()

    def clear(self) -> None:
        self._rects.clear()

    def modify_top(self, rect: ComplexRect) -> None:
        self.pop()
        self.push(rect)

    def jump_to_level(self, level: int) -> int:
        """Pop until `level` is on top. Returns the number of pops."""
        pops = 0
        while self.level > max(level, 0):
            self.pop()
            pops += 1
        return pops

    # ---- Queries ----

    @property
    def top(self) -> ComplexRect:
        if not self._rects:
            raise ZoomStackError("empty zoom stack has no top")
        return self._rects[-1]

    @property
    def level(self) -> int:
        return len(self._rects)

    def is_empty(self) -> bool:
        return not self._rects

    def rect_at(self, level: int) -> ComplexRect:
        if not 1 <= level <= self.level:
            raise ZoomStackError(f"level {level} outside 1..{self.level}")
        return self._rects[level - 1]

    def __len__(self) -> int:
        return len(self._rects)

    def __iter__(self) -> Iterator[ComplexRect]:
        return iter(self._rects)

    def __eq__(self, other) -> bool:
        return isinstance(other, ZoomStack) and self._rects == other._rects

    def clone(self) -> "ZoomStack":
        return copy.deepcopy(self)

    # ---- Persistence ----

    def save(self, path: Union[str, PathLike]) -> None:
        """Write one `p1.re,p1.im,p2.re,p2.im` line per level, bottom first."""
        with open(path, "w", newline="") as fh:
            writer = csv.writer(fh)
            for rect in self._rects:
                writer.writerow([repr(v) for v in rect.as_tuple()])
        logger.debug("Saved %d zoom levels to %s", self.level, path)

    @classmethod
    def load(cls, path: Union[str, PathLike]) -> "ZoomStack":
        stack = cls()
        with open(path, newline="") as fh:
            for lineno, row in enumerate(csv.reader(fh), start=1):
                if not row:
                    continue
                if len(row) != 4:
                    raise ValueError(f"{path}:{lineno}: expected 4 values, got {len(row)}")
                x1, y1, x2, y2 = (float(v) for v in row)
                stack.push(ComplexRect(complex(x1, y1), complex(x2, y2)))
        logger.debug("Loaded %d zoom levels from %s", stack.level, path)
        return stack
