from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from coloring.methods import extract
from coloring.policy import ColoringPolicy
from fractals.buffer import IterationBuffer
from utils.enums import ColoringMethod, ColorMapScaling

logger = logging.getLogger(__name__)


@dataclass
class RangeStatistics:
    """
    Extremes of the selected scalar per population, gathered once per
    recolor and consumed by the color pass that follows.

    Min/max start at +inf/-inf and stay there for a population that has no
    cells or is drawn with a fixed color. Rank tables are only present for
    rank-order scaling.
    """
    interior_minimum: float = np.inf
    interior_maximum: float = -np.inf
    exterior_minimum: float = np.inf
    exterior_maximum: float = -np.inf
    exterior_max_integral: float = -np.inf
    interior_rank_table: Optional[np.ndarray] = None
    exterior_rank_table: Optional[np.ndarray] = None

    @classmethod
    def zeroed(cls) -> "RangeStatistics":
        return cls(0.0, 0.0, 0.0, 0.0, 0.0)

    def bounds(self, interior: bool) -> Tuple[float, float]:
        if interior:
            return self.interior_minimum, self.interior_maximum
        return self.exterior_minimum, self.exterior_maximum

    def rank_table(self, interior: bool) -> Optional[np.ndarray]:
        return self.interior_rank_table if interior else self.exterior_rank_table

    def rank_count(self, interior: bool) -> int:
        table = self.rank_table(interior)
        return 0 if table is None else int(table.size)


class RangeCollector:
    """
    Statistics pass over an iteration buffer: extracts the scalar each
    population is colored by and records its extremes, plus the sorted
    rank table when rank-order scaling is selected.
    """

    def collect(self, buffer: Optional[IterationBuffer],
                policy: ColoringPolicy) -> RangeStatistics:
        if buffer is None or buffer.size == 0:
            logger.debug("No iteration buffer, returning zeroed statistics")
            return RangeStatistics.zeroed()

        stats = RangeStatistics()
        exterior = buffer.exterior_mask()
        if np.any(exterior):
            stats.exterior_max_integral = float(np.max(buffer.records["iterations"][exterior]))

        for interior, mask in ((True, buffer.interior_mask()), (False, exterior)):
            self._collect_side(stats, buffer.records[mask], policy, interior)
        return stats

    def _collect_side(self, stats: RangeStatistics, records: np.ndarray,
                      policy: ColoringPolicy, interior: bool) -> None:
        method = policy.coloring_method(interior)
        if method is ColoringMethod.FIXED_COLOR or records.size == 0:
            return

        values = extract(records, method, policy.sector_range(interior))
        if method is ColoringMethod.SECTOR_DECOMPOSITION:
            lo, hi = 1.0, float(policy.sector_range(interior))
        else:
            lo, hi = float(np.min(values)), float(np.max(values))

        table = None
        if policy.color_map_scaling is ColorMapScaling.RANK_ORDER:
            table = np.sort(values, kind='stable')

        if interior:
            stats.interior_minimum, stats.interior_maximum = lo, hi
            stats.interior_rank_table = table
        else:
            stats.exterior_minimum, stats.exterior_maximum = lo, hi
            stats.exterior_rank_table = table
