from __future__ import annotations
import logging
from typing import Optional

import numpy as np

from coloring.kernels import (limit_continuous, limit_discrete,
                              linear_normalize, shape_indices)
from coloring.methods import extract
from coloring.policy import ColoringPolicy
from coloring.scaling import scale_bounds, scale_values
from coloring.statistics import RangeStatistics
from fractals.buffer import IterationBuffer
from utils.enums import ColoringMethod, ColorMapScaling, ColorMapUsage

logger = logging.getLogger(__name__)

FALLBACK_COLOR = (0, 0, 0)


def rank_indices(values: np.ndarray, table: Optional[np.ndarray],
                 restrict_high: bool) -> np.ndarray:
    """
    Percentile rank of each value inside the sorted table. Values missing
    from the table, and every value of a single-entry table, rank 0.
    """
    out = np.zeros(values.shape, dtype=np.float64)
    if table is None or table.size < 2:
        return out
    pos = np.searchsorted(table, values, side='left')
    inside = pos < table.size
    found = np.zeros(values.shape, dtype=bool)
    found[inside] = table[pos[inside]] == values[inside]
    out[found] = pos[found] / (table.size - 1)
    if restrict_high:
        with np.errstate(all='ignore'):
            out = 1.0 + 1.0 / (np.log(1.0 - out) - 1.0)
    return out


class PixelColorizer:
    """
    Color pass: turns an iteration buffer into an RGB image using the
    statistics of the preceding RangeCollector pass.

    Interior and exterior cells are resolved as two vectorised populations.
    Every step operates on local copies; the policy is only read.
    """

    def colorize(self, buffer: Optional[IterationBuffer],
                 statistics: RangeStatistics, policy: ColoringPolicy,
                 engine=None) -> Optional[np.ndarray]:
        if buffer is None or buffer.records is None:
            logger.debug("Nothing to render: no iteration buffer")
            return None

        rgb = np.zeros((buffer.size, 3), dtype=np.uint8)
        rgb[:] = FALLBACK_COLOR
        fixed_iterations = bool(engine is not None and engine.use_fixed_iterations)

        for interior in (True, False):
            mask = buffer.interior_mask() if interior else buffer.exterior_mask()
            if not np.any(mask):
                continue
            method = policy.coloring_method(interior)
            if method is ColoringMethod.FIXED_COLOR:
                rgb[mask] = policy.fixed_color(interior)
                continue

            if not interior and not fixed_iterations:
                it = buffer.records["iterations"]
                mask = (mask
                        & (it <= statistics.exterior_max_integral)
                        & (it >= policy.low_iteration_range)
                        & (it <= policy.high_iteration_range))
            cells = np.flatnonzero(mask)
            if cells.size == 0:
                continue
            records = buffer.records[cells]
            values = extract(records, method, policy.sector_range(interior))
            index = self.resolve_indices(values, statistics, policy, interior)
            rgb[cells] = self._lookup_colors(index, records, policy, interior,
                                             method, engine)

        return rgb.reshape(buffer.height, buffer.width, 3)

    def resolve_indices(self, values: np.ndarray, statistics: RangeStatistics,
                        policy: ColoringPolicy, interior: bool) -> np.ndarray:
        """
        Normalized gradient index in [0, 1] for the scalar values of one
        population, before gradient interpolation.
        """
        values = np.asarray(values, dtype=np.float64)
        lo, hi = statistics.bounds(interior)
        scaling = policy.color_map_scaling

        if scaling is ColorMapScaling.RANK_ORDER:
            bounds = scale_bounds(lo, hi, policy)
            index = rank_indices(values, statistics.rank_table(interior),
                                 policy.restrict_high_iteration_colors)
        else:
            values = scale_values(values, scaling, policy.function_multiplier,
                                  policy.argument_multiplier)
            bounds = scale_bounds(lo, hi, policy)
            index = linear_normalize(values, bounds.minimum, bounds.maximum)

        index = shape_indices(index, policy.color_offset,
                              policy.wrapped_around(interior),
                              policy.inverted(interior),
                              policy.repeat_mode, policy.color_repetition)

        usage = policy.color_map_usage
        if usage is ColorMapUsage.LIMITED_CONTINUOUS:
            index = limit_continuous(index, bounds.continuous_color_range)
        elif usage is ColorMapUsage.LIMITED_DISCRETE:
            span = bounds.maximum - bounds.minimum
            discrete_range = bounds.discrete_color_range
            if discrete_range > span:
                discrete_range = span
            index = limit_discrete(values, bounds.minimum, discrete_range)
        return index

    def _lookup_colors(self, index: np.ndarray, records: np.ndarray,
                       policy: ColoringPolicy, interior: bool,
                       method: ColoringMethod, engine) -> np.ndarray:
        if interior:
            return policy.interior_gradient.interpolate(index)

        colors = policy.exterior_gradient.interpolate(index)
        if policy.use_tiger_stripes:
            odd = np.fmod(np.trunc(records["iterations"]), 2.0) == 1.0
            if np.any(odd):
                if policy.tiger_use_fixed_color:
                    colors[odd] = policy.tiger_fixed_color
                else:
                    colors[odd] = policy.tiger_gradient.interpolate(index[odd])

        if (engine is not None and engine.is_convergent
                and method is ColoringMethod.SMOOTH_ROOTS):
            colors = self._brighten(colors, records, policy, engine)
        return colors

    def _brighten(self, colors: np.ndarray, records: np.ndarray,
                  policy: ColoringPolicy, engine) -> np.ndarray:
        max_eic = engine.max_observed_exponential_iteration_count()
        with np.errstate(all='ignore'):
            fraction = records["exponential_iteration_count"] / max_eic
            scaled = colors.astype(np.float64) * (fraction * policy.brightness_factor)[:, np.newaxis]
        scaled = np.nan_to_num(scaled, nan=0.0, posinf=255.0, neginf=0.0)
        return np.floor(np.clip(scaled, 0.0, 255.0)).astype(np.uint8)

    def apply_filters(self, image: Optional[np.ndarray],
                      policy: ColoringPolicy) -> Optional[np.ndarray]:
        if image is None or not policy.use_post_processing_filters:
            return image
        return policy.filter_chain.apply(image)
