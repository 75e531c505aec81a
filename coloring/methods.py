"""
Scalar extraction shared by the statistics pass and the color pass.

Both passes must read the same attribute for a given coloring method,
otherwise the collected bounds would not describe the values being colored.
They therefore go through extract() and nothing else.
"""
from __future__ import annotations
from typing import Callable, Dict

import numpy as np

from utils.enums import ColoringMethod

Extractor = Callable[[np.ndarray, int], np.ndarray]


def _column(name: str) -> Extractor:
    def read(records: np.ndarray, sector_range: int) -> np.ndarray:
        return records[name].astype(np.float64, copy=True)
    read.__name__ = f"read_{name}"
    return read


def sectors(angles: np.ndarray, nr_of_sectors: int) -> np.ndarray:
    """Vectorised IterationResult.sector(): 1-based sector of each angle."""
    shifted = np.where(angles < 0.0, angles + 2.0 * np.pi, angles)
    sector = np.floor(shifted / (2.0 * np.pi) * nr_of_sectors) + 1.0
    return np.minimum(sector, float(nr_of_sectors))


def _sector(records: np.ndarray, sector_range: int) -> np.ndarray:
    return sectors(records["angle"], sector_range)


SCALAR_EXTRACTORS: Dict[ColoringMethod, Extractor] = {
    ColoringMethod.DISCRETE_LEVEL_SETS: _column("iterations"),
    ColoringMethod.SMOOTH_NIC_LEVEL_SETS: _column("normalised_iteration_count"),
    ColoringMethod.SMOOTH_EIC_LEVEL_SETS: _column("exponential_iteration_count"),
    ColoringMethod.SECTOR_DECOMPOSITION: _sector,
    ColoringMethod.REAL_COMPONENT: _column("real"),
    ColoringMethod.IMAGINARY_COMPONENT: _column("imag"),
    ColoringMethod.MODULUS: _column("modulus"),
    ColoringMethod.AVERAGE_DISTANCE: _column("average_distance"),
    ColoringMethod.ANGLE: _column("angle"),
    ColoringMethod.LYAPUNOV_EXPONENT: _column("lyapunov_exponent"),
    ColoringMethod.CURVATURE: _column("curvature"),
    ColoringMethod.STRIPING: _column("striping"),
    ColoringMethod.MIN_GAUSSIAN_DISTANCE: _column("min_gaussian_distance"),
    ColoringMethod.AVG_GAUSSIAN_DISTANCE: _column("avg_gaussian_distance"),
    ColoringMethod.EXTERIOR_DISTANCE: _column("exterior_distance"),
    ColoringMethod.ORBIT_TRAP_DISK: _column("orbit_trap_disk"),
    ColoringMethod.ORBIT_TRAP_CROSS_STALKS: _column("orbit_trap_cross_stalks"),
    ColoringMethod.ORBIT_TRAP_SINE: _column("orbit_trap_sine"),
    ColoringMethod.ORBIT_TRAP_TANGENS: _column("orbit_trap_tangens"),
    ColoringMethod.DISCRETE_ROOTS: _column("root_index"),
    ColoringMethod.SMOOTH_ROOTS: _column("root_index"),
}


def extract(records: np.ndarray, method: ColoringMethod,
            sector_range: int) -> np.ndarray:
    """
    Return the float64 scalar selected by `method` for every record.
    FIXED_COLOR has no scalar and must be handled by the caller.
    """
    if method is ColoringMethod.FIXED_COLOR:
        raise ValueError("FIXED_COLOR does not select a scalar attribute")
    return SCALAR_EXTRACTORS[method](records, sector_range)
