from __future__ import annotations
from typing import Dict, Sequence, Tuple

import numpy as np
from scipy.interpolate import interp1d

Color = Tuple[int, int, int]


def apply_gamma_correction(palette: np.ndarray, gamma: float = 0.8) -> np.ndarray:
    """
    Applies gamma correction to an (N, 3) palette in the 0-255 range.
    Gamma below 1 brightens, above 1 darkens.
    """
    return np.floor(255.0 * (np.clip(palette, 0, 255) / 255.0) ** gamma)


def stretch_contrast(palette: np.ndarray) -> np.ndarray:
    """
    Linearly stretches every channel of an (N, 3) palette to span 0-255.
    """
    lo = palette.min(axis=0)
    hi = palette.max(axis=0)
    stretched = (palette - lo) / (hi - lo + 1e-5) * 255.0
    return np.clip(stretched, 0, 255)


def create_smooth_gradient(palette: Sequence[Color], resolution: int = 256,
                           interpolation: str = 'cubic',
                           enhance: bool = True) -> np.ndarray:
    """
    Generates a smooth lookup table from a list of RGB control colors.

    Parameters:
        palette: control colors, each channel 0-255.
        resolution: number of entries in the resulting table.
        interpolation: scipy interp1d kind. Falls back to 'linear' when there
            are too few control colors for the requested kind.
        enhance: apply gamma correction and contrast stretching.

    Returns:
        np.ndarray: (resolution, 3) float table in the 0-255 range.
    """
    if len(palette) < 2:
        raise ValueError("Palette must contain at least two colors for interpolation.")

    controls = np.asarray(palette, dtype=np.float64)
    if interpolation == 'cubic' and len(controls) < 4:
        interpolation = 'linear'
    positions = np.linspace(0.0, 1.0, num=len(controls))
    interp_func = interp1d(positions, controls, kind=interpolation, axis=0)
    table = np.clip(interp_func(np.linspace(0.0, 1.0, num=resolution)), 0, 255)
    if enhance:
        table = stretch_contrast(apply_gamma_correction(table))
    return table


class GradientColorMap:
    """
    Maps normalized color indices in [0, 1] to RGB through a lookup table.

    The table is built once from a handful of control colors; lookups
    interpolate linearly between neighbouring table entries.
    """

    def __init__(self, colors: Sequence[Color], name: str = "Custom",
                 resolution: int = 256, interpolation: str = 'cubic',
                 enhance: bool = False) -> None:
        self.name = name
        self.colors = tuple(tuple(int(c) for c in color) for color in colors)
        self.table = create_smooth_gradient(self.colors, resolution,
                                            interpolation, enhance)
        positions = np.linspace(0.0, 1.0, num=len(self.table))
        self._lookup = interp1d(positions, self.table, kind='linear', axis=0,
                                assume_sorted=True)

    def interpolate(self, indices) -> np.ndarray:
        """Return an (N, 3) uint8 array of colors for N indices."""
        t = np.atleast_1d(np.asarray(indices, dtype=np.float64))
        t = np.nan_to_num(np.clip(t, 0.0, 1.0), nan=0.0)
        return np.rint(self._lookup(t)).astype(np.uint8)

    def color_at(self, index: float) -> Color:
        r, g, b = self.interpolate([index])[0]
        return int(r), int(g), int(b)

    def __repr__(self) -> str:
        return f"GradientColorMap({self.name!r})"


# Define base palettes
base_palettes: Dict[str, Tuple[Color, ...]] = {
    "Jet": (
        (0, 0, 128), (0, 0, 255), (0, 128, 255), (0, 255, 255),
        (128, 255, 128), (255, 255, 0), (255, 128, 0), (255, 0, 0),
        (128, 0, 0)),

    "Fire": (
        (0, 0, 0), (255, 0, 0), (255, 85, 0), (255, 170, 0),
        (255, 255, 0), (255, 255, 85), (255, 255, 170)),

    "Ocean": (
        (0, 0, 0), (0, 32, 64), (0, 64, 128), (0, 96, 192),
        (0, 128, 255), (64, 160, 255), (128, 192, 255)),

    "Classic": (
        (0, 0, 0), (66, 30, 15), (25, 7, 26), (9, 1, 47), (4, 4, 73),
        (0, 7, 100), (12, 44, 138), (24, 82, 177), (57, 125, 209),
        (134, 181, 229), (211, 236, 248), (241, 233, 191), (248, 201, 95),
        (255, 170, 0), (204, 128, 0), (153, 87, 0), (106, 52, 3)),

    "IceFire": (
        (0, 0, 0), (0, 0, 128), (0, 128, 255), (255, 255, 255),
        (255, 128, 0), (255, 0, 0), (0, 0, 0)),

    "Viridis": (
        (68, 1, 84), (59, 82, 139), (33, 145, 140), (94, 201, 98),
        (253, 231, 37)),

    "Sunset": (
        (0, 0, 0), (44, 0, 44), (128, 0, 64), (255, 94, 77),
        (255, 195, 113), (255, 255, 204)),

    "Grayscale": ((0, 0, 0), (255, 255, 255)),

    "InvertedGrayscale": ((255, 255, 255), (0, 0, 0)),
}

# Palettes whose control colors read better with gamma and contrast applied
_ENHANCED = {"Fire", "Ocean", "Classic", "IceFire", "Sunset"}


def gradient(name: str) -> GradientColorMap:
    if name not in base_palettes:
        raise KeyError(f"Unknown palette '{name}'. Known: {', '.join(palettes)}")
    return GradientColorMap(base_palettes[name], name=name,
                            enhance=name in _ENHANCED)


# Export palette names, sorted
palettes = sorted(base_palettes.keys())
