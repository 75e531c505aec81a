from __future__ import annotations
from dataclasses import dataclass, field

from coloring.filters import FilterChain
from coloring.palettes import Color, GradientColorMap, gradient
from utils.enums import ColoringMethod, ColorMapScaling, ColorMapUsage

DEFAULT_MAX_ITERATIONS = 1000


@dataclass
class ColoringPolicy:
    """
    User-facing coloring configuration.

    Interior and exterior pixels each select a coloring method, a gradient,
    a fixed fallback color and their own wrap/invert flags. Scaling, usage
    and cycling settings are shared between both populations.

    The coloring passes only read this object. Callers must not change it
    while a pass is running; FractalController serialises both.
    """
    # Gradients
    interior_gradient: GradientColorMap = field(default_factory=lambda: gradient("Jet"))
    exterior_gradient: GradientColorMap = field(default_factory=lambda: gradient("Jet"))
    tiger_gradient: GradientColorMap = field(default_factory=lambda: gradient("Jet"))
    interior_inverted: bool = False
    exterior_inverted: bool = False
    interior_wrapped_around: bool = False
    exterior_wrapped_around: bool = False

    # Tiger stripes on odd iteration counts
    use_tiger_stripes: bool = False
    tiger_use_fixed_color: bool = True
    tiger_fixed_color: Color = (0, 0, 0)

    # Methods and fixed colors
    interior_fixed_color: Color = (0, 0, 0)
    exterior_fixed_color: Color = (255, 255, 255)
    interior_coloring_method: ColoringMethod = ColoringMethod.FIXED_COLOR
    exterior_coloring_method: ColoringMethod = ColoringMethod.SMOOTH_NIC_LEVEL_SETS
    interior_sector_range: int = 1000
    exterior_sector_range: int = 1000

    # Scaling
    color_map_scaling: ColorMapScaling = ColorMapScaling.LINEAR
    function_multiplier: float = 1.0
    argument_multiplier: float = 1.0
    restrict_high_iteration_colors: bool = True

    # Cycling
    repeat_mode: bool = False
    color_repetition: float = 5.0
    color_offset: float = 0.0

    # Usage
    color_map_usage: ColorMapUsage = ColorMapUsage.FULL
    continuous_color_range: float = 10.0
    discrete_color_range: int = DEFAULT_MAX_ITERATIONS

    # Visible iteration window
    low_iteration_range: int = 0
    high_iteration_range: int = DEFAULT_MAX_ITERATIONS

    # Convergent smooth-roots brightening
    brightness_factor: float = 5.0

    # Post-processing
    use_post_processing_filters: bool = False
    filter_chain: FilterChain = field(default_factory=FilterChain)

    @classmethod
    def for_max_iterations(cls, max_iterations: int, **overrides) -> "ColoringPolicy":
        """Default policy whose iteration window spans [0, max_iterations]."""
        overrides.setdefault("discrete_color_range", int(max_iterations))
        overrides.setdefault("high_iteration_range", int(max_iterations))
        return cls(**overrides)

    # ---- Per-side accessors ----

    def coloring_method(self, interior: bool) -> ColoringMethod:
        return self.interior_coloring_method if interior else self.exterior_coloring_method

    def fixed_color(self, interior: bool) -> Color:
        return self.interior_fixed_color if interior else self.exterior_fixed_color

    def sector_range(self, interior: bool) -> int:
        return self.interior_sector_range if interior else self.exterior_sector_range

    def inverted(self, interior: bool) -> bool:
        return self.interior_inverted if interior else self.exterior_inverted

    def wrapped_around(self, interior: bool) -> bool:
        return self.interior_wrapped_around if interior else self.exterior_wrapped_around

    def remap_max_iterations(self, previous_max: int, new_max: int) -> None:
        """
        Keep the iteration-dependent settings consistent with a new maximum
        iteration count: the discrete range keeps its fraction of the
        maximum, a high bound that tracked the old maximum follows the new
        one, and anything above the new maximum is clamped to it.
        """
        if previous_max > 0:
            self.discrete_color_range = int(round(
                self.discrete_color_range / previous_max * new_max))
        if self.high_iteration_range == previous_max or self.high_iteration_range > new_max:
            self.high_iteration_range = new_max
        if self.low_iteration_range > new_max:
            self.low_iteration_range = new_max
