from __future__ import annotations
from dataclasses import dataclass

import numpy as np

from coloring.policy import ColoringPolicy
from utils.enums import ColorMapScaling


@dataclass(frozen=True)
class ScaledBounds:
    """
    Normalization bounds of one population after the color-map scaling was
    applied. Built per coloring pass and never written back to the policy.
    """
    minimum: float
    maximum: float
    continuous_color_range: float
    discrete_color_range: float


def scale_values(values, scaling: ColorMapScaling,
                 function_multiplier: float = 1.0,
                 argument_multiplier: float = 1.0) -> np.ndarray:
    """
    Linear:      a * x
    Logarithmic: f * log(a * x)
    Exponential: f * exp(a * x)
    Sqrt:        f * sqrt(a * x)
    Rank order leaves values untouched; they are looked up by rank instead.
    """
    x = np.asarray(values, dtype=np.float64)
    f = function_multiplier
    a = argument_multiplier
    with np.errstate(all='ignore'):
        if scaling is ColorMapScaling.LINEAR:
            return a * x
        if scaling is ColorMapScaling.LOGARITHMIC:
            return f * np.log(a * x)
        if scaling is ColorMapScaling.EXPONENTIAL:
            return f * np.exp(a * x)
        if scaling is ColorMapScaling.SQRT:
            return f * np.sqrt(a * x)
    return x.copy()


def _scale_scalar(value: float, policy: ColoringPolicy) -> float:
    return float(scale_values(np.array([value]), policy.color_map_scaling,
                              policy.function_multiplier,
                              policy.argument_multiplier)[0])


def _transform_bound(value: float, scaling: ColorMapScaling) -> float:
    with np.errstate(all='ignore'):
        if scaling is ColorMapScaling.LOGARITHMIC:
            return float(np.log(value))
        if scaling is ColorMapScaling.EXPONENTIAL:
            return float(np.exp(value))
        if scaling is ColorMapScaling.SQRT:
            return float(np.sqrt(value))
    return float(value)


def scale_bounds(minimum: float, maximum: float,
                 policy: ColoringPolicy) -> ScaledBounds:
    """
    Min/max are transformed without multipliers (left alone for linear
    scaling), so the multipliers shift and stretch the values against them.
    Both usage ranges get the full multiplied transform.
    """
    scaling = policy.color_map_scaling
    return ScaledBounds(
        minimum=_transform_bound(minimum, scaling),
        maximum=_transform_bound(maximum, scaling),
        continuous_color_range=_scale_scalar(policy.continuous_color_range, policy),
        discrete_color_range=_scale_scalar(policy.discrete_color_range, policy),
    )
