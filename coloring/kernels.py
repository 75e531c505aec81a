import numpy as np
from numba import njit, prange

# fastmath stays off: the kernels rely on NaN comparisons behaving.


@njit(cache=True, parallel=True, error_model='numpy')
def _linear_normalize(values, min_val, max_val, out):
    denom = max_val - min_val
    for i in prange(values.shape[0]):
        t = (values[i] - min_val) / denom
        if t != t:
            t = 0.0
        elif t < 0.0:
            t = 0.0
        elif t > 1.0:
            t = 1.0
        out[i] = t


@njit(cache=True, parallel=True, error_model='numpy')
def _shape_indices(index, offset, wrap, invert, repeat, repetition, out):
    for i in prange(index.shape[0]):
        t = index[i]
        if offset != 0.0:
            t = t + offset
            t = t - np.floor(t)
        if wrap:
            if t < 0.5:
                t = t * 2.0
            else:
                t = 2.0 * (1.0 - t)
        if invert:
            t = 1.0 - t
        if repeat:
            t = t * repetition
            t = t - np.floor(t)
        out[i] = t


@njit(cache=True, parallel=True, error_model='numpy')
def _limit_continuous(index, steps, out):
    for i in prange(index.shape[0]):
        t = index[i]
        if t < 1.0:
            if steps > 1.0:
                t = np.floor(t / (1.0 / steps)) * (1.0 / (steps - 1.0))
            else:
                t = 0.0
        out[i] = t


@njit(cache=True, parallel=True, error_model='numpy')
def _limit_discrete(values, min_val, discrete_range, out):
    for i in prange(values.shape[0]):
        if discrete_range == 0.0:
            t = 0.0
        else:
            t = np.fmod(values[i] - min_val, discrete_range) / (discrete_range - 1.0)
        if t != t:
            t = 0.0
        elif t < 0.0:
            t = 0.0
        elif t > 1.0:
            t = 1.0
        out[i] = t


def linear_normalize(values: np.ndarray, min_val: float, max_val: float) -> np.ndarray:
    values = np.ascontiguousarray(values, dtype=np.float64)
    out = np.empty_like(values)
    _linear_normalize(values, float(min_val), float(max_val), out)
    return out


def shape_indices(index: np.ndarray, offset: float, wrap: bool, invert: bool,
                  repeat: bool, repetition: float) -> np.ndarray:
    index = np.ascontiguousarray(index, dtype=np.float64)
    out = np.empty_like(index)
    _shape_indices(index, float(offset), bool(wrap), bool(invert),
                   bool(repeat), float(repetition), out)
    return out


def limit_continuous(index: np.ndarray, steps: float) -> np.ndarray:
    index = np.ascontiguousarray(index, dtype=np.float64)
    out = np.empty_like(index)
    _limit_continuous(index, float(steps), out)
    return out


def limit_discrete(values: np.ndarray, min_val: float, discrete_range: float) -> np.ndarray:
    values = np.ascontiguousarray(values, dtype=np.float64)
    out = np.empty_like(values)
    _limit_discrete(values, float(min_val), float(discrete_range), out)
    return out
