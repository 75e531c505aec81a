from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

import numpy as np
from scipy import ndimage

logger = logging.getLogger(__name__)


class ImageFilter(ABC):
    """
    Post-processing step on a finished (H, W, 3) uint8 image.
    Filters never modify their input; they return a new image.
    """
    name: str = "filter"

    @abstractmethod
    def apply(self, image: np.ndarray) -> np.ndarray:
        ...

    def parameters(self) -> Dict[str, Any]:
        return {}

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in self.parameters().items())
        return f"{type(self).__name__}({params})"


def _convolve(image: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """
    Applies `kernel` to each channel independently. Destination pixels whose
    kernel window does not fit inside the image are set to zero.
    """
    kh, kw = kernel.shape
    top, left = (kh - 1) // 2, (kw - 1) // 2
    # ndimage centres a window of size n at n // 2 + origin
    out = ndimage.correlate(image.astype(np.float64), kernel[:, :, np.newaxis],
                            mode='constant', cval=0.0,
                            origin=(top - kh // 2, left - kw // 2, 0))
    out = np.clip(np.rint(out), 0, 255).astype(np.uint8)
    h, w = out.shape[:2]
    bottom, right = h - (kh - 1 - top), w - (kw - 1 - left)
    mask = np.zeros((h, w), dtype=bool)
    mask[top:max(bottom, top), left:max(right, left)] = True
    out[~mask] = 0
    return out


class IdentityFilter(ImageFilter):
    name = "identity"

    def apply(self, image: np.ndarray) -> np.ndarray:
        return image.copy()


class BlurFilter(ImageFilter):
    """
    Box blur with a square kernel_size x kernel_size mean kernel.
    Sizes below 3 are raised to 3.
    """
    name = "blur"

    def __init__(self, kernel_size: int = 3) -> None:
        self.kernel_size = max(int(kernel_size), 3)

    def apply(self, image: np.ndarray) -> np.ndarray:
        k = self.kernel_size
        return _convolve(image, np.full((k, k), 1.0 / (k * k)))

    def parameters(self) -> Dict[str, Any]:
        return {"kernel_size": self.kernel_size}


class EdgeFilter(ImageFilter):
    name = "edge"

    def __init__(self, strength: float = 9.0) -> None:
        self.strength = float(strength)

    def apply(self, image: np.ndarray) -> np.ndarray:
        s = self.strength
        kernel = np.array([[0.0, -s, 0.0],
                           [-s, 4.0 * s, -s],
                           [0.0, -s, 0.0]])
        return _convolve(image, kernel)

    def parameters(self) -> Dict[str, Any]:
        return {"strength": self.strength}


class SharpenFilter(ImageFilter):
    name = "sharpen"

    _KERNEL = np.array([[0.0, -1.0, 0.0],
                        [-1.0, 5.0, -1.0],
                        [0.0, -1.0, 0.0]])

    def apply(self, image: np.ndarray) -> np.ndarray:
        return _convolve(image, self._KERNEL)


class PosteriseFilter(ImageFilter):
    """Reduces every channel to multiples of `step`."""
    name = "posterise"

    def __init__(self, step: int = 32) -> None:
        if step < 1:
            raise ValueError(f"Posterise step must be positive, got {step}")
        self.step = int(step)

    def apply(self, image: np.ndarray) -> np.ndarray:
        return image - (image % self.step)

    def parameters(self) -> Dict[str, Any]:
        return {"step": self.step}


class InvertFilter(ImageFilter):
    name = "invert"

    def apply(self, image: np.ndarray) -> np.ndarray:
        return 255 - image


FILTERS: Dict[str, Callable[..., ImageFilter]] = {
    cls.name: cls for cls in (IdentityFilter, BlurFilter, EdgeFilter,
                              SharpenFilter, PosteriseFilter, InvertFilter)
}


def create_filter(name: str, **params) -> ImageFilter:
    try:
        factory = FILTERS[name]
    except KeyError:
        raise KeyError(f"Unknown filter '{name}'. Known: {', '.join(sorted(FILTERS))}") from None
    return factory(**params)


class FilterChain:
    """
    Ordered list of filters applied one after another to a finished image.
    """

    def __init__(self, filters: Optional[List[ImageFilter]] = None) -> None:
        self._filters: List[ImageFilter] = list(filters or [])

    def add(self, image_filter: ImageFilter) -> None:
        self._filters.append(image_filter)

    def reset(self) -> None:
        self._filters.clear()

    def __len__(self) -> int:
        return len(self._filters)

    def __iter__(self) -> Iterator[ImageFilter]:
        return iter(self._filters)

    def apply(self, image: np.ndarray) -> np.ndarray:
        out = image
        for f in self._filters:
            logger.debug("Applying %r", f)
            out = f.apply(out)
        return out

    # ---- Description ----

    def describe(self) -> List[Tuple[str, Dict[str, Any]]]:
        return [(f.name, f.parameters()) for f in self._filters]

    @classmethod
    def from_description(cls, description: List[Tuple[str, Dict[str, Any]]]) -> "FilterChain":
        return cls([create_filter(name, **params) for name, params in description])
