from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ScreenPoint:
    """
    Pixel location on the display surface. Y grows downward.
    """
    x: int
    y: int


@dataclass(frozen=True)
class ComplexRect:
    """
    Rectangle in the complex plane spanned by two corners.
    p1 is meant to be the lower-left and p2 the upper-right corner, but raw
    input is never trusted: call normalized() before relying on the order.
    """
    p1: complex
    p2: complex

    @property
    def width(self) -> float:
        return abs(self.p2.real - self.p1.real)

    @property
    def height(self) -> float:
        return abs(self.p2.imag - self.p1.imag)

    @property
    def center(self) -> complex:
        return complex((self.p1.real + self.p2.real) / 2.0,
                       (self.p1.imag + self.p2.imag) / 2.0)

    def normalized(self) -> "ComplexRect":
        (x1, x2), (y1, y2) = force_partial_order((self.p1.real, self.p2.real),
                                                 (self.p1.imag, self.p2.imag))
        return ComplexRect(complex(x1, y1), complex(x2, y2))

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return self.p1.real, self.p1.imag, self.p2.real, self.p2.imag


def force_partial_order(xs: Tuple[float, float],
                        ys: Tuple[float, float]):
    """Sort each coordinate pair so the first entry is the smaller one."""
    x1, x2 = xs
    y1, y2 = ys
    if x1 > x2:
        x1, x2 = x2, x1
    if y1 > y2:
        y1, y2 = y2, y1
    return (x1, x2), (y1, y2)


def screen_to_complex(point: ScreenPoint, bounds: ComplexRect,
                      image_width: int, image_height: int) -> complex:
    bounds = bounds.normalized()
    fx = bounds.p1.real + (point.x / image_width) * bounds.width
    fy = bounds.p1.imag + ((image_height - point.y) / image_height) * bounds.height
    return complex(fx, fy)


def complex_to_screen(z: complex, bounds: ComplexRect,
                      image_width: int, image_height: int) -> ScreenPoint:
    bounds = bounds.normalized()
    px = int(round((z.real - bounds.p1.real) / bounds.width * image_width))
    py = int(round(image_height - (z.imag - bounds.p1.imag) / bounds.height * image_height))
    return ScreenPoint(px, py)
