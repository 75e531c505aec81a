from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Callable, Optional

from utils.coords import ComplexRect, ScreenPoint, force_partial_order
from utils.enums import PanDirection

MINIMUM_ZOOM_SIZE = 25


@dataclass
class ViewportSettings:
    """
    Navigation behaviour of the controller.
    Lock_aspect_ratio keeps every viewport at the display's width/height ratio.
    Centred_zooming treats the selection anchor as the box centre.
    Auto_max_iterations lets the engine pick the iteration limit per zoom depth.
    """
    lock_aspect_ratio: bool = True
    centred_zooming: bool = True
    auto_max_iterations: bool = False
    minimum_zoom_size: int = MINIMUM_ZOOM_SIZE


@dataclass(frozen=True)
class SelectionBox:
    """Screen rectangle resolved from a drag, ordered top-left first."""
    top_left: ScreenPoint
    bottom_right: ScreenPoint
    accepted: bool


def resolve_viewport(rect: ComplexRect, screen_width: int, screen_height: int,
                     lock_aspect: bool = True) -> ComplexRect:
    """
    Order the corners and, with aspect lock, reshape the rectangle around
    its midpoint so width/height equals screen_width/screen_height.
    """
    rect = rect.normalized()
    if not lock_aspect:
        return rect

    screen_ratio = screen_width / screen_height
    width, height = rect.width, rect.height
    if screen_ratio > 1.0:
        width = height * screen_ratio
    else:
        height = width / screen_ratio

    mid = rect.center
    return ComplexRect(complex(mid.real - width / 2.0, mid.imag - height / 2.0),
                       complex(mid.real + width / 2.0, mid.imag + height / 2.0))


def lock_selection_extent(anchor: ScreenPoint, extent: ScreenPoint) -> ScreenPoint:
    """
    Square up a drag box: the shorter side is stretched to the longer one,
    keeping the drag direction of each axis.
    """
    width = float(extent.x - anchor.x)
    height = float(extent.y - anchor.y)
    if height != 0.0:
        aspect = width / height
    elif width != 0.0:
        aspect = math.copysign(math.inf, width)
    else:
        aspect = math.nan

    sign = -1.0 if aspect < 0 else 1.0
    if abs(aspect) > 1.0:
        height = sign * width
    else:
        width = sign * height
    return ScreenPoint(anchor.x + int(width), anchor.y + int(height))


def resolve_selection(anchor: ScreenPoint, extent: ScreenPoint, centred: bool,
                      minimum_size: int = MINIMUM_ZOOM_SIZE) -> SelectionBox:
    """
    Corner-to-corner box, or with `centred` a box of twice the drag distance
    around the anchor. The minimum size is halved in centred mode.
    """
    if centred:
        x1, y1, x2, y2 = anchor.x, anchor.y, extent.x, extent.y
    else:
        (x1, x2), (y1, y2) = force_partial_order((anchor.x, extent.x),
                                                 (anchor.y, extent.y))
    zoom_width = abs(extent.x - anchor.x)
    zoom_height = abs(extent.y - anchor.y)

    if centred:
        zoom_width = abs(x2 - x1 - 1)
        zoom_height = abs(y2 - y1 - 1)
        x1 -= zoom_width
        y1 -= zoom_height
        x2 = x1 + (zoom_width + 1) * 2
        y2 = y1 + (zoom_height + 1) * 2
        minimum_size //= 2

    (x1, x2), (y1, y2) = force_partial_order((x1, x2), (y1, y2))
    accepted = zoom_width > minimum_size and zoom_height > minimum_size
    return SelectionBox(ScreenPoint(x1, y1), ScreenPoint(x2, y2), accepted)


def selection_to_zoom_rect(anchor: ScreenPoint, extent: ScreenPoint,
                           centred: bool, lock_aspect: bool,
                           to_complex: Callable[[ScreenPoint], complex],
                           minimum_size: int = MINIMUM_ZOOM_SIZE) -> Optional[ComplexRect]:
    """
    Convert a screen drag into the complex rectangle to zoom into, or None
    when the selection is too small.
    """
    if lock_aspect:
        extent = lock_selection_extent(anchor, extent)
    box = resolve_selection(anchor, extent, centred, minimum_size)
    if not box.accepted:
        return None
    return ComplexRect(to_complex(box.top_left), to_complex(box.bottom_right))


def pan_rect(rect: ComplexRect, direction: PanDirection, factor: float,
             inverse: bool = False) -> ComplexRect:
    """
    Shift both corners by `factor` of the rectangle's width (left/right) or
    height (up/down). Up moves towards larger imaginary parts.
    """
    factor = min(max(factor, 0.0), 1.0)
    if inverse:
        factor = -factor

    dx = abs(rect.p2.real - rect.p1.real) * factor
    dy = abs(rect.p2.imag - rect.p1.imag) * factor
    shift = {
        PanDirection.LEFT: complex(-dx, 0.0),
        PanDirection.RIGHT: complex(dx, 0.0),
        PanDirection.UP: complex(0.0, dy),
        PanDirection.DOWN: complex(0.0, -dy),
    }[direction]
    return ComplexRect(rect.p1 + shift, rect.p2 + shift)
