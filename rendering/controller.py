from __future__ import annotations
import logging
import threading
import time
from os import PathLike
from typing import Callable, Optional, Union

import numpy as np
from PIL import Image

# Coloring imports
from coloring.colorizer import PixelColorizer
from coloring.policy import ColoringPolicy
from coloring.statistics import RangeCollector, RangeStatistics

# Fractal imports
from fractals.base import IterationEngine
from fractals.buffer import IterationBuffer

# Navigation imports
from navigation.viewport import (ViewportSettings, pan_rect, resolve_viewport,
                                 selection_to_zoom_rect)
from navigation.zoom_stack import ZoomStack

# Rendering imports
from rendering.events import FrameEvent, LogEvent, ViewportEvent

# Utils imports
from utils.coords import ComplexRect, ScreenPoint
from utils.enums import PanDirection

logger = logging.getLogger(__name__)


class FractalController:
    """
    UI-facing facade that owns:
      - the zoom stack and the navigation settings,
      - the coloring policy and the last iteration buffer,
      - the statistics and color passes,
      - event dispatch (frame/viewport/log).

    The iteration engine is driven synchronously. Viewport changes are
    single-flight: while one is computing, further requests are refused.
    Coloring passes are serialised on their own lock so the policy is never
    read by two passes at once.
    """

    def __init__(
        self,
        engine: IterationEngine,
        policy: Optional[ColoringPolicy] = None,
        settings: Optional[ViewportSettings] = None
    ) -> None:
        self.engine = engine
        self.policy = policy or ColoringPolicy.for_max_iterations(engine.max_iterations)
        self.settings = settings or ViewportSettings()

        # ----- Passes -----
        self.collector = RangeCollector()
        self.colorizer = PixelColorizer()

        # ----- State -----
        self.zoom_stack = ZoomStack()
        self.zoom_stack.push(engine.default_bounds())
        self._buffer: Optional[IterationBuffer] = None
        self._statistics: Optional[RangeStatistics] = None
        self._raw_image: Optional[np.ndarray] = None
        self._image: Optional[np.ndarray] = None
        self._seq = 0
        self._buffer_seq = 0

        # ----- Threading -----
        self._busy = threading.Lock()
        self._coloring_lock = threading.Lock()

        # Callbacks
        self.on_frame: Optional[Callable[[FrameEvent], None]] = None
        self.on_viewport: Optional[Callable[[ViewportEvent], None]] = None
        self.on_log: Optional[Callable[[LogEvent], None]] = None

    # ---------------------------------------------------------------------
    # Properties
    # ---------------------------------------------------------------------

    @property
    def is_busy(self) -> bool:
        return self._busy.locked()

    @property
    def buffer(self) -> Optional[IterationBuffer]:
        return self._buffer

    @property
    def statistics(self) -> Optional[RangeStatistics]:
        return self._statistics

    def magnification(self) -> int:
        """How many times the current view is smaller than the default one."""
        default = self.engine.default_bounds().normalized()
        current = self.engine.complex_bounds()
        ratios = []
        if current.width > 0:
            ratios.append(round(default.width / current.width))
        if current.height > 0:
            ratios.append(round(default.height / current.height))
        return int(max(ratios)) if ratios else 1

    # ---------------------------------------------------------------------
    # Navigation
    # ---------------------------------------------------------------------

    def refresh(self) -> bool:
        """Recompute the current top of the zoom stack."""
        return self._navigate(lambda: True)

    def zoom_in(self, p1: complex, p2: complex) -> bool:
        def push() -> bool:
            self.zoom_stack.push(ComplexRect(p1, p2))
            return True
        return self._navigate(push)

    def zoom_to_selection(self, anchor: ScreenPoint, extent: ScreenPoint) -> bool:
        rect = selection_to_zoom_rect(anchor, extent,
                                      centred=self.settings.centred_zooming,
                                      lock_aspect=self.settings.lock_aspect_ratio,
                                      to_complex=self.engine.screen_to_complex,
                                      minimum_size=self.settings.minimum_zoom_size)
        if rect is None:
            self._log("Selection too small, zoom cancelled", logging.DEBUG)
            return False
        return self.zoom_in(rect.p1, rect.p2)

    def zoom_out(self) -> bool:
        def pop() -> bool:
            if self.zoom_stack.level <= 1:
                return False
            self.zoom_stack.pop()
            return True
        return self._navigate(pop)

    def zoom_to_level(self, level: int) -> bool:
        def jump() -> bool:
            if level < 1 or level >= self.zoom_stack.level:
                return False
            self.zoom_stack.jump_to_level(level)
            return True
        return self._navigate(jump)

    def reset_zoom(self) -> bool:
        def reset() -> bool:
            self.zoom_stack.clear()
            self.zoom_stack.push(self.engine.default_bounds())
            return True
        return self._navigate(reset)

    def pan(self, direction: PanDirection, factor: float, inverse: bool = False) -> bool:
        def shift() -> bool:
            if self.zoom_stack.is_empty():
                return False
            self.zoom_stack.modify_top(
                pan_rect(self.zoom_stack.top, direction, factor, inverse))
            return True
        return self._navigate(shift)

    def set_zoom_stack(self, stack: ZoomStack) -> bool:
        if stack.is_empty():
            raise ValueError("Cannot navigate to an empty zoom stack")

        def replace() -> bool:
            self.zoom_stack = stack.clone()
            return True
        return self._navigate(replace)

    def save_zoom_stack(self, path: Union[str, PathLike]) -> None:
        self.zoom_stack.save(path)

    def load_zoom_stack(self, path: Union[str, PathLike]) -> bool:
        return self.set_zoom_stack(ZoomStack.load(path))

    def set_max_iterations(self, max_iterations: int) -> bool:
        def apply() -> bool:
            previous = self.engine.max_iterations
            with self._coloring_lock:
                self.engine.max_iterations = int(max_iterations)
                self.policy.remap_max_iterations(previous, int(max_iterations))
            return True
        return self._navigate(apply)

    # ---------------------------------------------------------------------
    # Coloring
    # ---------------------------------------------------------------------

    def recolor(self) -> Optional[np.ndarray]:
        """Run the statistics and color passes on the last buffer."""
        start = time.time()
        with self._coloring_lock:
            buffer = self._buffer
            if buffer is None:
                self._log("Nothing to recolor yet", logging.DEBUG)
                return None
            stats = self.collector.collect(buffer, self.policy)
            raw = self.colorizer.colorize(buffer, stats, self.policy, self.engine)
            image = self.colorizer.apply_filters(raw, self.policy)
            self._statistics = stats
            self._raw_image = raw
            self._image = image
            seq = self._buffer_seq

        self._log(f"Coloring time: {round(time.time() - start, 3)}s", logging.DEBUG)
        self._emit_frame(image, seq)
        return image

    def apply_post_processing_filters(self) -> Optional[np.ndarray]:
        """Re-run the filter chain on the last colored image."""
        with self._coloring_lock:
            if self._raw_image is None:
                return None
            image = self.colorizer.apply_filters(self._raw_image, self.policy)
            self._image = image
            seq = self._buffer_seq
        self._emit_frame(image, seq)
        return image

    def get_current_image(self) -> Optional[np.ndarray]:
        return self._image

    def export_image(self, path: Union[str, PathLike]) -> bool:
        image = self._image
        if image is None:
            self._log("No image to export", logging.WARNING)
            return False
        try:
            Image.fromarray(image).save(path, format="PNG")
        except (OSError, ValueError) as e:
            self._log(f"[FractalController] Export to {path} failed: {e}", logging.ERROR)
            return False
        self._log(f"Exported image to {path}", logging.INFO)
        return True

    # ---------------------------------------------------------------------
    # Internals
    # ---------------------------------------------------------------------

    def _navigate(self, mutate: Callable[[], bool]) -> bool:
        if not self._busy.acquire(blocking=False):
            self._log("Busy computing, viewport change ignored", logging.WARNING)
            return False
        try:
            if not mutate():
                return False
            self._zoom_to_stack()
            return True
        finally:
            self._busy.release()

    def _zoom_to_stack(self) -> None:
        rect = resolve_viewport(self.zoom_stack.top, self.engine.width,
                                self.engine.height, self.settings.lock_aspect_ratio)
        self.engine.set_complex_bounds(rect.p1, rect.p2)
        if self.settings.auto_max_iterations and not self.engine.use_fixed_iterations:
            self._calibrate_max_iterations()

        self._seq += 1
        seq = self._seq
        if self.on_viewport:
            self.on_viewport(ViewportEvent(rect, self.zoom_stack.level,
                                           self.engine.max_iterations, seq))

        start = time.time()
        buffer = self.engine.recalc()
        if seq != self._seq:
            # a newer viewport was requested meanwhile
            return
        with self._coloring_lock:
            self._buffer = buffer
            self._buffer_seq = seq
        self._log(f"Render time: {round(time.time() - start, 3)}s", logging.DEBUG)
        self.recolor()

    def _calibrate_max_iterations(self) -> None:
        previous = self.engine.max_iterations
        suggested = int(self.engine.auto_determine_max_iterations())
        if suggested == previous:
            return
        with self._coloring_lock:
            self.engine.max_iterations = suggested
            self.policy.remap_max_iterations(previous, suggested)
        self._log(f"Max iterations {previous} -> {suggested}", logging.INFO)

    def _emit_frame(self, image: Optional[np.ndarray], seq: int) -> None:
        if image is not None and self.on_frame:
            h, w = image.shape[:2]
            self.on_frame(FrameEvent(image, int(w), int(h), seq))

    def _log(self, message: str, level: int = logging.INFO) -> None:
        logger.log(level, message)
        if self.on_log:
            self.on_log(LogEvent(message, level))
