from PySide6.QtCore import QObject, Signal
from PySide6.QtGui import QImage

from rendering.controller import FractalController
from rendering.events import FrameEvent, LogEvent, ViewportEvent
from utils.image_helpers import ndarray_to_qimage


class QtFractalBridge(QObject):
    """
    Thin adapter that converts controller events to Qt signals for the UI.
    """
    image_updated = Signal(QImage, int, int)
    viewport_changed = Signal(float, float, float, float, int, int)
    log_text = Signal(str)

    def __init__(self, controller: FractalController, parent=None):
        super().__init__(parent)
        self.controller = controller

        self.controller.on_frame = self._on_frame
        self.controller.on_viewport = self._on_viewport
        self.controller.on_log = self._on_log

    # --------- Conversions ---------------------
    def _on_frame(self, evt: FrameEvent) -> None:
        self.image_updated.emit(ndarray_to_qimage(evt.data), evt.width, evt.height)

    def _on_viewport(self, evt: ViewportEvent) -> None:
        x1, y1, x2, y2 = evt.rect.as_tuple()
        self.viewport_changed.emit(x1, y1, x2, y2, evt.level, evt.max_iterations)

    def _on_log(self, evt: LogEvent) -> None:
        self.log_text.emit(evt.message)
