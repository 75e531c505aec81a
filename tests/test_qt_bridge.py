import numpy as np
import pytest

pytest.importorskip("PySide6")

from PySide6.QtCore import QCoreApplication  # noqa: E402

from adapters.qt_bridge import QtFractalBridge  # noqa: E402
from rendering.controller import FractalController  # noqa: E402
from utils.image_helpers import ndarray_to_qimage  # noqa: E402


@pytest.fixture(scope="module")
def qt_app():
    return QCoreApplication.instance() or QCoreApplication([])


@pytest.mark.parametrize("shape", [(4, 6), (4, 6, 1), (4, 6, 3), (4, 6, 4)])
def test_ndarray_to_qimage_dimensions(shape):
    img = ndarray_to_qimage(np.zeros(shape, dtype=np.uint8))
    assert (img.width(), img.height()) == (6, 4)
    assert not img.isNull()


def test_ndarray_to_qimage_pixel_values():
    arr = np.zeros((2, 3, 3), dtype=np.uint8)
    arr[1, 2] = (10, 20, 30)
    color = ndarray_to_qimage(arr).pixelColor(2, 1)
    assert (color.red(), color.green(), color.blue()) == (10, 20, 30)


def test_ndarray_to_qimage_rejects_bad_shape():
    with pytest.raises(ValueError):
        ndarray_to_qimage(np.zeros((2, 3, 2), dtype=np.uint8))


def test_bridge_forwards_controller_events(qt_app, engine):
    controller = FractalController(engine)
    bridge = QtFractalBridge(controller)
    images, viewports, logs = [], [], []
    bridge.image_updated.connect(lambda img, w, h: images.append((img.width(), w, h)))
    bridge.viewport_changed.connect(lambda *args: viewports.append(args))
    bridge.log_text.connect(logs.append)

    controller.refresh()

    assert images == [(engine.width, engine.width, engine.height)]
    assert len(viewports) == 1
    assert viewports[0][4] == 1
    assert logs
