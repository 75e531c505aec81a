import numpy as np
from PySide6.QtGui import QImage

_FORMATS = {
    1: (QImage.Format_Grayscale8, 1),
    3: (QImage.Format_RGB888, 3),
    4: (QImage.Format_RGBA8888, 4),
}


def ndarray_to_qimage(arr: np.ndarray) -> QImage:
    """
    Wrap an (h, w), (h, w, 1), (h, w, 3) RGB or (h, w, 4) RGBA uint8 array
    in a QImage that owns a copy of the pixels.
    """
    if arr.ndim == 2:
        arr = arr[..., np.newaxis]
    if arr.ndim != 3 or arr.shape[2] not in _FORMATS:
        raise ValueError(f"Unsupported ndarray shape {arr.shape}")

    h, w, c = arr.shape
    fmt, bytes_per_pixel = _FORMATS[c]
    data = np.ascontiguousarray(arr, dtype=np.uint8).tobytes()
    # QImage does not take ownership of `data`; copy() detaches it.
    return QImage(data, w, h, w * bytes_per_pixel, fmt).copy()
