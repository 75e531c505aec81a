from dataclasses import dataclass
import numpy as np
from typing import Optional

from utils.coords import ComplexRect

@dataclass(frozen=True)
class FrameEvent:
    data: np.ndarray
    width: int
    height: int
    seq: int        # recompute sequence number the frame was colored from

@dataclass(frozen=True)
class ViewportEvent:
    rect: ComplexRect   # resolved rectangle handed to the engine
    level: int          # zoom stack depth
    max_iterations: int
    seq: int

@dataclass(frozen=True)
class LogEvent:
    message: str
    level: Optional[int]
