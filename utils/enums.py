from enum import Enum, auto

class ColoringMethod(Enum):
    FIXED_COLOR = auto()
    DISCRETE_LEVEL_SETS = auto()
    SMOOTH_NIC_LEVEL_SETS = auto()
    SMOOTH_EIC_LEVEL_SETS = auto()
    SECTOR_DECOMPOSITION = auto()
    REAL_COMPONENT = auto()
    IMAGINARY_COMPONENT = auto()
    MODULUS = auto()
    AVERAGE_DISTANCE = auto()
    ANGLE = auto()
    LYAPUNOV_EXPONENT = auto()
    CURVATURE = auto()
    STRIPING = auto()
    MIN_GAUSSIAN_DISTANCE = auto()
    AVG_GAUSSIAN_DISTANCE = auto()
    EXTERIOR_DISTANCE = auto()
    ORBIT_TRAP_DISK = auto()
    ORBIT_TRAP_CROSS_STALKS = auto()
    ORBIT_TRAP_SINE = auto()
    ORBIT_TRAP_TANGENS = auto()
    DISCRETE_ROOTS = auto()
    SMOOTH_ROOTS = auto()

class ColorMapScaling(Enum):
    LINEAR = auto()
    LOGARITHMIC = auto()
    EXPONENTIAL = auto()
    SQRT = auto()
    RANK_ORDER = auto()

class ColorMapUsage(Enum):
    FULL = auto()
    LIMITED_CONTINUOUS = auto()
    LIMITED_DISCRETE = auto()

class PanDirection(Enum):
    LEFT = auto()
    RIGHT = auto()
    UP = auto()
    DOWN = auto()
