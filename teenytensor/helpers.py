from typing import Tuple, Optional, Final, Any
import os
import functools
import numpy as np
from math import prod  # noqa: F401 # pylint:disable=unused-import
from dataclasses import dataclass

shape_int = int

def all_int(t: Tuple[Any, ...]) -> bool:
    """Check if all elements in a tuple are integers (bools excluded)."""
    return all(isinstance(s, (int, np.integer)) and not isinstance(s, bool) for s in t)

@functools.lru_cache(maxsize=None)
def getenv(key, default=0):
    """Get an environment variable and convert it to the type of 'default'."""
    return type(default)(os.getenv(key, default))

# Global flag for debug output
DEBUG = getenv("DEBUG")

@dataclass(frozen=True)
class DType:
    """Precision tag of a tensor buffer."""
    itemsize: int  # Size of one element in bytes
    name: str      # Name of the precision
    np: type       # numpy type the buffer is stored as
    bits: type     # unsigned integer type with the same width, used for bit-exact comparisons

    def __repr__(self):
        return f"dtypes.{self.name}"

class dtypes:
    """Container for the three floating point precisions a tensor can hold.

    Half precision has no arithmetic here, so its buffers hold raw binary16 bit patterns
    (numpy.uint16) produced by teenytensor.float16 rather than numpy.float16 values.
    """
    @staticmethod
    def is_float(x: DType) -> bool:
        """Check if a data type is one of the supported float types."""
        return x in (dtypes.float16, dtypes.float32, dtypes.float64)

    @staticmethod
    def from_np(x) -> Optional[DType]:
        """Convert a numpy data type to a DType, None if it is not a tensor buffer type."""
        return DTYPES_DICT.get(np.dtype(x).name)

    float16: Final[DType] = DType(2, "half", np.uint16, np.uint16)
    half = float16
    float32: Final[DType] = DType(4, "float", np.float32, np.uint32)
    float = float32
    float64: Final[DType] = DType(8, "double", np.float64, np.uint64)
    double = float64

# numpy dtype names a buffer may arrive as; float16 arrays are reinterpreted as their bit patterns
DTYPES_DICT = {"uint16": dtypes.float16, "float16": dtypes.float16, "float32": dtypes.float32, "float64": dtypes.float64}
