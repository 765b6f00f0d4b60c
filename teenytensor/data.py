"""Defines the TensorData class, the flat buffer behind a tensor (tensor.Tensor.data).

A TensorData holds exactly one one-dimensional numpy array whose numpy dtype is the precision
tag: uint16 for half precision (raw binary16 bit patterns, see float16.py), float32 or
float64. There is no other state, so the three variants can't get out of sync with the tag,
and every operation below dispatches over exactly those three precisions.

The buffer knows nothing about shapes; tensor.Tensor maps multi-indices to flat offsets.

"""
import numpy as np
from teenytensor.ops import LoadOps
from teenytensor.helpers import DType, dtypes, DEBUG, all_int
from teenytensor.errors import InvalidShape, InvalidData, TypeMismatch
import teenytensor.float16 as float16

# python types a single element written into a buffer must have, per precision
VALUE_TYPES = {
    dtypes.float16: (np.uint16,),
    dtypes.float32: (np.float32,),
    dtypes.float64: (float,),  # numpy.float64 subclasses float
}


class TensorData:
    """A class that encapsulates a flat numpy buffer of one of the three tensor precisions."""

    def __init__(self, data: np.ndarray):
        """Initialize the TensorData with a flat numpy array."""
        self.data = data

    @property
    def dtype(self) -> DType:
        """Return the precision of the buffer."""
        return dtypes.from_np(self.data.dtype)

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        """Return a string representation of the TensorData object."""
        return f"<TensorData numel={len(self)} dtype={self.dtype}>"

    @staticmethod
    def from_buffer(buf) -> 'TensorData':
        """Wrap a caller supplied buffer without converting it.

        Raises:
            InvalidData: If `buf` is not a numpy array of float16/uint16, float32 or float64.
            InvalidShape: If `buf` is not one-dimensional.
        """
        if not isinstance(buf, np.ndarray):
            raise InvalidData(f"can't create a tensor buffer from {type(buf).__name__}")
        if dtypes.from_np(buf.dtype) is None:
            raise InvalidData(f"can't create a tensor buffer from a {buf.dtype} array")
        if buf.ndim != 1:
            raise InvalidShape(f"tensor buffers are flat, got an array of shape {buf.shape}")
        # bitwise comparisons and bit pattern views assume native byte order
        if not buf.dtype.isnative: buf = buf.astype(buf.dtype.newbyteorder("="))
        return TensorData(buf.view(np.uint16) if buf.dtype == np.float16 else buf)

    @staticmethod
    def loadop(op: LoadOps, numel: int, dtype: DType, arg=None) -> 'TensorData':
        """Create a TensorData of `numel` elements in the given precision.

        Args:

            op (LoadOps): How the buffer is produced (EMPTY, CONST or FROM).
            numel (int): Number of elements the buffer must hold.
            dtype (DType): Precision of the resulting buffer.
            arg (Optional): The fill value for CONST, the source buffer for FROM.

        Returns:
            TensorData: A buffer owned by nobody else.

        Raises:
            InvalidShape: If a FROM buffer doesn't hold exactly `numel` elements.
            NotImplementedError: If the operation is not supported.
        """
        if op == LoadOps.EMPTY:
            return TensorData(np.zeros(numel, dtype=dtype.np))
        elif op == LoadOps.CONST:
            return TensorData(np.full(numel, arg, dtype=np.float64)).cast(dtype)
        elif op == LoadOps.FROM:
            src = TensorData.from_buffer(arg)
            if len(src) != numel: raise InvalidShape(f"buffer has {len(src)} elements, shape needs {numel}")
            return src.cast(dtype)
        else:
            raise NotImplementedError(f"Operation {op} not implemented")

    def cast(self, dtype: DType) -> 'TensorData':
        """Return a copy of the buffer in another precision.

        Conversions to or from half precision go element by element through the float16
        codec; float32 <-> float64 is a plain numpy cast.
        """
        if dtype == self.dtype: return TensorData(self.data.copy())
        if DEBUG >= 1: print(f"cast {self} -> {dtype}")
        if dtype == dtypes.float16: return TensorData(float16.encode_buffer(self.data))
        if self.dtype == dtypes.float16: return TensorData(float16.decode_buffer(self.data, dtype))
        return TensorData(self.data.astype(dtype.np))

    # ------------------------------------------------------------------------------------------------------------------
    # element access by flat offset, bounds are checked by the caller

    def at(self, offset: int):
        return self.data[offset]

    def check_value(self, value):
        if not isinstance(value, VALUE_TYPES[self.dtype]):
            raise TypeMismatch(f"can't store {type(value).__name__} in a {self.dtype} buffer")
        return value

    def assign_at(self, offset: int, value):
        self.data[offset] = self.check_value(value)

    def coerce_value(self, value):
        """Convert a value for the typed setters, refusing anything that would change its meaning.

        Half buffers take numpy.uint16 patterns, numpy.float16 values (stored as their bit
        pattern) and integers in [0, 0xFFFF]. Single and double buffers take any real number.
        """
        if self.dtype == dtypes.float16:
            if isinstance(value, np.uint16): return value
            if isinstance(value, np.float16): return np.array(value, dtype=np.float16).view(np.uint16)[()]
            if all_int((value,)) and 0 <= value <= 0xFFFF: return np.uint16(value)
            raise TypeMismatch(f"{value!r} is not a half precision bit pattern")
        if all_int((value,)) or isinstance(value, (float, np.floating)): return self.dtype.np(value)
        raise TypeMismatch(f"can't store {type(value).__name__} in a {self.dtype} buffer")

    # ------------------------------------------------------------------------------------------------------------------

    def view(self) -> np.ndarray:
        """Read only view of the buffer."""
        ret = self.data.view()
        ret.flags.writeable = False
        return ret

    def equal(self, other: 'TensorData') -> bool:
        """Bit for bit comparison, so NaNs with the same payload match and 0.0 != -0.0."""
        if self.dtype != other.dtype or len(self) != len(other): return False
        return np.array_equal(self.data.view(self.dtype.bits), other.data.view(other.dtype.bits))
