from __future__ import annotations
from typing import List, Tuple, ClassVar, Optional, Sequence, Union
import numpy as np

from teenytensor.helpers import DType, dtypes, shape_int
from teenytensor.data import TensorData
from teenytensor.ops import LoadOps
from teenytensor.tensor_shapes import Shape
from teenytensor.errors import InvalidShape, TypeMismatch

from teenytensor.tensor_create import zeros, full, zeros_like, full_like
from teenytensor.tensor_reshape import reshape, flatten
from teenytensor.tensor_index_slice import index_of, offset_of, get, get_at, set, set_at, get_typed, set_typed, get_sub
from teenytensor.tensor_index_slice import __getitem__, __setitem__, check_dtype
from teenytensor.tensor_auxiliary import equal, to_string, numpy

class Tensor:
    """A rank-N container holding a single flat buffer of half, single or double precision floats.

    Axis 0 varies fastest in the buffer. The precision is fixed at construction; reshape only
    changes how the buffer is indexed.
    """
    __slots__ = "data", "_shape", "_strides"
    default_type: ClassVar[DType] = dtypes.float32

    def __init__(self, data:Optional[np.ndarray]=None, dtype:Optional[DType]=None, shape:Union[None, int, Sequence[int]]=None):
        dtype = Tensor.default_type if dtype is None else dtype
        if not isinstance(dtype, DType) or not dtypes.is_float(dtype): raise TypeMismatch(f"invalid dtype {dtype!r}")
        if shape is None:
            if data is None: raise InvalidShape("a tensor created without a buffer needs a shape")
            shape = len(TensorData.from_buffer(data))
        self._shape: Shape = Shape(shape).validate()
        self._strides: Tuple[shape_int, ...] = self._shape.strides()
        # NOTE: the buffer is always a private copy, converted to dtype where the caller's precision differs
        if data is None: self.data = TensorData.loadop(LoadOps.EMPTY, self._shape.numel(), dtype)
        else: self.data = TensorData.loadop(LoadOps.FROM, self._shape.numel(), dtype, data)

    # ------------------------------------------------------------------------------------------------------------------
    # basic properties

    def __repr__(self): return f"<Tensor shape={tuple(self.shape)} dtype={self.dtype!r}>"
    def __str__(self): return to_string(self)
    @property
    def shape(self) -> Shape: return self._shape
    @property
    def strides(self) -> Tuple[shape_int, ...]: return self._strides
    @property
    def dtype(self) -> DType: return self.data.dtype
    @property
    def ndim(self) -> int: return len(self._shape)
    @property
    def rank(self) -> int: return self.ndim
    def numel(self) -> shape_int: return len(self.data)
    def element_size(self) -> int: return self.dtype.itemsize
    def nbytes(self) -> int: return self.numel() * self.element_size()

    # ------------------------------------------------------------------------------------------------------------------
    # tensor_create.py

    @staticmethod
    def zeros(*shape, **kwargs) -> Tensor: return zeros(*shape, **kwargs)
    @staticmethod
    def full(shape, fill_value, **kwargs) -> Tensor: return full(shape, fill_value, **kwargs)
    def zeros_like(self, **kwargs) -> Tensor: return zeros_like(self, **kwargs)
    def full_like(self, fill_value, **kwargs) -> Tensor: return full_like(self, fill_value, **kwargs)

    # ------------------------------------------------------------------------------------------------------------------
    # tensor_reshape.py

    def reshape(self, shape, *args) -> None: reshape(self, shape, *args)
    def flatten(self) -> None: flatten(self)

    # ------------------------------------------------------------------------------------------------------------------
    # tensor_index_slice.py

    def index_of(self, offset:shape_int) -> List[int]: return index_of(self, offset)
    def offset_of(self, index:Sequence[int]) -> shape_int: return offset_of(self, index)

    def get(self, index:Sequence[int]): return get(self, index)
    def get_at(self, offset:shape_int): return get_at(self, offset)
    def set(self, index:Sequence[int], value) -> None: set(self, index, value)
    def set_at(self, offset:shape_int, value) -> None: set_at(self, offset, value)

    def get_f16(self, index:Sequence[int]) -> np.uint16: return get_typed(self, index, dtypes.float16)
    def get_f32(self, index:Sequence[int]) -> np.float32: return get_typed(self, index, dtypes.float32)
    def get_f64(self, index:Sequence[int]) -> np.float64: return get_typed(self, index, dtypes.float64)
    def set_f16(self, index:Sequence[int], value) -> None: set_typed(self, index, value, dtypes.float16)
    def set_f32(self, index:Sequence[int], value) -> None: set_typed(self, index, value, dtypes.float32)
    def set_f64(self, index:Sequence[int], value) -> None: set_typed(self, index, value, dtypes.float64)

    def __getitem__(self, val): return __getitem__(self, val)
    def __setitem__(self, val, v): return __setitem__(self, val, v)

    def get_sub(self, key:Sequence[int]) -> Tensor: return get_sub(self, key)

    # ------------------------------------------------------------------------------------------------------------------
    # raw buffers, read only

    def _slice(self, dtype:DType) -> np.ndarray:
        check_dtype(self, dtype)
        return self.data.view()
    def f16_slice(self) -> np.ndarray: return self._slice(dtypes.float16)
    def f32_slice(self) -> np.ndarray: return self._slice(dtypes.float32)
    def f64_slice(self) -> np.ndarray: return self._slice(dtypes.float64)

    # ------------------------------------------------------------------------------------------------------------------
    # tensor_auxiliary.py

    def equal(self, other:Tensor) -> bool: return equal(self, other)
    def numpy(self) -> np.ndarray: return numpy(self)

    # ***** cast ops *****

    def cast(self, dtype:DType) -> Tensor: return Tensor(self.data.data, dtype, self.shape)
    def half(self) -> Tensor: return self.cast(dtypes.float16)
    def float(self) -> Tensor: return self.cast(dtypes.float32)
    def double(self) -> Tensor: return self.cast(dtypes.float64)
