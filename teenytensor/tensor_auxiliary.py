from __future__ import annotations
import numpy as np

from teenytensor.helpers import dtypes
from teenytensor.tensor_index_slice import offset_of
import teenytensor.float16 as float16


def equal(tensor: 'Tensor', other) -> bool:
    from teenytensor.tensor import Tensor
    if not isinstance(other, Tensor): return False
    return tensor.shape.equal(other.shape) and tensor.dtype == other.dtype and tensor.data.equal(other.data)


def _fmt(tensor: 'Tensor', v) -> str:
    return str(float16.to_f32(v)) if tensor.dtype == dtypes.float16 else str(v)


def to_string(tensor: 'Tensor') -> str:
    """Nested brackets, outermost bracket iterating axis 0, innermost the last axis."""
    index = [0] * tensor.ndim
    def render(d: int) -> str:
        parts = []
        for i in range(tensor.shape[d]):
            index[d] = i
            parts.append(render(d+1) if d < tensor.ndim-1 else _fmt(tensor, tensor.data.at(offset_of(tensor, index))))
        return "[" + ", ".join(parts) + "]"
    return render(0)


def numpy(tensor: 'Tensor') -> np.ndarray:
    """Copy of the values as an array of the tensor's shape; half precision decodes to float32."""
    data = float16.decode_buffer(tensor.data.data, dtypes.float32) if tensor.dtype == dtypes.float16 else tensor.data.data.copy()
    # axis 0 is the fastest varying one, which is numpy's column major (Fortran) order
    return data.reshape(tensor.shape, order="F")
