from __future__ import annotations
from typing import Optional

from teenytensor.helpers import DType
from teenytensor.tensor_shapes import Shape
from teenytensor.data import TensorData
from teenytensor.ops import LoadOps

#-----------------------------------------------------------------------------------------------------------------------
# creation helper functions

def zeros(*shape, dtype:Optional[DType]=None) -> 'Tensor':
    from teenytensor.tensor import Tensor
    return Tensor(None, dtype, Shape(*shape))


def full(shape, fill_value, dtype:Optional[DType]=None) -> 'Tensor':
    from teenytensor.tensor import Tensor
    ret = Tensor(None, dtype, Shape(shape))
    ret.data = TensorData.loadop(LoadOps.CONST, ret.numel(), ret.dtype, fill_value)
    return ret


def zeros_like(tensor: 'Tensor', **kwargs) -> 'Tensor':
    return zeros(tensor.shape, dtype=kwargs.pop("dtype", tensor.dtype))


def full_like(tensor: 'Tensor', fill_value, **kwargs) -> 'Tensor':
    return full(tensor.shape, fill_value, dtype=kwargs.pop("dtype", tensor.dtype))
