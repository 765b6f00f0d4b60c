from typing import List, Sequence

from teenytensor.helpers import DType, DEBUG, all_int, shape_int
from teenytensor.tensor_shapes import Shape, WILDCARD
from teenytensor.errors import DimMismatch, IndexOutOfRange, TypeMismatch


# ***** flat offset <-> multi-index *****

# - Axis 0 varies fastest: for Shape(4, 3) the strides are (1, 4) and [i, j] lives at i + 4*j.
# - offset -> index is a mixed radix decomposition, walking from the largest stride down to the smallest.
# - index -> offset is the dot product of index and strides.
# - Both assume their input is in range, the check_* functions below are the validating entrypoints.

def index_of(tensor: 'Tensor', offset: shape_int) -> List[int]:
    index = [0] * len(tensor.strides)
    for i in reversed(range(len(tensor.strides))):
        index[i], offset = divmod(offset, tensor.strides[i])
    return index

def offset_of(tensor: 'Tensor', index: Sequence[int]) -> shape_int:
    return sum(st * i for st, i in zip(tensor.strides, index))


# ***** validation *****

def check_offset(tensor: 'Tensor', offset) -> None:
    if not all_int((offset,)): raise IndexOutOfRange(f"offset must be an integer, got {offset!r}")
    if not 0 <= offset < tensor.numel():
        raise IndexOutOfRange(f"offset {offset} is out of bounds for a tensor with {tensor.numel()} elements")

def check_index(tensor: 'Tensor', index: Sequence[int], wildcard=False) -> None:
    if len(index) != tensor.ndim: raise DimMismatch(f"index {list(index)} has {len(index)} entries, tensor has rank {tensor.ndim}")
    if not all_int(tuple(index)): raise IndexOutOfRange(f"index components must be integers, got {list(index)}")
    for i, (e, dim_sz) in enumerate(zip(index, tensor.shape)):
        if wildcard and e == WILDCARD: continue
        if not 0 <= e < dim_sz: raise IndexOutOfRange(f"index {e} is out of bounds for axis {i} with size {dim_sz}")

def check_dtype(tensor: 'Tensor', dtype: DType) -> None:
    if tensor.dtype != dtype: raise TypeMismatch(f"tensor holds {tensor.dtype}, not {dtype}")


# ***** element access *****

def get(tensor: 'Tensor', index: Sequence[int]):
    check_index(tensor, index)
    return tensor.data.at(offset_of(tensor, index))

def get_at(tensor: 'Tensor', offset: shape_int):
    check_offset(tensor, offset)
    return tensor.data.at(offset)

def set(tensor: 'Tensor', index: Sequence[int], value) -> None:
    check_index(tensor, index)
    tensor.data.assign_at(offset_of(tensor, index), value)

def set_at(tensor: 'Tensor', offset: shape_int, value) -> None:
    check_offset(tensor, offset)
    tensor.data.assign_at(offset, value)

# the precision specific accessors check the tag once and convert plain python numbers
def get_typed(tensor: 'Tensor', index: Sequence[int], dtype: DType):
    check_dtype(tensor, dtype)
    check_index(tensor, index)
    return tensor.data.data[offset_of(tensor, index)]

def set_typed(tensor: 'Tensor', index: Sequence[int], value, dtype: DType) -> None:
    check_dtype(tensor, dtype)
    check_index(tensor, index)
    tensor.data.data[offset_of(tensor, index)] = tensor.data.coerce_value(value)

# - A tuple or list is a multi-index, a bare integer a flat offset.
def __getitem__(tensor: 'Tensor', val):
    return get_at(tensor, val) if all_int((val,)) else get(tensor, val)

def __setitem__(tensor: 'Tensor', val, v) -> None:
    return set_at(tensor, val, v) if all_int((val,)) else set(tensor, val, v)


# ***** sub-views *****

def get_sub(tensor: 'Tensor', key: Sequence[int]) -> 'Tensor':
    """Copy out the part of the tensor selected by `key`.

    `key` has one entry per axis: a coordinate fixes that axis, WILDCARD (-1) keeps all of it.
    The result has the same rank, fixed axes collapse to size 1, and owns a fresh buffer.
    For a Shape(4, 3) tensor holding 0..11 the key [-1, 1] gives a Shape(4, 1) tensor
    holding 4, 5, 6, 7.
    """
    from teenytensor.tensor import Tensor
    check_index(tensor, key, wildcard=True)
    shape = Shape(tuple(dim_sz if k == WILDCARD else 1 for k, dim_sz in zip(key, tensor.shape)))
    if DEBUG >= 2: print(f"get_sub {tensor.shape} {list(key)} -> {shape}")
    ret = Tensor(None, tensor.dtype, shape)
    for offset in range(shape.numel()):
        src = [i if k == WILDCARD else k for i, k in zip(index_of(ret, offset), key)]
        ret.data.assign_at(offset, tensor.data.at(offset_of(tensor, src)))
    return ret
