from __future__ import annotations

from teenytensor.helpers import DEBUG
from teenytensor.tensor_shapes import Shape
from teenytensor.errors import InvalidShape


# movement ops

def reshape(tensor: 'Tensor', shape, *args) -> None:
    """Reinterpret the buffer under a new shape, in place. Element order in the buffer is untouched."""
    new_shape = Shape(shape, *args).validate()
    if new_shape.numel() != len(tensor.data):
        raise InvalidShape(f"can't reshape {len(tensor.data)} elements into {new_shape}")
    if DEBUG >= 2: print(f"reshape {tensor.shape} -> {new_shape}")
    tensor._shape, tensor._strides = new_shape, new_shape.strides()


def flatten(tensor: 'Tensor') -> None: reshape(tensor, len(tensor.data))
