from __future__ import annotations
from typing import Iterable, List, Tuple

from teenytensor.helpers import all_int, prod, shape_int
from teenytensor.errors import InvalidShape

# key entry meaning "keep every coordinate along this axis"
WILDCARD = -1


class Shape(tuple):
    """Axis sizes of a tensor, axis 0 varying fastest in the flat buffer.

    The stride of axis i is the product of the sizes of all axes before it, so for a
    Shape(4, 3) element [i, j] lives at offset i + 4*j. Being a tuple, a Shape can't be
    mutated after it is attached to a tensor.
    """
    def __new__(cls, *dims):
        if len(dims) == 1 and not all_int(dims) and isinstance(dims[0], Iterable): dims = tuple(dims[0])
        return super().__new__(cls, dims)

    def __repr__(self): return f"Shape{tuple(self)!r}"

    @property
    def ndim(self) -> int: return len(self)

    def numel(self) -> shape_int: return prod(self)

    def stride_of(self, axis: int) -> shape_int: return prod(self[:axis])

    def strides(self) -> Tuple[shape_int, ...]:
        strides = [1] * len(self)
        for i in range(1, len(self)): strides[i] = strides[i-1] * self[i-1]
        return tuple(strides)

    def key(self) -> List[int]:
        """Index template with every axis left open, ready to have some axes fixed for get_sub."""
        return [WILDCARD] * len(self)

    def equal(self, other) -> bool:
        other = other if isinstance(other, Shape) else Shape(other)
        if self.ndim != other.ndim: return False
        return all(a == b for a, b in zip(self, other))

    def validate(self) -> Shape:
        if not self: raise InvalidShape("shape must have at least one axis")
        if not all_int(tuple(self)): raise InvalidShape(f"axis sizes must be integers, got {self}")
        if any(s <= 0 for s in self): raise InvalidShape(f"axis sizes must be positive, got {self}")
        return self
