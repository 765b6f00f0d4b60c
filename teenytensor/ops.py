"""Defines how the buffer behind a tensor comes into existence, used by data.TensorData.loadop.

- EMPTY: a zero-filled buffer of the requested precision.
- CONST: a buffer with every element set to one value, converted to the requested precision.
- FROM: an existing buffer, converted element by element to the requested precision.

"""
from collections import namedtuple

LoadOps = namedtuple('LoadOps', ['EMPTY', 'CONST', 'FROM'])
