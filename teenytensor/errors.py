"""Error kinds raised by tensor construction, indexing and reshaping.

Each one also derives from the builtin exception a caller would naturally catch for it, so
`except IndexError` keeps working around tensor indexing.
"""


class TensorError(Exception):
    """Base class for every error raised by teenytensor."""


class InvalidShape(TensorError, ValueError):
    """A non-positive axis size, or a buffer whose length does not match the shape."""


class DimMismatch(TensorError, IndexError):
    """An index whose length differs from the tensor rank."""


class IndexOutOfRange(TensorError, IndexError):
    """An index component outside its axis, or a flat offset outside the buffer."""


class InvalidData(TensorError, TypeError):
    """A buffer that is not one of the recognized numeric representations."""


class TypeMismatch(TensorError, TypeError):
    """A value or accessor whose precision does not match the tensor precision."""
