"""Bit-level conversion between 32/64-bit floats and IEEE-754 binary16 (half precision).

A half value is represented by its raw 16-bit pattern, a numpy.uint16:

    bit 15      sign
    bits 14-10  exponent, bias 15
    bits 9-0    mantissa

Encoding truncates the source mantissa (no rounding) and maps source subnormals straight into
the half mantissa field without renormalizing, so values below the half normal range are
approximations. Decoding is exact: every 16-bit pattern has a float32 and float64 value.

Example:
    >>> hex(from_f32(1.0))
    '0x3c00'
    >>> float(to_f64(0xc000))
    -2.0
"""
from collections import namedtuple
import numpy as np

from teenytensor.helpers import DType, dtypes
from teenytensor.errors import TypeMismatch

NAN = 0x7FFF
INF_POS = 0x7C00
INF_NEG = 0xFC00
EXP_MASK = 0x7C00
MANTISSA_MASK = 0x03FF
SIGN_MASK = 0x8000

EXP_BIAS = 15
MANTISSA_BITS = 10

# layout of the wider IEEE-754 formats a half converts from and to
Layout = namedtuple("Layout", ["exp_bits", "mantissa_bits", "bias", "np", "bits"])
F32 = Layout(8, 23, 127, np.float32, np.uint32)
F64 = Layout(11, 52, 1023, np.float64, np.uint64)


def _bits_of(value, layout: Layout) -> int:
    return int(np.array(value, dtype=layout.np).view(layout.bits)[()])


def _from_bits(bits: int, layout: Layout):
    return np.array(bits, dtype=layout.bits).view(layout.np)[()]


def _encode(bits: int, src: Layout) -> np.uint16:
    sign = (bits >> (src.exp_bits + src.mantissa_bits)) << 15
    exp = (bits >> src.mantissa_bits) & ((1 << src.exp_bits) - 1)
    frac = bits & ((1 << src.mantissa_bits) - 1)
    shift = src.mantissa_bits - MANTISSA_BITS  # 13 for float32, 42 for float64

    # NaN or Inf
    if exp == (1 << src.exp_bits) - 1:
        return np.uint16(NAN if frac else sign | INF_POS)
    # source subnormal or zero, mantissa is moved over as is
    if exp == 0:
        return np.uint16(sign | frac >> shift)
    sexp = exp - src.bias + EXP_BIAS
    # too large
    if sexp >= 0x1f:
        return np.uint16(sign | INF_POS)
    # too small, ends up as a half subnormal or zero
    if sexp <= 0:
        return np.uint16(sign | (frac >> (1 - sexp)) >> shift)
    return np.uint16(sign | sexp << MANTISSA_BITS | frac >> shift)


def _decode(h, dst: Layout):
    h = int(h)
    sign = (h >> 15) & 0x1
    exp = (h >> MANTISSA_BITS) & 0x1f
    frac = h & MANTISSA_MASK
    sign_shift = dst.exp_bits + dst.mantissa_bits
    exp_ones = (1 << dst.exp_bits) - 1
    shift = dst.mantissa_bits - MANTISSA_BITS

    # NaN or Inf
    if exp == 0x1f:
        if frac:
            return _from_bits(exp_ones << dst.mantissa_bits | frac << shift | 0x1, dst)
        return _from_bits(sign << sign_shift | exp_ones << dst.mantissa_bits, dst)
    if exp == 0 and frac == 0:
        return _from_bits(sign << sign_shift, dst)
    # subnormal, shift until the implicit bit shows up
    if exp == 0:
        while frac & 0x400 == 0:
            frac <<= 1
            exp -= 1
        exp += 1
        frac &= MANTISSA_MASK
    exp += dst.bias - EXP_BIAS
    return _from_bits(sign << sign_shift | exp << dst.mantissa_bits | frac << shift, dst)


def from_f32(value) -> np.uint16:
    """Encode a 32-bit float as a half bit pattern."""
    return _encode(_bits_of(value, F32), F32)


def from_f64(value) -> np.uint16:
    """Encode a 64-bit float as a half bit pattern."""
    return _encode(_bits_of(value, F64), F64)


def to_f32(h) -> np.float32:
    """Decode a half bit pattern to a 32-bit float."""
    return _decode(h, F32)


def to_f64(h) -> np.float64:
    """Decode a half bit pattern to a 64-bit float."""
    return _decode(h, F64)


def encode(value) -> np.uint16:
    """Encode a float to half precision, reading it at its own width.

    numpy.float32 values go through the 32-bit path, anything else (python floats and
    numpy.float64) through the 64-bit one.
    """
    return from_f32(value) if isinstance(value, np.float32) else from_f64(value)


def decode(h, dtype: DType):
    """Decode a half bit pattern into the given wider precision."""
    if dtype == dtypes.float32: return to_f32(h)
    if dtype == dtypes.float64: return to_f64(h)
    raise TypeMismatch(f"can't decode half precision into {dtype}")


def encode_buffer(buf: np.ndarray) -> np.ndarray:
    """Encode every element of a float32 or float64 buffer, one element at a time."""
    return np.array([encode(x) for x in buf], dtype=np.uint16)


def decode_buffer(buf: np.ndarray, dtype: DType) -> np.ndarray:
    """Decode every half bit pattern in `buf` into a new buffer of the given precision."""
    return np.array([decode(h, dtype) for h in buf], dtype=dtype.np)
