"""Tests for Tensor construction, reshaping, comparison and rendering."""
import math

import numpy as np
import pytest

from teenytensor.errors import InvalidData, InvalidShape, TypeMismatch
from teenytensor.helpers import dtypes
from teenytensor.tensor import Tensor


def arange16(dtype=dtypes.float64, shape=(4, 4)):
    return Tensor(np.arange(16, dtype=np.float64), dtype, shape)


class TestConstruction:
    """Tests for building tensors with and without a buffer."""

    @pytest.mark.parametrize("dtype,np_type", [(dtypes.float16, np.uint16), (dtypes.float32, np.float32), (dtypes.float64, np.float64)])
    def test_zero_filled(self, dtype, np_type):
        """Without a buffer the tensor holds numel zeros of the requested precision."""
        t = Tensor(None, dtype, (2, 3, 4))
        assert t.dtype == dtype
        assert t.numel() == 24
        assert t.data.data.dtype == np_type
        assert not t.data.data.any()

    def test_default_dtype(self):
        """Leaving out the dtype uses Tensor.default_type."""
        assert Tensor(None, shape=(2,)).dtype == Tensor.default_type == dtypes.float32

    def test_shape_defaults_to_buffer_length(self):
        """A buffer without a shape gives a rank one tensor."""
        t = Tensor(np.ones(5, dtype=np.float32), dtypes.float32)
        assert t.shape == (5,)

    def test_properties(self):
        """rank, strides and sizes follow the shape and precision."""
        t = Tensor(None, dtypes.float64, (4, 3, 2))
        assert t.ndim == t.rank == 3
        assert t.strides == (1, 4, 12)
        assert t.element_size() == 8
        assert t.nbytes() == 24 * 8
        assert repr(t) == "<Tensor shape=(4, 3, 2) dtype=dtypes.double>"

    def test_buffer_is_copied(self):
        """The tensor never aliases the caller's buffer."""
        buf = np.arange(4, dtype=np.float64)
        t = Tensor(buf, dtypes.float64, (2, 2))
        buf[0] = 100.0
        assert t.get_at(0) == 0.0

    def test_float64_to_half(self):
        """A wider buffer is encoded element by element into half precision."""
        t = Tensor(np.array([1.0, -2.0, 65504.0, 1e6]), dtypes.float16, (4,))
        np.testing.assert_array_equal(t.f16_slice(), [0x3C00, 0xC000, 0x7BFF, 0x7C00])

    def test_float32_to_half(self):
        """float32 buffers go through the 32-bit encoder."""
        t = Tensor(np.array([0.5, 0.0], dtype=np.float32), dtypes.float16, (2,))
        np.testing.assert_array_equal(t.f16_slice(), [0x3800, 0x0000])

    def test_half_to_float32_and_float64(self):
        """Half bit patterns are decoded into the requested precision."""
        bits = np.array([0x3C00, 0xC000, 0x7C00], dtype=np.uint16)
        np.testing.assert_array_equal(Tensor(bits, dtypes.float32, (3,)).f32_slice(), [1.0, -2.0, math.inf])
        np.testing.assert_array_equal(Tensor(bits, dtypes.float64, (3,)).f64_slice(), [1.0, -2.0, math.inf])

    def test_numpy_float16_buffer_is_taken_as_bits(self):
        """numpy float16 arrays are read as their binary16 patterns."""
        t = Tensor(np.array([1.0, 0.5], dtype=np.float16), dtypes.float16, (2,))
        np.testing.assert_array_equal(t.f16_slice(), [0x3C00, 0x3800])

    def test_float32_to_float64(self):
        """Between single and double precision a plain cast is used."""
        t = Tensor(np.array([0.1], dtype=np.float32), dtypes.float64, (1,))
        assert t.get_at(0) == np.float64(np.float32(0.1))

    @pytest.mark.parametrize("shape", [(2, 0), (-1, 4), ()])
    def test_invalid_shape(self, shape):
        """Non-positive axes and empty shapes are rejected."""
        with pytest.raises(InvalidShape):
            Tensor(None, dtypes.float32, shape)

    def test_buffer_length_mismatch(self):
        """The buffer must hold exactly numel elements."""
        with pytest.raises(InvalidShape):
            Tensor(np.zeros(5), dtypes.float64, (2, 2))

    def test_multi_dimensional_buffer(self):
        """Buffers are flat."""
        with pytest.raises(InvalidShape):
            Tensor(np.zeros((2, 2)), dtypes.float64, (2, 2))

    def test_missing_shape_and_buffer(self):
        """Something has to say how big the tensor is."""
        with pytest.raises(InvalidShape):
            Tensor(None, dtypes.float64)

    @pytest.mark.parametrize("buf", [[1.0, 2.0], np.array([1, 2], dtype=np.int32), "ab"])
    def test_unrecognized_buffer(self, buf):
        """Only numpy arrays of the supported float layouts are buffers."""
        with pytest.raises(InvalidData):
            Tensor(buf, dtypes.float64, (2,))

    @pytest.mark.parametrize("dtype", ["float", np.float32])
    def test_invalid_dtype(self, dtype):
        """The precision must be one of the three float dtypes."""
        with pytest.raises(TypeMismatch):
            Tensor(None, dtype, (2,))


class TestCreate:
    """Tests for the creation helpers."""

    def test_zeros(self):
        """Tensor.zeros accepts the shape as separate ints."""
        t = Tensor.zeros(2, 3, dtype=dtypes.float64)
        assert t.shape == (2, 3)
        assert t.equal(Tensor(None, dtypes.float64, (2, 3)))

    def test_full_half(self):
        """full encodes the fill value into the tensor precision."""
        t = Tensor.full((2, 2), 1.0, dtype=dtypes.float16)
        np.testing.assert_array_equal(t.f16_slice(), [0x3C00] * 4)

    def test_like(self):
        """The *_like helpers copy shape and precision."""
        src = arange16(dtypes.float32)
        assert src.zeros_like().equal(Tensor(None, dtypes.float32, (4, 4)))
        t = src.full_like(2.5, dtype=dtypes.float64)
        assert t.dtype == dtypes.float64 and t.shape == (4, 4) and t.get_at(15) == 2.5


class TestReshape:
    """Tests for reshape."""

    def test_literal_scenario(self):
        """[0..15] as (4, 4) reads 9.0 at [1, 2] and still at [1, 0, 0, 1] as (2, 2, 2, 2)."""
        t = arange16()
        assert t.get_f64([1, 2]) == 9.0
        t.reshape(2, 2, 2, 2)
        assert t.shape == (2, 2, 2, 2)
        assert t.strides == (1, 2, 4, 8)
        assert t.get_f64([1, 0, 0, 1]) == 9.0

    def test_flat_order_is_preserved(self):
        """get_at(k) is the same before and after a reshape."""
        t = arange16(dtypes.float32)
        before = [t.get_at(k) for k in range(t.numel())]
        t.reshape((2, 8))
        assert [t.get_at(k) for k in range(t.numel())] == before

    def test_buffer_is_reinterpreted(self):
        """reshape keeps the same buffer and precision."""
        t = arange16(dtypes.float16)
        buf = t.data
        t.reshape(16)
        assert t.data is buf and t.dtype == dtypes.float16

    def test_flatten(self):
        """flatten reshapes to a single axis."""
        t = arange16()
        t.flatten()
        assert t.shape == (16,)

    @pytest.mark.parametrize("shape", [(3, 5), (4, 0), (-4, -4)])
    def test_invalid(self, shape):
        """Mismatched lengths and non-positive axes are rejected, leaving the tensor as it was."""
        t = arange16()
        with pytest.raises(InvalidShape):
            t.reshape(shape)
        assert t.shape == (4, 4) and t.strides == (1, 4)


class TestEqual:
    """Tests for bit-exact equality."""

    def test_reflexive(self):
        """A tensor equals itself, NaNs included."""
        t = Tensor(np.array([math.nan, 1.0]), dtypes.float64, (2,))
        assert t.equal(t)

    def test_equal_copy(self):
        """Tensors built from the same values are equal."""
        assert arange16().equal(arange16())

    def test_one_element_differs(self):
        """A single different element breaks equality."""
        a, b = arange16(), arange16()
        b.set([3, 3], 0.5)
        assert not a.equal(b)

    def test_different_dtype(self):
        """Equal values in different precisions are not equal."""
        assert not arange16(dtypes.float32).equal(arange16(dtypes.float64))

    def test_different_shape_same_numel(self):
        """Shapes must match axis by axis."""
        assert not arange16(shape=(4, 4)).equal(arange16(shape=(2, 8)))

    def test_signed_zero(self):
        """Comparison is bit for bit, so 0.0 and -0.0 differ."""
        a = Tensor(np.array([0.0]), dtypes.float64, (1,))
        b = Tensor(np.array([-0.0]), dtypes.float64, (1,))
        assert not a.equal(b)

    def test_not_a_tensor(self):
        """Anything that isn't a Tensor is unequal."""
        assert not arange16().equal(np.arange(16.0))


class TestString:
    """Tests for the nested bracket rendering."""

    def test_axis_zero_is_outermost(self):
        """The outer brackets walk axis 0, the inner ones the last axis."""
        t = Tensor(np.arange(4, dtype=np.float64), dtypes.float64, (2, 2))
        assert str(t) == "[[0.0, 2.0], [1.0, 3.0]]"

    def test_rank_one(self):
        """A single axis renders as one flat list."""
        t = Tensor(np.array([0.5, 1.5], dtype=np.float32), dtypes.float32, (2,))
        assert str(t) == "[0.5, 1.5]"

    def test_size_one_axes(self):
        """Size one axes still show their element."""
        t = Tensor(np.array([1.0, 2.0, 3.0]), dtypes.float64, (1, 3))
        assert str(t) == "[[1.0, 2.0, 3.0]]"
        assert str(Tensor(np.array([7.0]), dtypes.float64, (1, 1, 1))) == "[[[7.0]]]"

    def test_half_renders_decoded_values(self):
        """Half elements are shown as numbers, not bit patterns."""
        t = Tensor(np.array([0x3C00, 0xC000], dtype=np.uint16), dtypes.float16, (2,))
        assert str(t) == "[1.0, -2.0]"


class TestConversions:
    """Tests for numpy export and cast."""

    def test_numpy_uses_logical_shape(self):
        """numpy() lays the values out so that [i, j] matches get([i, j])."""
        arr = arange16().numpy()
        assert arr.shape == (4, 4)
        assert arr[1, 2] == 9.0

    def test_numpy_is_a_copy(self):
        """Writing to the exported array leaves the tensor alone."""
        t = arange16()
        t.numpy()[0, 0] = 100.0
        assert t.get_at(0) == 0.0

    def test_numpy_half_decodes(self):
        """Half tensors export float32 values."""
        arr = Tensor(np.array([1.0, -2.0]), dtypes.float16, (2,)).numpy()
        assert arr.dtype == np.float32
        np.testing.assert_array_equal(arr, [1.0, -2.0])

    def test_cast_builds_a_new_tensor(self):
        """cast converts into a fresh tensor, the source keeps its precision."""
        src = arange16()
        half = src.half()
        assert src.dtype == dtypes.float64
        assert half.dtype == dtypes.float16 and half.shape == src.shape
        assert half.double().equal(src)

    def test_cast_same_dtype_copies(self):
        """Casting to the same precision still copies the buffer."""
        src = arange16(dtypes.float32)
        dst = src.float()
        assert dst.equal(src) and dst.data.data is not src.data.data
