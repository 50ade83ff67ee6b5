from __future__ import annotations

import numpy as np
import pytest

from engine.core import packing
from engine.core.packing import MalformedArgumentError


def test_error_is_both_value_and_type_error() -> None:
    assert issubclass(MalformedArgumentError, ValueError)
    assert issubclass(MalformedArgumentError, TypeError)


@pytest.mark.parametrize("buf", [b"", b"\x00" * 63, b"\x00" * 65, b"\x00" * 128])
def test_as_matrix_rejects_wrong_length(buf: bytes) -> None:
    with pytest.raises(MalformedArgumentError):
        packing.as_matrix(buf)


@pytest.mark.parametrize("value", [None, "x" * 64, list(range(16)), np.zeros(16, np.float32)])
def test_as_matrix_rejects_non_binary(value: object) -> None:
    with pytest.raises(MalformedArgumentError):
        packing.as_matrix(value)


def test_as_matrix_accepts_bytes_like_and_copies() -> None:
    src = bytearray(np.arange(16, dtype=np.float32).tobytes())
    for value in (bytes(src), src, memoryview(src)):
        arr = packing.as_matrix(value)
        assert arr.dtype == np.float32
        assert arr.shape == (16,)
        assert arr.flags.writeable
        np.testing.assert_array_equal(arr, np.arange(16, dtype=np.float32))
    arr = packing.as_matrix(src)
    arr[0] = 99.0
    assert np.frombuffer(bytes(src), dtype=np.float32)[0] == 0.0


def test_as_matrix_rejects_non_contiguous_memoryview() -> None:
    raw = memoryview(np.arange(32, dtype=np.float32).tobytes()).cast("f")[::2]
    with pytest.raises(MalformedArgumentError):
        packing.as_matrix(raw)


def test_as_matrix_list_is_atomic() -> None:
    good = np.eye(4, dtype=np.float32).tobytes()
    stack = packing.as_matrix_list([good, good])
    assert stack.shape == (2, 16)
    assert packing.as_matrix_list([]).shape == (0, 16)
    with pytest.raises(MalformedArgumentError, match=r"matrices\[1\]"):
        packing.as_matrix_list([good, b"\x00" * 8, good])
    with pytest.raises(MalformedArgumentError):
        packing.as_matrix_list(good)
    with pytest.raises(MalformedArgumentError):
        packing.as_matrix_list(m for m in [good])


def test_as_vector_stream_shapes() -> None:
    pts = np.arange(6, dtype=np.float32)
    assert packing.as_vector_stream(pts.tobytes(), 2).shape == (3, 2)
    assert packing.as_vector_stream(pts.tobytes(), 3).shape == (2, 3)
    assert packing.as_vector_stream(b"", 2).shape == (0, 2)
    with pytest.raises(MalformedArgumentError):
        packing.as_vector_stream(b"\x00" * 12, 2)
    with pytest.raises(MalformedArgumentError):
        packing.as_vector_stream(b"\x00" * 8, 3)


def test_scalar_normalization() -> None:
    assert packing.as_double(3) == 3.0
    assert isinstance(packing.as_double(3), float)
    assert packing.as_double(np.int32(-2)) == -2.0
    assert packing.as_double(np.float32(0.5)) == 0.5
    f = packing.as_float(0.1)
    assert isinstance(f, np.float32)
    assert f == np.float32(0.1)


@pytest.mark.parametrize("value", [True, False, np.bool_(True), "1.0", None, 1 + 2j, [1.0]])
def test_scalar_rejects_non_numbers(value: object) -> None:
    with pytest.raises(MalformedArgumentError):
        packing.as_double(value)


def test_scalar_rejects_huge_integer() -> None:
    with pytest.raises(MalformedArgumentError):
        packing.as_double(10**400)


def test_point_and_line_normalization() -> None:
    assert packing.as_point((1, 2)) == (1.0, 2.0)
    assert packing.as_point([0.5, -1]) == (0.5, -1.0)
    assert packing.as_line(((0, 0), (1, 1))) == ((0.0, 0.0), (1.0, 1.0))
    with pytest.raises(MalformedArgumentError):
        packing.as_point((1.0, 2.0, 3.0))
    with pytest.raises(MalformedArgumentError):
        packing.as_point((1.0, "y"))
    with pytest.raises(MalformedArgumentError):
        packing.as_line(((0, 0),))


def test_matrix_from_values() -> None:
    flat = packing.matrix_from_values(range(16))
    nested = packing.matrix_from_values([[float(r * 4 + c) for c in range(4)] for r in range(4)])
    np.testing.assert_array_equal(flat, nested)
    with pytest.raises(MalformedArgumentError):
        packing.matrix_from_values([[1, 2], [3]])


@pytest.mark.parametrize(
    "values",
    [
        ["1.5"] * 16,
        [True] * 16,
        [1.0] * 15 + [None],
        [[1, 2, 3, 4]] * 3 + [[1, 2, 3, "4"]],
        [[1, 2, 3, 4]] * 3 + [5],
        np.ones(16, dtype=np.bool_),
        np.array(["1"] * 16),
        "0123456789abcdef",
    ],
)
def test_matrix_from_values_rejects_non_numbers(values: object) -> None:
    with pytest.raises(MalformedArgumentError):
        packing.matrix_from_values(values)  # type: ignore[arg-type]


def test_matrix_from_values_accepts_numeric_arrays() -> None:
    arr = packing.matrix_from_values(np.arange(16, dtype=np.int64).reshape(4, 4))
    assert arr.dtype == np.float32
    np.testing.assert_array_equal(arr, np.arange(16, dtype=np.float32))
