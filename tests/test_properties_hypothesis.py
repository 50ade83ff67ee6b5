import numpy as np
import pytest

hypothesis = pytest.importorskip("hypothesis", reason="hypothesis is a dev optional dependency")
from hypothesis import given, settings as hsettings, strategies as st  # type: ignore

from api import matrix

_elem = st.floats(-4, 4, allow_nan=False, allow_infinity=False, width=32)
_mat = st.lists(_elem, min_size=16, max_size=16).map(
    lambda v: np.asarray(v, dtype=np.float32).tobytes()
)
_coord = st.floats(-100, 100, allow_nan=False, allow_infinity=False, width=32)


# 初回呼び出しは JIT コンパイルを含むため deadline を外す
@hsettings(deadline=None)
@given(a=_mat, b=_mat, tol=st.floats(-10, 10, allow_nan=False))
def test_close_is_symmetric(a, b, tol):
    assert matrix.close(a, b, tol) == matrix.close(b, a, tol)


@hsettings(deadline=None)
@given(a=_mat)
def test_close_is_reflexive_and_transpose_involutive(a):
    assert matrix.close(a, a, 0.0)
    assert matrix.transpose(matrix.transpose(a)) == a


@hsettings(deadline=None)
@given(a=_mat, b=_mat)
def test_subtract_inverts_add(a, b):
    back = matrix.subtract(matrix.add(a, b), b)
    assert matrix.close(back, a, 1e-5)


@hsettings(max_examples=50, deadline=None)
@given(ms=st.lists(_mat, min_size=0, max_size=4))
def test_chain_equals_pairwise_fold(ms):
    acc = matrix.identity()
    for m in ms:
        acc = matrix.multiply(acc, m)
    assert matrix.multiply_chain(ms) == acc


@hsettings(deadline=None)
@given(m=_mat, pts=st.lists(st.tuples(_coord, _coord), min_size=0, max_size=8))
def test_batch_projection_matches_single(m, pts):
    data = np.asarray(pts, dtype=np.float32).reshape(-1, 2).tobytes()
    out = np.frombuffer(matrix.project_vector2s(m, data), dtype=np.float32).reshape(-1, 2)
    assert out.shape[0] == len(pts)
    for (x, y), got in zip(pts, out):
        expected = matrix.project_vector2(m, x, y)
        np.testing.assert_array_equal(got, np.asarray(expected, dtype=np.float32))
