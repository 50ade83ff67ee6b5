"""
どこで: `api.matrix`（行列エンジンの公開境界）。
何を: パック済みバイナリで行列を受け取り、検証→カーネル実行→新しいバイナリを返す。
なぜ: 埋め込み先（ホスト環境）から見える唯一の入口として、型/長さ検証と精度正規化を
      カーネル実行前に完了させるため。

Usage:
    from api import matrix

    m = matrix.multiply(a_bytes, b_bytes)           # 64 バイト
    ok = matrix.close(m, expected_bytes, 1e-5)       # bool
    x, y = matrix.project_vector2(m, 10, 20)         # (float, float)

約束:
- 不正引数は `MalformedArgumentError`（`ValueError`/`TypeError` の双方として捕捉可能）。
  例外時は何も計算せず、出力も返さない。
- 数値的な退化（0 除算・特異行列）は例外にせず inf/NaN を返す。
- 戻り値は毎回新しく確保した値で、入力バッファは変更しない。
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from common import settings
from common.types import BufferLike, NumberLike, Vec2, Vec3
from engine.core import matrix_kernel as mk
from engine.core.packing import (
    as_double,
    as_float,
    as_matrix,
    as_matrix_list,
    as_vector_stream,
    matrix_from_values,
    to_bytes,
)

logger = logging.getLogger(__name__)


def _log_batch(op: str, count: int) -> None:
    if count >= settings.get().BATCH_LOG_THRESHOLD:
        logger.debug("%s: %d 件を処理します", op, count)


def identity() -> bytes:
    """単位行列のバイナリ。"""
    return to_bytes(mk.IDENTITY)


def close(a: BufferLike, b: BufferLike, tolerance: NumberLike) -> bool:
    """全 16 要素が `|tolerance|` 以内で一致すれば True。"""
    ma = as_matrix(a, "a")
    mb = as_matrix(b, "b")
    tol = as_double(tolerance, "tolerance")
    return bool(mk.close(ma, mb, tol))


def add(a: BufferLike, b: BufferLike) -> bytes:
    ma = as_matrix(a, "a")
    mb = as_matrix(b, "b")
    return to_bytes(mk.add(ma, mb))


def subtract(a: BufferLike, b: BufferLike) -> bytes:
    """`a - b`（要素ごと）。"""
    ma = as_matrix(a, "a")
    mb = as_matrix(b, "b")
    return to_bytes(mk.subtract(ma, mb))


def multiply(a: BufferLike, b: BufferLike) -> bytes:
    """`a x b`（行優先の行列積。順序に依存する）。"""
    ma = as_matrix(a, "a")
    mb = as_matrix(b, "b")
    return to_bytes(mk.multiply(ma, mb))


def multiply_chain(matrices: Sequence[BufferLike]) -> bytes:
    """`I x m0 x m1 x ... x mn` を左から順に畳み込む。空なら単位行列。

    要素のどれか 1 つでも不正なら、乗算を始める前に全体を拒否する。
    """
    stack = as_matrix_list(matrices, "matrices")
    _log_batch("multiply_chain", stack.shape[0])
    return to_bytes(mk.multiply_chain(stack))


def multiply_scalar(a: BufferLike, s: NumberLike) -> bytes:
    ma = as_matrix(a, "a")
    return to_bytes(mk.multiply_scalar(ma, as_float(s, "s")))


def divide_scalar(a: BufferLike, s: NumberLike) -> bytes:
    """要素ごとの `a / s`。`s == 0` は inf/NaN を含む結果になる。"""
    ma = as_matrix(a, "a")
    return to_bytes(mk.divide_scalar(ma, as_float(s, "s")))


def determinant(a: BufferLike) -> float:
    return float(mk.determinant(as_matrix(a, "a")))


def transpose(a: BufferLike) -> bytes:
    return to_bytes(mk.transpose(as_matrix(a, "a")))


def adjugate(a: BufferLike) -> bytes:
    """随伴行列。逆行列が必要なら `divide_scalar(adjugate(a), determinant(a))`。"""
    return to_bytes(mk.adjugate(as_matrix(a, "a")))


def project_vector2(m: BufferLike, x: NumberLike, y: NumberLike) -> Vec2:
    mx = as_matrix(m, "m")
    px, py = mk.project_vector2(mx, as_float(x, "x"), as_float(y, "y"))
    return float(px), float(py)


def project_vector2s(m: BufferLike, vectors: BufferLike) -> bytes:
    """パック済み `(x, y)` float32 列を 1 点ずつ射影し、同順・同数のバイナリで返す。"""
    mx = as_matrix(m, "m")
    vs = as_vector_stream(vectors, 2, "vectors")
    _log_batch("project_vector2s", vs.shape[0])
    return to_bytes(mk.project_vector2s(mx, vs))


def project_vector3(m: BufferLike, x: NumberLike, y: NumberLike, z: NumberLike) -> Vec3:
    mx = as_matrix(m, "m")
    px, py, pz = mk.project_vector3(
        mx, as_float(x, "x"), as_float(y, "y"), as_float(z, "z")
    )
    return float(px), float(py), float(pz)


def project_vector3s(m: BufferLike, vectors: BufferLike) -> bytes:
    mx = as_matrix(m, "m")
    vs = as_vector_stream(vectors, 3, "vectors")
    _log_batch("project_vector3s", vs.shape[0])
    return to_bytes(mk.project_vector3s(mx, vs))


def pack(values: Sequence[Any]) -> bytes:
    """数値 16 個（行優先）または 4x4 の入れ子をバイナリに詰める補助。"""
    return to_bytes(matrix_from_values(values))


def unpack(a: BufferLike) -> list[float]:
    """行列バイナリを 16 個の float（行優先）に展開する補助。"""
    return [float(v) for v in as_matrix(a, "a")]


__all__ = [
    "identity",
    "close",
    "add",
    "subtract",
    "multiply",
    "multiply_chain",
    "multiply_scalar",
    "divide_scalar",
    "determinant",
    "transpose",
    "adjugate",
    "project_vector2",
    "project_vector2s",
    "project_vector3",
    "project_vector3s",
    "pack",
    "unpack",
]
