"""
4x4 行列の値型 `Matrix4`

境界ではパック済みバイナリ（64 バイト）で受け渡すが、フレームワーク内部では
行優先の添字ヘルパを持つ専用の値型で扱う。演算はすべて `matrix_kernel` に委譲する。

データモデル（不変条件）:
- `values: float32 ndarray (16,)`: 行優先。`m[r, c]` は `values[r*4+c]`。
- 生成時に dtype/形状を正規化し、配列は読み取り専用にする（就地変更なし）。
- すべての演算は新しい `Matrix4` を返す純関数。

使用例:
    from engine.core.matrix import Matrix4

    m = Matrix4.translation(3, 4) @ Matrix4.scaling(2, 2)
    m.project_vector2(1, 1)          # -> (5.0, 6.0)
    inv = m.adjugate() / m.determinant()
    (m @ inv).close(Matrix4.identity())  # -> True
"""

from __future__ import annotations

from typing import Any, Iterable

import numpy as np

from common import settings
from common.types import NumberLike, Vec2, Vec3

from . import matrix_kernel as mk
from .packing import (
    MalformedArgumentError,
    as_double,
    as_float,
    as_matrix,
    as_vector_stream,
    matrix_from_values,
)


class Matrix4:
    """不変の 4x4 float32 行列（行優先）。

    フィールド:
    - `values (16,) float32`: 読み取り専用の要素配列。

    設計意図:
    - 生成経路（バイナリ/行リスト/平坦リスト）に関わらず同じ正規化済み状態だけを許容する。
    - `==` は完全一致。丸め誤差を許容した比較は `close()` を使う。
    """

    __slots__ = ("values",)

    values: np.ndarray

    def __init__(self, values: Iterable[Any] | np.ndarray) -> None:
        arr = matrix_from_values(values)  # type: ignore[arg-type]
        arr.setflags(write=False)
        self.values = arr

    # ── ファクトリ ───────────────────
    @classmethod
    def _wrap(cls, arr: np.ndarray) -> "Matrix4":
        """カーネル出力（新規確保済み float32 (16,)）をコピーせずに包む。"""
        obj = cls.__new__(cls)
        arr.setflags(write=False)
        obj.values = arr
        return obj

    @classmethod
    def identity(cls) -> "Matrix4":
        return cls._wrap(mk.IDENTITY.copy())

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> "Matrix4":
        """64 バイトのパック済みバイナリから生成する。長さ不一致は `MalformedArgumentError`。"""
        return cls._wrap(as_matrix(data, "data"))

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[NumberLike]]) -> "Matrix4":
        """4 行 x 4 列の入れ子から生成する。"""
        return cls([list(r) for r in rows])

    @classmethod
    def translation(cls, x: NumberLike, y: NumberLike, z: NumberLike = 0.0) -> "Matrix4":
        """平行移動行列（4 列目の行 0/1/2 に `x, y, z`）。"""
        arr = mk.IDENTITY.copy()
        arr[3] = as_float(x, "x")
        arr[7] = as_float(y, "y")
        arr[11] = as_float(z, "z")
        return cls._wrap(arr)

    @classmethod
    def scaling(cls, sx: NumberLike, sy: NumberLike, sz: NumberLike = 1.0) -> "Matrix4":
        """対角スケール行列。"""
        arr = mk.IDENTITY.copy()
        arr[0] = as_float(sx, "sx")
        arr[5] = as_float(sy, "sy")
        arr[10] = as_float(sz, "sz")
        return cls._wrap(arr)

    @classmethod
    def product(cls, *matrices: "Matrix4") -> "Matrix4":
        """`I x m0 x m1 x ...` を左から順に畳み込む（引数なしなら単位行列）。"""
        stack = np.empty((len(matrices), mk.MATRIX_LEN), dtype=np.float32)
        for i, m in enumerate(matrices):
            stack[i] = m.values
        return cls._wrap(mk.multiply_chain(stack))

    # ── 変換・参照 ────────────────────
    def to_bytes(self) -> bytes:
        return self.values.tobytes()

    def rows(self) -> list[list[float]]:
        return self.values.reshape(4, 4).tolist()

    def __getitem__(self, index: tuple[int, int]) -> float:
        r, c = index
        if not (0 <= r < 4 and 0 <= c < 4):
            raise IndexError(f"Matrix4 index out of range: {index}")
        return float(self.values[r * 4 + c])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix4):
            return NotImplemented
        return bool(np.array_equal(self.values, other.values))

    def __hash__(self) -> int:
        return hash(self.values.tobytes())

    def __repr__(self) -> str:
        body = ", ".join(
            "[" + ", ".join(f"{v:g}" for v in row) + "]" for row in self.rows()
        )
        return f"Matrix4([{body}])"

    # ── 演算（すべて純粋） ────────────
    def close(self, other: "Matrix4", tolerance: NumberLike | None = None) -> bool:
        """全要素が許容誤差以内なら True（省略時は `settings.CLOSE_TOLERANCE`）。"""
        if not isinstance(other, Matrix4):
            raise MalformedArgumentError(f"other: Matrix4 が必要です: {type(other).__name__}")
        if tolerance is None:
            tol = settings.get().CLOSE_TOLERANCE
        else:
            tol = as_double(tolerance, "tolerance")
        return bool(mk.close(self.values, other.values, tol))

    def __add__(self, other: "Matrix4") -> "Matrix4":
        if not isinstance(other, Matrix4):
            return NotImplemented
        return Matrix4._wrap(mk.add(self.values, other.values))

    def __sub__(self, other: "Matrix4") -> "Matrix4":
        if not isinstance(other, Matrix4):
            return NotImplemented
        return Matrix4._wrap(mk.subtract(self.values, other.values))

    def __matmul__(self, other: "Matrix4") -> "Matrix4":
        if not isinstance(other, Matrix4):
            return NotImplemented
        return Matrix4._wrap(mk.multiply(self.values, other.values))

    def __mul__(self, scalar: NumberLike) -> "Matrix4":
        return Matrix4._wrap(mk.multiply_scalar(self.values, as_float(scalar, "scalar")))

    __rmul__ = __mul__

    def __truediv__(self, scalar: NumberLike) -> "Matrix4":
        return Matrix4._wrap(mk.divide_scalar(self.values, as_float(scalar, "scalar")))

    def determinant(self) -> float:
        return float(mk.determinant(self.values))

    def transpose(self) -> "Matrix4":
        return Matrix4._wrap(mk.transpose(self.values))

    def adjugate(self) -> "Matrix4":
        return Matrix4._wrap(mk.adjugate(self.values))

    def project_vector2(self, x: NumberLike, y: NumberLike) -> Vec2:
        px, py = mk.project_vector2(self.values, as_float(x, "x"), as_float(y, "y"))
        return float(px), float(py)

    def project_vector3(self, x: NumberLike, y: NumberLike, z: NumberLike) -> Vec3:
        px, py, pz = mk.project_vector3(
            self.values, as_float(x, "x"), as_float(y, "y"), as_float(z, "z")
        )
        return float(px), float(py), float(pz)

    def project_vector2s(self, vectors: bytes | bytearray | memoryview) -> bytes:
        """パック済み `(x, y)` 列を射影し、同じ形式の新しいバイナリで返す。"""
        return mk.project_vector2s(self.values, as_vector_stream(vectors, 2)).tobytes()

    def project_vector3s(self, vectors: bytes | bytearray | memoryview) -> bytes:
        return mk.project_vector3s(self.values, as_vector_stream(vectors, 3)).tobytes()


__all__ = ["Matrix4"]
