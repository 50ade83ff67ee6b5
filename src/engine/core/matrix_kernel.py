"""
4x4 行列カーネル（float32・行優先・純関数）

本モジュールは行列エンジンの数値本体を提供する。入力はすべて検証済みの
`float32 ndarray`（行列は形状 `(16,)`、点列は `(N, 2)` / `(N, 3)`）であり、
境界での長さ/型検証は `engine.core.packing` が担う。

データモデル:
- 行列は 16 要素の float32 を行優先で保持する。要素 `[r][c]` は線形 index `r*4+c`。

    #   idx:  0  1  2  3      [r0c0 r0c1 r0c2 r0c3]
    #         4  5  6  7      [r1c0 r1c1 r1c2 r1c3]
    #         8  9 10 11      [r2c0 r2c1 r2c2 r2c3]
    #        12 13 14 15      [r3c0 r3c1 r3c2 r3c3]

数値上の約束:
- 各式は展開形のまま記述し、左から右への評価順を保つ（丸め挙動を揃えるため）。
  そのため `fastmath` は使わない。
- 0 除算・特異行列・非有限値は捕捉しない（IEEE 754 どおり inf/NaN を返す）。
  numba 既定の Python 互換エラーモデルでは 0 除算が例外になるため `error_model="numpy"`。
- すべての関数は新しい配列を返し、入力配列を書き換えない。
"""

from __future__ import annotations

import numpy as np
from numba import njit  # type: ignore[attr-defined]

IDENTITY = np.array(
    [
        1.0, 0.0, 0.0, 0.0,
        0.0, 1.0, 0.0, 0.0,
        0.0, 0.0, 1.0, 0.0,
        0.0, 0.0, 0.0, 1.0,
    ],
    dtype=np.float32,
)
IDENTITY.setflags(write=False)

MATRIX_LEN = 16


@njit(cache=True, error_model="numpy")
def close(a: np.ndarray, b: np.ndarray, tolerance: float) -> bool:
    """全 16 要素が `|a[i] - b[i]| <= |tolerance|` のとき True。"""
    t = abs(tolerance)
    for i in range(MATRIX_LEN):
        if abs(a[i] - b[i]) > t:
            return False
    return True


@njit(cache=True, error_model="numpy")
def add(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    c = np.empty(MATRIX_LEN, dtype=np.float32)
    for i in range(MATRIX_LEN):
        c[i] = a[i] + b[i]
    return c


@njit(cache=True, error_model="numpy")
def subtract(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    c = np.empty(MATRIX_LEN, dtype=np.float32)
    for i in range(MATRIX_LEN):
        c[i] = a[i] - b[i]
    return c


@njit(cache=True, error_model="numpy")
def _multiply_into(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> None:
    """`c = a x b` を書き込む内部ヘルパ（`c` は `a`/`b` と別バッファであること）。"""
    c[0] = (a[0] * b[0]) + (a[1] * b[4]) + (a[2] * b[8]) + (a[3] * b[12])
    c[1] = (a[0] * b[1]) + (a[1] * b[5]) + (a[2] * b[9]) + (a[3] * b[13])
    c[2] = (a[0] * b[2]) + (a[1] * b[6]) + (a[2] * b[10]) + (a[3] * b[14])
    c[3] = (a[0] * b[3]) + (a[1] * b[7]) + (a[2] * b[11]) + (a[3] * b[15])

    c[4] = (a[4] * b[0]) + (a[5] * b[4]) + (a[6] * b[8]) + (a[7] * b[12])
    c[5] = (a[4] * b[1]) + (a[5] * b[5]) + (a[6] * b[9]) + (a[7] * b[13])
    c[6] = (a[4] * b[2]) + (a[5] * b[6]) + (a[6] * b[10]) + (a[7] * b[14])
    c[7] = (a[4] * b[3]) + (a[5] * b[7]) + (a[6] * b[11]) + (a[7] * b[15])

    c[8] = (a[8] * b[0]) + (a[9] * b[4]) + (a[10] * b[8]) + (a[11] * b[12])
    c[9] = (a[8] * b[1]) + (a[9] * b[5]) + (a[10] * b[9]) + (a[11] * b[13])
    c[10] = (a[8] * b[2]) + (a[9] * b[6]) + (a[10] * b[10]) + (a[11] * b[14])
    c[11] = (a[8] * b[3]) + (a[9] * b[7]) + (a[10] * b[11]) + (a[11] * b[15])

    c[12] = (a[12] * b[0]) + (a[13] * b[4]) + (a[14] * b[8]) + (a[15] * b[12])
    c[13] = (a[12] * b[1]) + (a[13] * b[5]) + (a[14] * b[9]) + (a[15] * b[13])
    c[14] = (a[12] * b[2]) + (a[13] * b[6]) + (a[14] * b[10]) + (a[15] * b[14])
    c[15] = (a[12] * b[3]) + (a[13] * b[7]) + (a[14] * b[11]) + (a[15] * b[15])


@njit(cache=True, error_model="numpy")
def multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """行優先の 4x4 積 `a x b`（非可換）。"""
    c = np.empty(MATRIX_LEN, dtype=np.float32)
    _multiply_into(a, b, c)
    return c


@njit(cache=True, error_model="numpy")
def multiply_chain(matrices: np.ndarray) -> np.ndarray:
    """`I x m0 x m1 x ... x mn` を左畳み込みで計算する。

    Parameters
    ----------
    matrices : np.ndarray
        形状 `(N, 16)` の float32。N=0 なら単位行列を返す。

    Notes
    -----
    2 本の累積バッファを交互に使う（ping-pong）。同じバッファを 1 回の乗算の入力と
    出力に同時に渡さないため。
    """
    product = np.empty((2, MATRIX_LEN), dtype=np.float32)
    for i in range(MATRIX_LEN):
        product[0, i] = IDENTITY[i]
    src = 1
    dst = 0
    for k in range(matrices.shape[0]):
        src, dst = dst, src
        _multiply_into(product[src], matrices[k], product[dst])
    return product[dst].copy()


@njit(cache=True, error_model="numpy")
def multiply_scalar(a: np.ndarray, s: np.float32) -> np.ndarray:
    c = np.empty(MATRIX_LEN, dtype=np.float32)
    for i in range(MATRIX_LEN):
        c[i] = a[i] * s
    return c


@njit(cache=True, error_model="numpy")
def divide_scalar(a: np.ndarray, s: np.float32) -> np.ndarray:
    """要素ごとの `a[i] / s`。`s == 0` は inf/NaN（捕捉しない）。"""
    c = np.empty(MATRIX_LEN, dtype=np.float32)
    for i in range(MATRIX_LEN):
        c[i] = a[i] / s
    return c


@njit(cache=True, error_model="numpy")
def determinant(a: np.ndarray) -> np.float32:
    """24 項の余因子展開（正 12 項 - 負 12 項）。float32 で評価する。"""
    return (
        (a[0] * a[5] * a[10] * a[15]) + (a[0] * a[9] * a[14] * a[7])
        + (a[0] * a[13] * a[6] * a[11]) + (a[4] * a[1] * a[14] * a[11])
        + (a[4] * a[9] * a[2] * a[15]) + (a[4] * a[13] * a[10] * a[3])
        + (a[8] * a[1] * a[6] * a[15]) + (a[8] * a[5] * a[14] * a[3])
        + (a[8] * a[13] * a[2] * a[7]) + (a[12] * a[1] * a[10] * a[7])
        + (a[12] * a[5] * a[2] * a[11]) + (a[12] * a[9] * a[6] * a[3])
        - (a[0] * a[5] * a[14] * a[11]) - (a[0] * a[9] * a[6] * a[15])
        - (a[0] * a[13] * a[10] * a[7]) - (a[4] * a[1] * a[10] * a[15])
        - (a[4] * a[9] * a[14] * a[3]) - (a[4] * a[13] * a[2] * a[11])
        - (a[8] * a[1] * a[14] * a[7]) - (a[8] * a[5] * a[2] * a[15])
        - (a[8] * a[13] * a[6] * a[3]) - (a[12] * a[1] * a[6] * a[11])
        - (a[12] * a[5] * a[10] * a[3]) - (a[12] * a[9] * a[2] * a[7])
    )


@njit(cache=True, error_model="numpy")
def transpose(a: np.ndarray) -> np.ndarray:
    c = np.empty(MATRIX_LEN, dtype=np.float32)
    for r in range(4):
        for col in range(4):
            c[r * 4 + col] = a[col * 4 + r]
    return c


@njit(cache=True, error_model="numpy")
def adjugate(a: np.ndarray) -> np.ndarray:
    """古典随伴行列（余因子行列の転置）を要素ごとの直接式で求める。

    逆行列は `adjugate(a) / determinant(a)`。除算は呼び出し側に任せる
    （行列式 0 近傍を呼び出し側で特別扱いできるようにするため）。
    """
    c = np.empty(MATRIX_LEN, dtype=np.float32)
    # 列 0
    c[0] = (a[5] * a[10] * a[15]) + (a[9] * a[14] * a[7]) + (a[13] * a[6] * a[11]) - (a[5] * a[14] * a[11]) - (a[9] * a[6] * a[15]) - (a[13] * a[10] * a[7])  # noqa: E501
    c[4] = (a[4] * a[14] * a[11]) + (a[8] * a[6] * a[15]) + (a[12] * a[10] * a[7]) - (a[4] * a[10] * a[15]) - (a[8] * a[14] * a[7]) - (a[12] * a[6] * a[11])  # noqa: E501
    c[8] = (a[4] * a[9] * a[15]) + (a[8] * a[13] * a[7]) + (a[12] * a[5] * a[11]) - (a[4] * a[13] * a[11]) - (a[8] * a[5] * a[15]) - (a[12] * a[9] * a[7])  # noqa: E501
    c[12] = (a[4] * a[13] * a[10]) + (a[8] * a[5] * a[14]) + (a[12] * a[9] * a[6]) - (a[4] * a[9] * a[14]) - (a[8] * a[13] * a[6]) - (a[12] * a[5] * a[10])  # noqa: E501

    # 列 1
    c[1] = (a[1] * a[14] * a[11]) + (a[9] * a[2] * a[15]) + (a[13] * a[10] * a[3]) - (a[1] * a[10] * a[15]) - (a[9] * a[14] * a[3]) - (a[13] * a[2] * a[11])  # noqa: E501
    c[5] = (a[0] * a[10] * a[15]) + (a[8] * a[14] * a[3]) + (a[12] * a[2] * a[11]) - (a[0] * a[14] * a[11]) - (a[8] * a[2] * a[15]) - (a[12] * a[10] * a[3])  # noqa: E501
    c[9] = (a[0] * a[13] * a[11]) + (a[8] * a[1] * a[15]) + (a[12] * a[9] * a[3]) - (a[0] * a[9] * a[15]) - (a[8] * a[13] * a[3]) - (a[12] * a[1] * a[11])  # noqa: E501
    c[13] = (a[0] * a[9] * a[14]) + (a[8] * a[13] * a[2]) + (a[12] * a[1] * a[10]) - (a[0] * a[13] * a[10]) - (a[8] * a[1] * a[14]) - (a[12] * a[9] * a[2])  # noqa: E501

    # 列 2
    c[2] = (a[1] * a[6] * a[15]) + (a[5] * a[14] * a[3]) + (a[13] * a[2] * a[7]) - (a[1] * a[14] * a[7]) - (a[5] * a[2] * a[15]) - (a[13] * a[6] * a[3])  # noqa: E501
    c[6] = (a[0] * a[14] * a[7]) + (a[4] * a[2] * a[15]) + (a[12] * a[6] * a[3]) - (a[0] * a[6] * a[15]) - (a[4] * a[14] * a[3]) - (a[12] * a[2] * a[7])  # noqa: E501
    c[10] = (a[0] * a[5] * a[15]) + (a[4] * a[13] * a[3]) + (a[12] * a[1] * a[7]) - (a[0] * a[13] * a[7]) - (a[4] * a[1] * a[15]) - (a[12] * a[5] * a[3])  # noqa: E501
    c[14] = (a[0] * a[13] * a[6]) + (a[4] * a[1] * a[14]) + (a[12] * a[5] * a[2]) - (a[0] * a[5] * a[14]) - (a[4] * a[13] * a[2]) - (a[12] * a[1] * a[6])  # noqa: E501

    # 列 3
    c[3] = (a[1] * a[10] * a[7]) + (a[5] * a[2] * a[11]) + (a[9] * a[6] * a[3]) - (a[1] * a[6] * a[11]) - (a[5] * a[10] * a[3]) - (a[9] * a[2] * a[7])  # noqa: E501
    c[7] = (a[0] * a[6] * a[11]) + (a[4] * a[10] * a[3]) + (a[8] * a[2] * a[7]) - (a[0] * a[10] * a[7]) - (a[4] * a[2] * a[11]) - (a[8] * a[6] * a[3])  # noqa: E501
    c[11] = (a[0] * a[9] * a[7]) + (a[4] * a[1] * a[11]) + (a[8] * a[5] * a[3]) - (a[0] * a[5] * a[11]) - (a[4] * a[9] * a[3]) - (a[8] * a[1] * a[7])  # noqa: E501
    c[15] = (a[0] * a[5] * a[10]) + (a[4] * a[9] * a[2]) + (a[8] * a[1] * a[6]) - (a[0] * a[9] * a[6]) - (a[4] * a[1] * a[10]) - (a[8] * a[5] * a[2])  # noqa: E501
    return c


@njit(cache=True, error_model="numpy")
def _translation_of(x: np.float32, y: np.float32, z: np.float32) -> np.ndarray:
    """単位行列の 4 列目（行 0/1/2）に `x, y, z` を置いた一時行列。"""
    t = np.empty(MATRIX_LEN, dtype=np.float32)
    for i in range(MATRIX_LEN):
        t[i] = IDENTITY[i]
    t[3] = x
    t[7] = y
    t[11] = z
    return t


@njit(cache=True, error_model="numpy")
def project_vector2(mx: np.ndarray, x: np.float32, y: np.float32) -> tuple[float, float]:
    """点 `(x, y)` を `mx` で射影する。

    点を平行移動列に埋め込んだ一時行列 `T` を作り、`mx x T` の `[3]`/`[7]` を取り出す。
    `mx` を `(x, y, 0, 1)` に適用するのと等価だが、3D 版と同じ経路で計算する。
    """
    out = np.empty(MATRIX_LEN, dtype=np.float32)
    _multiply_into(mx, _translation_of(x, y, np.float32(0.0)), out)
    return out[3], out[7]


@njit(cache=True, error_model="numpy")
def project_vector2s(mx: np.ndarray, vectors: np.ndarray) -> np.ndarray:
    """形状 `(N, 2)` の点列を 1 点ずつ `project_vector2` し、同順・同数で返す。"""
    n = vectors.shape[0]
    result = np.empty((n, 2), dtype=np.float32)
    for i in range(n):
        px, py = project_vector2(mx, vectors[i, 0], vectors[i, 1])
        result[i, 0] = px
        result[i, 1] = py
    return result


@njit(cache=True, error_model="numpy")
def project_vector3(
    mx: np.ndarray, x: np.float32, y: np.float32, z: np.float32
) -> tuple[float, float, float]:
    """点 `(x, y, z)` を `mx` で射影する（`[3]`/`[7]`/`[11]` を返す）。"""
    out = np.empty(MATRIX_LEN, dtype=np.float32)
    _multiply_into(mx, _translation_of(x, y, z), out)
    return out[3], out[7], out[11]


@njit(cache=True, error_model="numpy")
def project_vector3s(mx: np.ndarray, vectors: np.ndarray) -> np.ndarray:
    n = vectors.shape[0]
    result = np.empty((n, 3), dtype=np.float32)
    for i in range(n):
        px, py, pz = project_vector3(mx, vectors[i, 0], vectors[i, 1], vectors[i, 2])
        result[i, 0] = px
        result[i, 1] = py
        result[i, 2] = pz
    return result


__all__ = [
    "IDENTITY",
    "MATRIX_LEN",
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
]
