"""
どこで: `engine.core` の境界正規化ヘルパ。
何を: パック済みバイナリ（行列・点列）とスカラ引数を検証し、カーネルが受け取る
      float32/float64 表現へ正規化する。
なぜ: 長さ/型の不正をカーネル実行前にまとめて検出し、部分出力なしで原子的に失敗させるため。

境界の約束:
- 行列は 16 個の float32（ネイティブエンディアン）を並べた 64 バイトのバイナリ。
- 2D 点列は `(x, y)` の float32 対を並べたバイナリ（長さは 8 の倍数）。
  3D 点列は `(x, y, z)`（長さは 12 の倍数）。
- スカラは int または float を受理し、int は同値の実数として扱う。bool・文字列・None・
  complex など、それ以外は受理しない。
- 検証に通った入力は常にコピーしてから渡すため、呼び出し側バッファは書き換わらない。
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import numpy as np

from .matrix_kernel import MATRIX_LEN

logger = logging.getLogger(__name__)

FLOAT32_SIZE = np.dtype(np.float32).itemsize
MATRIX_NBYTES = MATRIX_LEN * FLOAT32_SIZE


class MalformedArgumentError(ValueError, TypeError):
    """境界で検出した不正引数（長さ不一致・型不一致）。

    `ValueError` と `TypeError` の双方として捕捉できる。数値的な退化（0 除算・平行線）
    はこの例外の対象外で、inf/NaN として結果に現れる。
    """


def _reject(name: str, reason: str) -> MalformedArgumentError:
    logger.debug("不正引数 %s: %s", name, reason)
    return MalformedArgumentError(f"{name}: {reason}")


def _as_bytes(value: Any, name: str) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, memoryview):
        if not value.c_contiguous:
            raise _reject(name, "memoryview は C 連続である必要があります")
        return value.tobytes()
    raise _reject(name, f"バイナリ（bytes/bytearray/memoryview）が必要です: {type(value).__name__}")


def as_matrix(value: Any, name: str = "matrix") -> np.ndarray:
    """64 バイトの行列バイナリを形状 `(16,)` の float32 配列（新規確保）に変換する。"""
    raw = _as_bytes(value, name)
    if len(raw) != MATRIX_NBYTES:
        raise _reject(name, f"行列は {MATRIX_NBYTES} バイトである必要があります（受領 {len(raw)}）")
    return np.frombuffer(raw, dtype=np.float32).copy()


def as_matrix_list(values: Any, name: str = "matrices") -> np.ndarray:
    """行列バイナリの list/tuple を形状 `(N, 16)` の float32 配列に変換する。

    1 要素でも不正なら全体を拒否する（途中までの計算は行わない）。
    """
    if not isinstance(values, (list, tuple)):
        raise _reject(name, f"list または tuple が必要です: {type(values).__name__}")
    out = np.empty((len(values), MATRIX_LEN), dtype=np.float32)
    for i, item in enumerate(values):
        out[i] = as_matrix(item, f"{name}[{i}]")
    return out


def as_vector_stream(value: Any, dims: int, name: str = "vectors") -> np.ndarray:
    """点列バイナリを形状 `(N, dims)` の float32 配列（新規確保）に変換する。"""
    raw = _as_bytes(value, name)
    stride = dims * FLOAT32_SIZE
    if len(raw) % stride != 0:
        raise _reject(name, f"長さは {stride} バイトの倍数である必要があります（受領 {len(raw)}）")
    return np.frombuffer(raw, dtype=np.float32).reshape(-1, dims).copy()


def _is_number(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def as_double(value: Any, name: str = "value") -> float:
    """int/float を float64 に正規化する（int は同値の実数として扱う）。"""
    if not _is_number(value):
        raise _reject(name, f"int または float が必要です: {type(value).__name__}")
    try:
        return float(value)
    except OverflowError as exc:
        raise _reject(name, "float64 で表現できない整数です") from exc


def as_float(value: Any, name: str = "value") -> np.float32:
    """int/float を float32 に正規化する（行列要素・射影座標用）。"""
    return np.float32(as_double(value, name))


def as_point(value: Any, name: str = "point") -> tuple[float, float]:
    """`(x, y)` の 2 要素 tuple/list を float64 の組に正規化する。"""
    if not isinstance(value, (tuple, list)) or len(value) != 2:
        raise _reject(name, "2 要素の tuple/list `(x, y)` が必要です")
    return as_double(value[0], f"{name}.x"), as_double(value[1], f"{name}.y")


def as_line(value: Any, name: str = "line") -> tuple[tuple[float, float], tuple[float, float]]:
    """`((x0, y0), (x1, y1))` を float64 の点の組に正規化する。"""
    if not isinstance(value, (tuple, list)) or len(value) != 2:
        raise _reject(name, "2 点 `((x0, y0), (x1, y1))` が必要です")
    return as_point(value[0], f"{name}[0]"), as_point(value[1], f"{name}[1]")


def to_bytes(arr: np.ndarray) -> bytes:
    """float32 配列をパック済みバイナリとして返す。"""
    return np.ascontiguousarray(arr, dtype=np.float32).tobytes()


def _flat_numbers(values: Any, name: str) -> list[float]:
    if not isinstance(values, (list, tuple, range)):
        raise _reject(name, f"list/tuple が必要です: {type(values).__name__}")
    items = list(values)
    if items and all(isinstance(r, (list, tuple, np.ndarray)) for r in items):
        if len(items) != 4 or any(len(r) != 4 for r in items):
            raise _reject(name, "入れ子は 4x4 である必要があります")
        items = [v for r in items for v in r]
    if len(items) != MATRIX_LEN:
        raise _reject(name, f"16 要素または 4x4 が必要です（受領 {len(items)}）")
    return [as_double(v, f"{name}[{i}]") for i, v in enumerate(items)]


def matrix_from_values(values: Sequence[Any], name: str = "values") -> np.ndarray:
    """数値 16 個（平坦）または 4x4 の入れ子から `(16,)` float32 を作る。

    要素はスカラ引数と同じ規則で検証する（bool・数値文字列などは暗黙変換しない）。
    """
    if isinstance(values, np.ndarray):
        if values.dtype.kind not in "iuf":
            raise _reject(name, f"数値配列が必要です: dtype={values.dtype}")
        arr = values.astype(np.float32)
    else:
        arr = np.array(_flat_numbers(values, name), dtype=np.float32)
    if arr.shape == (4, 4):
        arr = arr.reshape(MATRIX_LEN)
    if arr.shape != (MATRIX_LEN,):
        raise _reject(name, f"16 要素または 4x4 が必要です: shape={arr.shape}")
    return np.ascontiguousarray(arr).copy()


__all__ = [
    "MalformedArgumentError",
    "MATRIX_NBYTES",
    "as_matrix",
    "as_matrix_list",
    "as_vector_stream",
    "as_double",
    "as_float",
    "as_point",
    "as_line",
    "to_bytes",
    "matrix_from_values",
]
