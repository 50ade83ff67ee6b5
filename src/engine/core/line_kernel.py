"""
どこで: `engine.core` の 2D 直線カーネル。
何を: 平行線（符号付き垂直オフセット）と 2 直線の交点を float64 の純関数で提供。
なぜ: 行列カーネルと独立した小さなスカラ演算群として分離し、境界層から直接呼べるようにするため。

注意:
- 退化入力（2 点が一致、平行/一致する 2 直線）は捕捉しない。戻り値が inf/NaN になる。
  有限性の判定は呼び出し側の責務。
"""

from __future__ import annotations

import math

from numba import njit  # type: ignore[attr-defined]


@njit(cache=True, error_model="numpy")
def parallel(
    x0: float, y0: float, x1: float, y1: float, w: float
) -> tuple[tuple[float, float], tuple[float, float]]:
    """`(x0, y0)-(x1, y1)` に平行で、垂直方向に `w` だけ離れた線分を返す。

    方向 `p0 - p1` を正規化し、90° 回転 `(x, y) -> (-y, x)` した単位法線の `w` 倍を
    両端点に加える。
    """
    x = x0 - x1
    y = y0 - y1

    d = math.sqrt((x * x) + (y * y))

    x = x / d
    y = y / d

    t = x
    x = -y
    y = t

    return (x0 + (w * x), y0 + (w * y)), (x1 + (w * x), y1 + (w * y))


@njit(cache=True, error_model="numpy")
def intersection(
    x0: float,
    y0: float,
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    x3: float,
    y3: float,
) -> tuple[float, float]:
    """直線 `p0-p1` と `p2-p3` の交点（2x2 行列式による標準式）。"""
    d = (x0 - x1) * (y2 - y3) - (y0 - y1) * (x2 - x3)
    d0 = x0 * y1 - y0 * x1
    d1 = x2 * y3 - y2 * x3
    x = (d0 * (x2 - x3) - d1 * (x0 - x1)) / d
    y = (d0 * (y2 - y3) - d1 * (y0 - y1)) / d
    return x, y


__all__ = ["parallel", "intersection"]
