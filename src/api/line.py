"""
どこで: `api.line`（直線/ベクトルエンジンの公開境界）。
何を: 点を `(x, y)` の組で受け取り、float64 に正規化してから直線カーネルを呼ぶ。
なぜ: 行列エンジンと同じく、型検証と精度正規化を境界で完了させるため。

Usage:
    from api import line

    line.parallel((0, 0), (10, 0), 5)                 # ((0.0, -5.0), (10.0, -5.0))
    line.intersection(((0, 0), (10, 10)), ((0, 10), (10, 0)))  # (5.0, 5.0)

退化入力（同一 2 点・平行線）は例外にせず inf/NaN を返す。`math.isfinite` で判定すること。
"""

from __future__ import annotations

from typing import Any

from common.types import Line2, NumberLike, Vec2
from engine.core import line_kernel as lk
from engine.core.packing import as_double, as_line, as_point


def parallel(p0: Vec2, p1: Vec2, w: NumberLike) -> Line2:
    """`p0-p1` に平行で、符号付き垂直距離 `w` だけ離れた線分 `(p0', p1')` を返す。

    正の `w` は方向 `p0 - p1` を反時計回りに 90° 回した側へずらす。
    """
    x0, y0 = as_point(p0, "p0")
    x1, y1 = as_point(p1, "p1")
    dist = as_double(w, "w")
    (ax, ay), (bx, by) = lk.parallel(x0, y0, x1, y1, dist)
    return (float(ax), float(ay)), (float(bx), float(by))


def intersection(line_a: Any, line_b: Any) -> Vec2:
    """2 点で定まる 2 直線 `((x0, y0), (x1, y1))` と `((x2, y2), (x3, y3))` の交点。"""
    (x0, y0), (x1, y1) = as_line(line_a, "line_a")
    (x2, y2), (x3, y3) = as_line(line_b, "line_b")
    x, y = lk.intersection(x0, y0, x1, y1, x2, y2, x3, y3)
    return float(x), float(y)


__all__ = ["parallel", "intersection"]
