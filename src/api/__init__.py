"""
どこで: `api` 入口（高レベル公開 API）。
何を: 行列エンジン `matrix`・直線エンジン `line`・値型 `Matrix4`・例外を再輸出。
なぜ: 埋め込み先が単一名前空間からバイナリ境界の全操作に到達できるようにするため。

Usage:
    from api import matrix, line, Matrix4

    t = matrix.pack([[1, 0, 0, 3], [0, 1, 0, 4], [0, 0, 1, 0], [0, 0, 0, 1]])
    matrix.project_vector2(t, 0, 0)                       # (3.0, 4.0)
    line.intersection(((0, 0), (10, 10)), ((0, 10), (10, 0)))  # (5.0, 5.0)
"""

from engine.core.matrix import Matrix4
from engine.core.packing import MalformedArgumentError

from . import line, matrix

__all__ = [
    # バイナリ境界
    "matrix",
    "line",
    # 値型（フレームワーク内部向け）
    "Matrix4",
    # 例外
    "MalformedArgumentError",
]

# バージョン情報
__version__ = "2026.10"
__api_version__ = "1.0"
