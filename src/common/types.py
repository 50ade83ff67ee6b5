"""
どこで: `common` の型定義。
何を: Vec2/Vec3/Line2 などの軽量エイリアス（組込みジェネリックで記述）。
なぜ: 依存の少ない場所に配置して循環と分散定義を避けるため。
"""

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]
Line2 = tuple[Vec2, Vec2]

# 境界で受理する数値（bool は除外して扱う）
NumberLike = int | float

# 境界で受理するパック済みバイナリ
BufferLike = bytes | bytearray | memoryview


__all__ = ["Vec2", "Vec3", "Line2", "NumberLike", "BufferLike"]
