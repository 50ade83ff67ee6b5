"""
どこで: `engine.core` サブパッケージ。
何を: 4x4 行列カーネル・2D 直線カーネル・境界正規化・値型 `Matrix4` を提供。
なぜ: 状態を持たない数値計算の基盤を構成し、上位層（api）から再利用可能にするため。
"""
