"""
どこで: `common` パッケージ。
何を: 設定・環境変数・ロギング・型エイリアスなどの軽量基盤。
なぜ: カーネル（engine.core）と境界層（api）の双方から再利用する共通基盤を分離するため。
"""

from .logging import setup_default_logging

__all__ = [
    "setup_default_logging",
]
