"""共通フィクスチャ。

- 乱数シード固定
- 小さな行列試料（float32・行優先・パック済みバイナリ）
- 設定の退避/復元
"""

from __future__ import annotations

from typing import Iterator

import numpy as np
import pytest

from common import settings
from tests._utils.matrices import pack


@pytest.fixture(scope="session", autouse=True)
def np_seed() -> None:
    """NumPy の乱数を固定。"""
    np.random.seed(12345)


@pytest.fixture()
def identity_bytes() -> bytes:
    return np.eye(4, dtype=np.float32).reshape(16).tobytes()


@pytest.fixture()
def mat_a() -> bytes:
    # det = 68（小さな整数なので float32 でも各項が厳密に表現できる）
    return pack(
        [
            [2.0, 0.0, 1.0, 3.0],
            [1.0, 3.0, 0.0, 1.0],
            [0.0, 1.0, 4.0, 2.0],
            [1.0, 0.0, 2.0, 5.0],
        ]
    )


@pytest.fixture()
def mat_b() -> bytes:
    return pack(
        [
            [1.0, 2.0, 0.0, -1.0],
            [0.0, 1.0, 3.0, 2.0],
            [4.0, 0.0, 1.0, 0.0],
            [2.0, -2.0, 0.0, 1.0],
        ]
    )


@pytest.fixture()
def translate_3_4() -> bytes:
    return pack(
        [
            [1.0, 0.0, 0.0, 3.0],
            [0.0, 1.0, 0.0, 4.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


@pytest.fixture()
def random_matrices() -> list[bytes]:
    rng = np.random.default_rng(7)
    return [rng.uniform(-2.0, 2.0, size=16).astype(np.float32).tobytes() for _ in range(5)]


@pytest.fixture()
def restore_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[pytest.MonkeyPatch]:
    """テスト中に変更した環境変数/設定を終了時に再読込で戻す。"""
    for name in ("GMK_CLOSE_TOLERANCE", "GMK_LOG_LEVEL", "GMK_BATCH_LOG_THRESHOLD"):
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch
    monkeypatch.undo()
    settings.reload_from_env()
