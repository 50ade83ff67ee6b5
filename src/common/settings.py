"""
どこで: `common.settings`
何を: カーネル周辺の設定（許容誤差の既定値・ログ・バッチ計測閾値）を型付きで一元管理する。
なぜ: `os.getenv` や YAML 参照の散在を解消し、既定値/型の一貫性とテスト容易性を高めるため。

読込順（後勝ち）:
1) dataclass の既定値
2) YAML（`configs/default.yaml` → ルート `config.yaml`）の `kernel:` セクション
3) 環境変数（`GMK_*`）
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping

from util.utils import load_config

from .env import env_float, env_int, env_str

logger = logging.getLogger(__name__)


@dataclass
class _Settings:
    # Matrix4.close() の既定許容誤差
    CLOSE_TOLERANCE: float = 1e-5

    # Logging
    LOG_LEVEL: str = "INFO"

    # バッチ投影/チェーン乗算でサイズを DEBUG 出力する件数の下限
    BATCH_LOG_THRESHOLD: int = 100_000


_settings = _Settings()


def _apply_yaml(section: Mapping[str, Any]) -> None:
    """YAML の `kernel:` セクションを反映（不正値は既定値のまま）。"""
    tol = section.get("close_tolerance")
    if isinstance(tol, (int, float)) and not isinstance(tol, bool) and math.isfinite(tol):
        _settings.CLOSE_TOLERANCE = float(tol)

    level = section.get("log_level")
    if isinstance(level, str) and level.strip():
        _settings.LOG_LEVEL = level.strip().upper()

    threshold = section.get("batch_log_threshold")
    if isinstance(threshold, int) and not isinstance(threshold, bool):
        _settings.BATCH_LOG_THRESHOLD = max(0, threshold)


def reload_from_env() -> None:
    """既定値 → YAML → 環境変数の順に設定を再読込。

    - float は `env_float`、int は `env_int`（下限 0）、str は `env_str` を使用。
    """
    defaults = _Settings()
    _settings.CLOSE_TOLERANCE = defaults.CLOSE_TOLERANCE
    _settings.LOG_LEVEL = defaults.LOG_LEVEL
    _settings.BATCH_LOG_THRESHOLD = defaults.BATCH_LOG_THRESHOLD

    cfg = load_config()
    section = cfg.get("kernel", {})
    if isinstance(section, Mapping):
        _apply_yaml(section)
    elif section is not None:
        logger.debug("config の kernel セクションが mapping ではないため無視: %r", section)

    _settings.CLOSE_TOLERANCE = env_float("GMK_CLOSE_TOLERANCE", _settings.CLOSE_TOLERANCE)
    _settings.LOG_LEVEL = env_str("GMK_LOG_LEVEL", _settings.LOG_LEVEL).upper()
    _settings.BATCH_LOG_THRESHOLD = (
        env_int("GMK_BATCH_LOG_THRESHOLD", _settings.BATCH_LOG_THRESHOLD, min_value=0) or 0
    )


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
