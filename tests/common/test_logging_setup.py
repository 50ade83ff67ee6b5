from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

import pytest

from common.logging import setup_default_logging


@contextmanager
def _bare_root() -> Iterator[logging.Logger]:
    # pytest は各フェーズでルートにハンドラを足すため、テスト本体の中で外す
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    root.handlers.clear()
    try:
        yield root
    finally:
        for h in root.handlers:
            h.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_applies_basic_config_once() -> None:
    with _bare_root() as root:
        setup_default_logging("debug")
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG
        setup_default_logging(logging.ERROR)
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG


def test_level_from_settings(restore_settings: pytest.MonkeyPatch) -> None:
    from common import settings

    restore_settings.setenv("GMK_LOG_LEVEL", "WARNING")
    settings.reload_from_env()
    with _bare_root() as root:
        setup_default_logging()
        assert root.level == logging.WARNING


def test_unknown_level_name_falls_back_to_info() -> None:
    with _bare_root() as root:
        setup_default_logging("chatty")
        assert root.level == logging.INFO


def test_noop_when_app_configured() -> None:
    with _bare_root() as root:
        handler = logging.NullHandler()
        root.addHandler(handler)
        root.setLevel(logging.CRITICAL)
        setup_default_logging("DEBUG")
        assert root.handlers == [handler]
        assert root.level == logging.CRITICAL
