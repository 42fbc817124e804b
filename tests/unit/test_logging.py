from __future__ import annotations

import logging

from workload_converter.core.logging import LOG_LEVEL_ENV, resolve_level


def test_resolve_level(monkeypatch):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    assert resolve_level() == logging.WARNING
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(logging.ERROR) == logging.ERROR
    assert resolve_level("nonsense") == logging.WARNING

    monkeypatch.setenv(LOG_LEVEL_ENV, "INFO")
    assert resolve_level() == logging.INFO
    assert resolve_level("ERROR") == logging.ERROR
