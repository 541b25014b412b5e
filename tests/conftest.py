from __future__ import annotations

import logging

import pytest

from car_pricing.settings import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    for var in ("CAR_PRICING_DEPRECIATION_MODE", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _restore_root_logger():
    # The CLI reconfigures the root logger.
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
