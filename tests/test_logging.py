# tests/test_logging.py
from __future__ import annotations

import logging

import pytest

from catalog.core.logging import UVICORN_LOGGERS, setup_logging


@pytest.fixture
def restore_levels():
    names = ("", *UVICORN_LOGGERS)
    saved = {n: logging.getLogger(n).level for n in names}
    yield
    for n, lvl in saved.items():
        logging.getLogger(n).setLevel(lvl)


def test_level_name_is_normalized_and_applied_to_uvicorn(restore_levels):
    assert setup_logging(" debug ") == logging.DEBUG
    assert logging.getLogger().level == logging.DEBUG
    for name in UVICORN_LOGGERS:
        assert logging.getLogger(name).level == logging.DEBUG


def test_unknown_level_falls_back_to_info(restore_levels):
    assert setup_logging("chatty") == logging.INFO
    assert logging.getLogger("uvicorn.access").level == logging.INFO


def test_repeated_setup_does_not_stack_handlers(restore_levels):
    setup_logging("WARNING")
    count = len(logging.getLogger().handlers)
    setup_logging("ERROR")
    assert len(logging.getLogger().handlers) == count


def test_entrypoint_passes_resolved_level_to_uvicorn(restore_levels, monkeypatch):
    import catalog.__main__ as entry

    seen = {}
    monkeypatch.setattr(entry.settings, "LOG_LEVEL", "verbose")
    monkeypatch.setattr(entry.uvicorn, "run", lambda app, **kw: seen.update(kw, app=app))

    entry.main()
    assert seen["app"] == "catalog.main:app"
    assert seen["log_level"] == logging.INFO
