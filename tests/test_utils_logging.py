"""Tests for the logging setup helpers."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from chromacard.utils import logging as logging_utils


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers = handlers
    root.setLevel(level)
    logging_utils._LOG_PATH = None


def test_resolve_level_accepts_names_and_numbers() -> None:
    assert logging_utils.resolve_level("debug") == logging.DEBUG
    assert logging_utils.resolve_level(logging.WARNING) == logging.WARNING
    with pytest.raises(ValueError):
        logging_utils.resolve_level("chatty")


def test_setup_logging_writes_to_rotating_file(tmp_path: Path, restore_root_logger) -> None:
    log_path = logging_utils.setup_logging("DEBUG", log_dir=tmp_path, console=False, force=True)

    logging.getLogger("chromacard.test").info("theme applied")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_path == tmp_path / "chromacard.log"
    assert logging_utils.get_log_path() == log_path
    assert "theme applied" in log_path.read_text(encoding="utf-8")
    assert logging.getLogger("qasync").level == logging.WARNING


def test_setup_logging_is_idempotent_without_force(tmp_path: Path, restore_root_logger) -> None:
    first = logging_utils.setup_logging(log_dir=tmp_path / "a", console=False, force=True)
    second = logging_utils.setup_logging(log_dir=tmp_path / "b", console=False)

    assert second == first


def test_setup_logging_honours_env_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_root_logger
) -> None:
    monkeypatch.setenv("CHROMACARD_LOG_DIR", str(tmp_path / "env-logs"))

    log_path = logging_utils.setup_logging(console=False, force=True)

    assert log_path.parent == tmp_path / "env-logs"
