# tests/test_logger.py
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from gw2_market.logger import configure_worker_logging, current_log_file, setup_logger

pytestmark = pytest.mark.usefixtures("clean_root_handlers")


@pytest.fixture()
def clean_root_handlers():
    """Start each test with a clean root logger; restore afterwards."""
    root = logging.getLogger()
    prev = list(root.handlers)
    prev_level = root.level
    for h in prev:
        root.removeHandler(h)
    try:
        yield
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in prev:
            root.addHandler(h)
        root.setLevel(prev_level)


def test_creates_log_file_and_writes(tmp_path: Path):
    log_path = setup_logger(tmp_path / "logs", force=True)

    assert log_path.parent == tmp_path / "logs"
    assert log_path.name.startswith("gw2_market_")
    assert log_path.suffix == ".log"

    logging.getLogger("gw2_market.test").info("hello world")
    text = log_path.read_text(encoding="utf-8")
    assert "Logging to:" in text
    assert "hello world" in text
    assert current_log_file() == str(log_path)


def test_file_path_logs_next_to_it(tmp_path: Path):
    log_path = setup_logger(tmp_path / "items.json", force=True)
    assert log_path.parent == tmp_path


def test_rotate_and_console_handlers(tmp_path: Path):
    setup_logger(tmp_path, rotate=True, console=True, force=True)
    types = {type(h) for h in logging.getLogger().handlers}
    assert RotatingFileHandler in types
    assert logging.StreamHandler in types


def test_no_log_file_configured():
    assert current_log_file() is None


def test_worker_logging_attaches_file_in_fresh_process(tmp_path: Path):
    log_file = tmp_path / "run.log"

    worker_logger = configure_worker_logging(str(log_file), 3)
    worker_logger.info("fetching chunk")

    assert worker_logger.name == "gw2_market.worker.3"
    assert "fetching chunk" in log_file.read_text(encoding="utf-8")


def test_worker_logging_keeps_existing_handlers(tmp_path: Path):
    setup_logger(tmp_path, force=True)
    before = list(logging.getLogger().handlers)

    configure_worker_logging(str(tmp_path / "other.log"), 0)

    assert logging.getLogger().handlers == before
    assert not (tmp_path / "other.log").exists()


def test_root_log_keeps_lines_appended_by_workers(tmp_path: Path):
    log_path = setup_logger(tmp_path, force=True)

    with open(log_path, "a", encoding="utf-8") as fh:
        fh.write("line from worker process\n")
    logging.getLogger("gw2_market.test").info("line from coordinator")

    text = log_path.read_text(encoding="utf-8")
    assert "line from worker process" in text
    assert "line from coordinator" in text
