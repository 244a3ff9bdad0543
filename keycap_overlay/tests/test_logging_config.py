"""Tests for logging setup and contextual fields."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from keycap_overlay.utils import logging_config
from keycap_overlay.utils.logging_config import ContextFormatter


@pytest.fixture(autouse=True)
def _clean_root():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, ContextFormatter):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    logging_config.pop_context()


def _read_json(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text().strip().splitlines()]


def test_json_file_with_context(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "overlay.log"
    logging_config.setup_logging(
        log_level="INFO",
        log_file=str(log_path),
        json=True,
        to_stderr=False,
        context={"app": "keycap-overlay"},
    )
    logging_config.push_context(model="hp")
    logging.getLogger("overlay_test").info("hello")

    rec = _read_json(log_path)[0]
    assert rec["msg"] == "hello"
    assert rec["lvl"] == "INFO"
    assert rec["app"] == "keycap-overlay"
    assert rec["model"] == "hp"


def test_setup_is_idempotent(tmp_path: Path) -> None:
    log_path = tmp_path / "overlay.log"
    for _ in range(2):
        logging_config.setup_logging(
            log_level="INFO", log_file=str(log_path), json=True, to_stderr=False,
        )
    logging.getLogger("overlay_test").info("once")
    assert len(_read_json(log_path)) == 1


def test_level_filters(tmp_path: Path) -> None:
    log_path = tmp_path / "overlay.log"
    logging_config.setup_logging(
        log_level="warning", log_file=str(log_path), json=True, to_stderr=False,
    )
    logger = logging.getLogger("overlay_test")
    logger.info("hidden")
    logger.warning("shown")
    assert [r["msg"] for r in _read_json(log_path)] == ["shown"]


def test_pop_context_keys(tmp_path: Path) -> None:
    log_path = tmp_path / "overlay.log"
    logging_config.setup_logging(
        log_level="INFO", log_file=str(log_path), json=True, to_stderr=False,
    )
    logging_config.push_context(model="sm", mode="cut")
    logging_config.pop_context(keys=["mode"])
    logging.getLogger("overlay_test").info("x")

    rec = _read_json(log_path)[0]
    assert rec["model"] == "sm"
    assert "mode" not in rec


def test_human_format(tmp_path: Path) -> None:
    log_path = tmp_path / "overlay.log"
    logging_config.setup_logging(
        log_level="INFO", log_file=str(log_path), to_stderr=False,
        context={"app": "keycap-overlay"},
    )
    logging.getLogger("overlay_test").info("Wrote sheet")
    line = log_path.read_text().strip()
    assert "| INFO" in line
    assert "app=keycap-overlay" in line
    assert line.endswith("Wrote sheet")


def test_unknown_level() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        logging_config.setup_logging(log_level="LOUD", to_stderr=False)


def test_quiet_libs() -> None:
    logging_config.setup_logging(
        log_level="DEBUG", to_stderr=False, quiet_libs=["reportlab"],
    )
    assert logging.getLogger("reportlab").level == logging.WARNING
