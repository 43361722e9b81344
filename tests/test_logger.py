import json
import logging

from tessera_core.logger import get_logger


def test_logger_writes_json_lines(tmp_path):
    path = tmp_path / "logs" / "tessera.log"
    log = get_logger("Tessera.Test.File", to_file=str(path))
    log.info("[TEST] key rotated")
    for handler in log.handlers:
        handler.flush()

    record = json.loads(path.read_text().splitlines()[-1])
    assert record["msg"] == "[TEST] key rotated"
    assert record["level"] == "INFO"
    assert record["name"] == "Tessera.Test.File"
    assert record["ts"].endswith("Z")


def test_level_from_env(monkeypatch):
    monkeypatch.setenv("TESSERA_LOG_LEVEL", "debug")
    assert get_logger("Tessera.Test.Level").level == logging.DEBUG


def test_unknown_level_from_env_falls_back(monkeypatch):
    monkeypatch.setenv("TESSERA_LOG_LEVEL", "verbose")
    assert get_logger("Tessera.Test.BadLevel").level == logging.INFO


def test_explicit_level():
    assert get_logger("Tessera.Test.Explicit", level="warning").level == logging.WARNING
    assert get_logger("Tessera.Test.Numeric", level=logging.ERROR).level == logging.ERROR


def test_handlers_are_not_duplicated():
    first = get_logger("Tessera.Test.Once")
    second = get_logger("Tessera.Test.Once")
    assert first is second
    assert len(second.handlers) == 1
