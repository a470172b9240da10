"""
Tests for logging setup.

Run with:
    pytest tests/core/test_logging_setup.py -v
"""

import json
import logging
import sys

import pytest

from ecore_dl.converters import AxiomCompiler
from ecore_dl.core.config import ConverterConfig
from ecore_dl.core.logging_setup import JSONFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield
    setup_logging("WARNING", include_console=False)
    root.setLevel(level)


@pytest.mark.unit
class TestSetupLogging:
    """Handler installation and formats."""

    def test_file_logging(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "run.log"

        result = setup_logging("DEBUG", str(log_file), include_console=False)
        logging.getLogger("ecore_dl.test").debug("compiled 3 axioms")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert result == str(log_file)
        content = log_file.read_text(encoding="utf-8")
        assert "compiled 3 axioms" in content
        assert " - ecore_dl.test - DEBUG - " in content

    def test_json_file_logging(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "run.json.log"

        setup_logging("INFO", str(log_file), json_format=True, include_console=False)
        logging.getLogger("ecore_dl.test").info("normalized", extra={"constraint": "inv1", "colour": "blue"})
        for handler in logging.getLogger().handlers:
            handler.flush()

        records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        record = records[-1]
        assert record["message"] == "normalized"
        assert record["level"] == "INFO"
        assert record["context"] == {"constraint": "inv1"}
        assert "colour" not in record

    def test_repeated_setup_replaces_handlers(self, restore_root_logger):
        root = logging.getLogger()
        before = len(root.handlers)
        setup_logging("INFO")
        setup_logging("INFO")
        assert len(root.handlers) == before + 1

    def test_console_only_returns_none(self, restore_root_logger):
        assert setup_logging("INFO") is None


@pytest.mark.unit
class TestJSONFormatter:

    def test_exception_is_included(self):
        try:
            raise ValueError("bad bound")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())
        payload = json.loads(JSONFormatter().format(record))
        assert payload["message"] == "failed"
        assert "ValueError: bad bound" in payload["exception"]

    def test_record_without_context(self):
        record = logging.LogRecord("ecore_dl.x", logging.INFO, __file__, 1, "compiled %d axioms", (3,), None)
        payload = json.loads(JSONFormatter().format(record))
        assert payload["message"] == "compiled 3 axioms"
        assert payload["logger"] == "ecore_dl.x"
        assert "context" not in payload
        assert payload["time"].endswith("+00:00")

    def test_skipped_constraint_carries_context(self, shop_model, caplog):
        shop_model.find_class("Order").add_invariant("broken", "self.items->")
        with caplog.at_level(logging.WARNING, logger="ecore_dl.converters.axiom_compiler"):
            AxiomCompiler(ConverterConfig(check_memory=False)).compile(shop_model)

        record = next(r for r in caplog.records if "Skipping constraint" in r.getMessage())
        payload = json.loads(JSONFormatter().format(record))
        assert payload["context"] == {"class_name": "Order", "constraint": "broken"}
