"""
Structured logging tests - message shape, redaction and domain helpers.
"""

import logging

import pytest

from qa_edits.util.logging import StructuredLogger, logger, sanitize_payload


@pytest.fixture
def structured_logger():
    return StructuredLogger(name="qa_edits_test")


class TestStructuredLogger:
    """Test structured log lines."""

    def test_single_handler_per_logger(self):
        first = StructuredLogger(name="qa_edits_handlers")
        second = StructuredLogger(name="qa_edits_handlers")
        assert first.logger is second.logger
        assert len(second.logger.handlers) == 1

    def test_log_operation_format(self, structured_logger, caplog):
        with caplog.at_level(logging.INFO, logger="qa_edits_test"):
            structured_logger.log_operation("edits.merge", "success", {"result": 3})

        assert "Operation: edits.merge, Status: success, Details: {'result': 3}" in caplog.text

    def test_log_edit_merge_counts_replacements(self, structured_logger, caplog):
        with caplog.at_level(logging.INFO, logger="qa_edits_test"):
            structured_logger.log_edit_merge(existing_count=4, incoming_count=3, result_count=5)

        assert "'replaced': 2" in caplog.text

    def test_log_project_event(self, structured_logger, caplog):
        with caplog.at_level(logging.INFO, logger="qa_edits_test"):
            structured_logger.log_project_event("deleted", "p-1", status="not_found")

        assert "Operation: project.deleted, Status: not_found" in caplog.text
        assert "'project_id': 'p-1'" in caplog.text

    def test_schema_validation_error_redacts_input(self, structured_logger, caplog):
        errors = [{"loc": ("body", "edits", 0, "month"), "msg": "too large", "input": 13}]
        with caplog.at_level(logging.INFO, logger="qa_edits_test"):
            structured_logger.log_schema_validation_error("POST /edits", errors, {"indicatorName": "GDP"})

        assert "[REDACTED]" in caplog.text
        assert "'error_count': 1" in caplog.text
        assert "'target_identifier': 'GDP'" in caplog.text

    def test_global_logger(self):
        assert isinstance(logger, StructuredLogger)
        assert logger.logger.name == "qa_edits"


class TestSanitizePayload:
    """Test payload sanitization for audit output."""

    def test_redacts_free_text_and_values(self):
        payload = {"indicatorName": "GDP", "comment": "call the ministry", "newValue": 12}
        assert sanitize_payload(payload) == {
            "indicatorName": "GDP", "comment": "[REDACTED]", "newValue": "[REDACTED]"
        }

    def test_reveal_sensitive(self):
        payload = {"comment": "note"}
        assert sanitize_payload(payload, reveal_sensitive=True) == payload

    def test_truncates_long_strings_and_recurses(self):
        result = sanitize_payload({"items": [{"filterName": "x" * 150}]})
        assert result["items"][0]["filterName"] == "x" * 100 + "..."
