"""
Tests for structured logging with context tracking and secret masking.
"""

import json
import logging
import pytest
from io import StringIO
from unittest.mock import patch

from promo_triage.triage.exceptions import ExtractionError
from promo_triage.triage.logging import (
    LOGGER_NAMESPACE, OperationStats, SecretMasker, TriageLogger, configure_triage_logging
)


@pytest.fixture
def captured():
    """A TriageLogger whose JSON records are captured in memory."""
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    logger = TriageLogger("test_component")
    logger.logger.addHandler(handler)
    logger.logger.setLevel(logging.DEBUG)
    yield logger, stream
    logger.logger.removeHandler(handler)
    logger.logger.setLevel(logging.NOTSET)


def _records(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


class TestStructuredLogging:
    """Test structured logging implementation with context tracking."""

    def test_logger_creation(self):
        """Test that the logger is named after its component."""
        logger = TriageLogger("link_extractor")

        assert logger.logger.name == "triage.link_extractor"
        assert logger.component == "link_extractor"
        assert isinstance(logger.context, dict)

    def test_structured_log_output_format(self, captured):
        """Test that log records are JSON with message, context and extra."""
        logger, stream = captured
        logger.add_context("message_id", "18c2a1b3")

        logger.info("Message classified", {"decision": "KEEP"})

        record = _records(stream)[0]
        assert record['component'] == 'test_component'
        assert record['message'] == 'Message classified'
        assert record['context'] == {'message_id': '18c2a1b3'}
        assert record['extra'] == {'decision': 'KEEP'}

    def test_disabled_level_not_emitted(self, captured):
        logger, stream = captured
        logger.logger.setLevel(logging.WARNING)

        logger.info("Not shown")
        logger.warning("Shown")

        assert [r['message'] for r in _records(stream)] == ['Shown']

    def test_non_serializable_extra(self, captured):
        """Values without a JSON form are rendered with str()."""
        logger, stream = captured

        logger.info("Odd value", {"value": object()})

        assert 'object object' in _records(stream)[0]['extra']['value']

    def test_performance_logging(self, captured):
        """Test performance measurement and logging."""
        logger, stream = captured

        with logger.time_operation("triage_run"):
            pass

        messages = [r['message'] for r in _records(stream)]
        assert "Operation triage_run completed successfully" in messages

    def test_time_operation_reraises(self, captured):
        logger, stream = captured

        with pytest.raises(RuntimeError):
            with logger.time_operation("triage_run"):
                raise RuntimeError("imap down")

        failure = _records(stream)[-1]
        assert failure['extra']['status'] == 'failure'
        assert failure['extra']['error'] == 'imap down'

    def test_error_logging_with_exceptions(self):
        """Test logging errors with exception information."""
        logger = TriageLogger("extractor")

        with patch.object(logger.logger, 'error') as mock_error:
            try:
                raise ExtractionError("Extraction failed", context={"password": "hunter2"})
            except ExtractionError as e:
                logger.log_exception(e, {"additional": "context"})

            mock_error.assert_called_once()
            payload = json.loads(mock_error.call_args[0][0])
            assert payload['exception']['type'] == 'ExtractionError'
            assert payload['exception']['context'] == {'password': '***'}

    def test_context_scoping(self):
        """Test that scoped context is removed on exit."""
        logger = TriageLogger("processor")
        logger.add_context("run", 1)

        with logger.scoped_context({"message_id": "abc"}):
            assert logger.context == {"run": 1, "message_id": "abc"}

        assert logger.context == {"run": 1}

    def test_sensitive_data_masked(self):
        """Test that secrets never reach the log output."""
        logger = TriageLogger("validator")
        logger.logger.setLevel(logging.INFO)

        with patch.object(logger.logger, 'log') as mock_log:
            logger.info("Processing request", {
                "url": "https://company.com/unsubscribe?token=secret123",
                "password": "secret_password",
                "api_key": "key_12345"
            })

        logger.logger.setLevel(logging.NOTSET)
        call_args = str(mock_log.call_args)
        assert "secret123" not in call_args
        assert "secret_password" not in call_args
        assert "key_12345" not in call_args

    def test_mask_text(self):
        masked = SecretMasker().mask_text('login password=hunter2 ok, "api_key": "abc"')

        assert masked == 'login password=*** ok, "api_key": "***"'

    def test_mask_nested_payload(self):
        masked = SecretMasker().mask({'auth': {'token': 't0k'}, 'urls': ['https://x.com/u?token=abc&id=1']})

        assert masked == {'auth': {'token': '***'}, 'urls': ['https://x.com/u?token=***&id=1']}

    def test_outcome_counting(self):
        """Outcomes are counted per operation in the shared statistics."""
        stats = OperationStats()
        classifier_log = TriageLogger("classifier", stats=stats)
        executor_log = TriageLogger("executor.http_get", stats=stats)

        classifier_log.count_outcome("classify", success=True)
        classifier_log.count_outcome("classify", success=False)
        executor_log.count_outcome("http_get", success=True)

        assert stats.snapshot() == {
            "classify": {"success": 1, "failure": 1},
            "http_get": {"success": 1, "failure": 0},
        }

        stats.reset()
        assert stats.snapshot() == {}


class TestLogConfiguration:
    """Test logging configuration and setup."""

    def test_log_level_configuration(self):
        configure_triage_logging(level="DEBUG")
        logger = logging.getLogger(LOGGER_NAMESPACE)
        assert logger.level == logging.DEBUG

        configure_triage_logging(level="WARNING")
        assert logger.level == logging.WARNING

    def test_file_output(self, tmp_path):
        log_file = tmp_path / 'triage.log'

        logger = configure_triage_logging(level="INFO", output="file", filename=str(log_file))
        TriageLogger("runner").info("Run started")
        for handler in logger.handlers:
            handler.flush()

        assert "Run started" in log_file.read_text()
        for handler in list(logger.handlers):
            handler.close()
        configure_triage_logging(level="WARNING")

    def test_standard_format(self):
        logger = configure_triage_logging(format="standard", output="console")

        assert '%(levelname)s' in logger.handlers[0].formatter._fmt
        configure_triage_logging(level="WARNING")
