"""
JSON logging for the triage pipeline.

``TriageLogger`` wraps one ``triage.<component>`` standard logger. A record is
a JSON object holding the timestamp, component, message, the scoped context of
the message being processed and an optional ``extra`` payload. Secret values
are masked on the way out.

Outcome counters are shared by every component through ``OPERATION_STATS``,
so a run can report how many classifications and unsubscribe requests
succeeded or failed.
"""

import json
import logging
import re
import time
from collections import Counter
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

LOGGER_NAMESPACE = "triage"

JSON_FORMAT = '%(message)s'
STANDARD_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

MASK = '***'
SECRET_KEYS = frozenset({'password', 'token', 'api_key', 'key', 'secret'})

# key=value, key: value and "key": "value", including query string parameters
_SECRET_ASSIGNMENT_RE = re.compile(
    r'(?P<name>api_key|password|secret|token|key)(?P<sep>["\']?\s*[:=]\s*["\']?)[^"\'\s&]+',
    re.IGNORECASE
)


class SecretMasker:
    """Replace secret values in log text and payloads with a mask."""

    def __init__(self, keys=SECRET_KEYS):
        self.keys = frozenset(key.lower() for key in keys)

    def mask_text(self, text: str) -> str:
        return _SECRET_ASSIGNMENT_RE.sub(r'\g<name>\g<sep>' + MASK, text)

    def mask(self, value: Any, key: Optional[str] = None) -> Any:
        """Mask a payload value; values stored under a secret key are hidden entirely."""
        if key is not None and key.lower() in self.keys:
            return MASK
        if isinstance(value, str):
            return self.mask_text(value)
        if isinstance(value, dict):
            return {k: self.mask(v, str(k)) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self.mask(item) for item in value]
        return value


class OperationStats:
    """Success and failure counts per operation name."""

    def __init__(self):
        self._counts = Counter()

    def record(self, operation: str, success: bool):
        self._counts[(operation, bool(success))] += 1

    def reset(self):
        self._counts.clear()

    def snapshot(self) -> Dict[str, Dict[str, int]]:
        """Counts as ``{operation: {'success': n, 'failure': m}}``."""
        stats: Dict[str, Dict[str, int]] = {}
        for (operation, success), count in sorted(self._counts.items()):
            entry = stats.setdefault(operation, {'success': 0, 'failure': 0})
            entry['success' if success else 'failure'] += count
        return stats


OPERATION_STATS = OperationStats()


class TriageLogger:
    """JSON logger for one pipeline component."""

    def __init__(self, component: str, stats: Optional[OperationStats] = None):
        self.component = component
        self.logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{component}")
        self.context: Dict[str, Any] = {}
        self.masker = SecretMasker()
        self.stats = stats if stats is not None else OPERATION_STATS

    def add_context(self, key: str, value: Any) -> None:
        self.context[key] = value

    @contextmanager
    def scoped_context(self, context: Dict[str, Any]):
        """Attach context to every record logged inside the block."""
        saved = self.context
        self.context = {**saved, **context}
        try:
            yield
        finally:
            self.context = saved

    def _record(self, message: str, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        record = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'component': self.component,
            'message': self.masker.mask_text(message),
            'context': self.masker.mask(self.context)
        }
        if extra:
            record['extra'] = self.masker.mask(extra)
        return record

    def log(self, level: int, message: str, extra: Optional[Dict[str, Any]] = None):
        # Records are only serialized when the level is enabled.
        if self.logger.isEnabledFor(level):
            self.logger.log(level, json.dumps(self._record(message, extra), default=str))

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self.log(logging.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self.log(logging.INFO, message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self.log(logging.WARNING, message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self.log(logging.ERROR, message, extra)

    def log_exception(self, exception: Exception, extra: Optional[Dict[str, Any]] = None):
        """Log an exception with its type, its ``context`` attribute and the traceback."""
        record = self._record(f"Exception occurred: {exception}", extra)
        record['exception'] = {
            'type': type(exception).__name__,
            'message': self.masker.mask_text(str(exception))
        }
        context = getattr(exception, 'context', None)
        if context:
            record['exception']['context'] = self.masker.mask(context)
        self.logger.error(json.dumps(record, default=str), exc_info=True)

    @contextmanager
    def time_operation(self, operation: str):
        """Log how long the enclosed block took and whether it raised."""
        started = time.monotonic()
        self.debug(f"Starting {operation}", {'operation': operation})
        try:
            yield
        except Exception as e:
            self.error(f"Operation {operation} failed", {
                'operation': operation,
                'duration_seconds': round(time.monotonic() - started, 3),
                'status': 'failure',
                'error': str(e)
            })
            raise
        self.info(f"Operation {operation} completed successfully", {
            'operation': operation,
            'duration_seconds': round(time.monotonic() - started, 3),
            'status': 'success'
        })

    def count_outcome(self, operation: str, success: bool):
        self.stats.record(operation, success)


def configure_triage_logging(
    level: str = "INFO",
    format: str = "json",
    output: str = "console",
    filename: Optional[str] = None
) -> logging.Logger:
    """Route every ``triage.*`` logger to the console, a file, or both."""
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    handlers = []
    if output in ('console', 'both'):
        handlers.append(logging.StreamHandler())
    if output in ('file', 'both') and filename:
        handlers.append(logging.FileHandler(filename))

    pattern = JSON_FORMAT if format == 'json' else STANDARD_FORMAT
    for handler in handlers:
        handler.setFormatter(logging.Formatter(pattern))
        logger.addHandler(handler)

    return logger
