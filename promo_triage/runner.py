"""
Triage run orchestration.

A run loads the correction window once, fetches a bounded batch of unread
promotional messages and processes them one at a time, spacing items to stay
under the classifier's request rate and stopping once the runtime budget is
spent. A failure on one message is logged and the run moves on.
"""

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .config.settings import TriageSettings
from .reporting.summary import SummaryReport, SummaryReporter, build_summary_report
from .triage.engine import DecisionEngine
from .triage.exceptions import MailStoreError
from .triage.logging import OPERATION_STATS, TriageLogger
from .triage.types import ProcessingResult


@dataclass(frozen=True)
class SchedulePolicy:
    """How many items a run takes and how they are spaced."""

    max_items: int = 20
    min_interval_seconds: float = 6.0
    max_runtime_seconds: float = 300.0

    @classmethod
    def from_settings(cls, settings: TriageSettings) -> 'SchedulePolicy':
        return cls(
            max_items=settings.max_items_per_run,
            min_interval_seconds=settings.min_interval_seconds,
            max_runtime_seconds=settings.max_runtime_seconds
        )


@dataclass
class RunSummary:
    """What happened during one run."""

    fetched: int = 0
    results: List[ProcessingResult] = field(default_factory=list)
    failures: int = 0
    deferred: int = 0
    operations: Dict[str, Dict[str, int]] = field(default_factory=dict)
    report: Optional[SummaryReport] = None

    @property
    def processed(self) -> int:
        return len(self.results)


class TriageRunner:
    """Apply the decision engine to each fetched message in sequence."""

    def __init__(
        self,
        settings: TriageSettings,
        mail_store,
        engine: DecisionEngine,
        result_log=None,
        reporter: Optional[SummaryReporter] = None,
        policy: Optional[SchedulePolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        dry_run: bool = False
    ):
        """
        Args:
            settings: Immutable triage settings
            mail_store: Object with ``fetch_promotional(limit)`` and
                ``mark_processed(message)``
            engine: Decision engine for single messages
            result_log: ResultLog to append to and read corrections from
            reporter: Sends the run report (skipped if None)
            policy: Scheduling policy (derived from settings if omitted)
            sleep: Delay function between items
            clock: Monotonic clock for the runtime budget
            dry_run: Do not write to the log or send a report
        """
        self.settings = settings
        self.mail_store = mail_store
        self.engine = engine
        self.result_log = result_log
        self.reporter = reporter
        self.policy = policy or SchedulePolicy.from_settings(settings)
        self.sleep = sleep
        self.clock = clock
        self.dry_run = dry_run
        self.logger = TriageLogger("runner")

    def load_corrections(self):
        if self.result_log is None:
            return []
        return self.result_log.load_corrections(self.settings.correction_window)

    def run(self, limit: Optional[int] = None) -> RunSummary:
        """
        Execute one triage run.

        Args:
            limit: Override for the maximum number of messages

        Returns:
            RunSummary with the results and the report
        """
        max_items = min(limit, self.policy.max_items) if limit else self.policy.max_items
        summary = RunSummary()
        OPERATION_STATS.reset()

        with self.logger.time_operation("triage_run"):
            corrections = self.load_corrections()
            messages = self.mail_store.fetch_promotional(max_items)
            summary.fetched = len(messages)
            self.logger.info("Fetched promotional messages", {
                'count': len(messages),
                'corrections': len(corrections)
            })

            started = self.clock()
            for index, message in enumerate(messages):
                if index > 0 and self.policy.min_interval_seconds > 0:
                    self.sleep(self.policy.min_interval_seconds)

                if self.clock() - started >= self.policy.max_runtime_seconds:
                    summary.deferred = len(messages) - index
                    self.logger.warning("Runtime budget exhausted, deferring remaining messages", {
                        'deferred': summary.deferred
                    })
                    break

                result = self._process_one(message, corrections)
                if result is None:
                    summary.failures += 1
                else:
                    summary.results.append(result)

            summary.operations = OPERATION_STATS.snapshot()
            self.logger.info("Run statistics", {
                'processed': summary.processed,
                'failures': summary.failures,
                'deferred': summary.deferred,
                'operations': summary.operations
            })

        summary.report = self._report(summary.results)
        return summary

    def _process_one(self, message, corrections) -> Optional[ProcessingResult]:
        """Process and log one message; any failure is logged and skipped."""
        try:
            result = self.engine.process(message, corrections)
            if self.result_log is not None and not self.dry_run:
                self.result_log.append(result)
        except Exception as e:
            self.logger.log_exception(e, {
                'message_id': getattr(message, 'message_id', None),
                'sender': getattr(message, 'sender', None)
            })
            return None

        if not self.dry_run:
            self._mark_processed(message)
        return result

    def _mark_processed(self, message):
        """Keep a logged message from being selected again by the next run."""
        try:
            self.mail_store.mark_processed(message)
        except MailStoreError as e:
            self.logger.warning("Could not mark message as processed", {
                'message_id': message.message_id,
                'error': str(e)
            })

    def _report(self, results: List[ProcessingResult]) -> SummaryReport:
        if self.reporter is not None and not self.dry_run:
            return self.reporter.send(results)
        return build_summary_report(results, self.settings.log_link)
