"""
Tests for the per-run summary report.
"""

from datetime import datetime

from promo_triage.reporting.summary import SummaryReporter, build_summary_report
from promo_triage.triage.types import (
    ClassificationVerdict, Confidence, Decision, OutcomeStatus, ProcessingResult,
    UnsubscribeLocator
)

RUN_DATE = datetime(2026, 3, 14)


def _result(sender, decision, status, reason='r'):
    return ProcessingResult(
        timestamp=RUN_DATE,
        sender=sender,
        subject=f'Subject from {sender}',
        verdict=ClassificationVerdict(decision, Confidence.HIGH, 'topic', reason),
        locator=UnsubscribeLocator.not_found(),
        status=status
    )


class TestBuildSummaryReport:
    """Report content."""

    def test_zero_processed(self):
        report = build_summary_report([], run_date=RUN_DATE)

        assert report.total == 0
        assert report.subject == 'Promo triage 2026-03-14: 0 unsubscribed, 0 kept'
        assert 'Total processed: 0' in report.body
        assert 'No promotional emails were processed' in report.html_body

    def test_sections(self):
        results = [
            _result('shop@x.com', Decision.UNSUBSCRIBE, OutcomeStatus.LINK_VISITED),
            _result('deals@y.com', Decision.UNSUBSCRIBE, OutcomeStatus.MANUAL_NEEDED),
            _result('news@python.org', Decision.KEEP, OutcomeStatus.KEPT, reason='Python news'),
        ]

        report = build_summary_report(results, run_date=RUN_DATE)

        assert report.subject == 'Promo triage 2026-03-14: 2 unsubscribed, 1 kept'
        assert 'Unsubscribed (2):' in report.body
        assert 'shop@x.com | Subject from shop@x.com | Link visited' in report.body
        assert 'deals@y.com | Subject from deals@y.com | Manual needed' in report.body
        assert 'news@python.org | Subject from news@python.org | Python news' in report.body
        assert '<th align="left">Reason</th>' in report.html_body

    def test_html_escaped(self):
        results = [_result('Shop <shop@x.com>', Decision.UNSUBSCRIBE, OutcomeStatus.LINK_VISITED)]

        report = build_summary_report(results, run_date=RUN_DATE)

        assert 'Shop &lt;shop@x.com&gt;' in report.html_body

    def test_log_link(self):
        report = build_summary_report([], log_link='https://example.com/log', run_date=RUN_DATE)

        assert 'Full log: https://example.com/log' in report.body
        assert 'href="https://example.com/log"' in report.html_body

    def test_no_log_link(self):
        report = build_summary_report([], run_date=RUN_DATE)

        assert 'Full log' not in report.body


class TestSummaryReporter:
    """Report delivery."""

    def test_send(self, mail_store):
        report = SummaryReporter(mail_store, 'me@example.com').send([])

        assert mail_store.sent == [{
            'to': 'me@example.com',
            'subject': report.subject,
            'body': report.body,
            'html_body': report.html_body
        }]

    def test_no_recipient(self, mail_store):
        report = SummaryReporter(mail_store, '').send([])

        assert report.total == 0
        assert mail_store.sent == []

    def test_send_failure_logged(self, mail_store_factory):
        store = mail_store_factory(send_error=OSError('smtp down'))

        report = SummaryReporter(store, 'me@example.com').send([])

        assert report.total == 0
