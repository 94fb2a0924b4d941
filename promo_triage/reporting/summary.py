"""
Per-run summary report: what was unsubscribed, what was kept, and where the
full log lives.
"""

from dataclasses import dataclass
from datetime import datetime
from html import escape
from typing import List, Optional, Sequence

from ..triage.logging import TriageLogger
from ..triage.types import ProcessingResult


@dataclass(frozen=True)
class SummaryReport:
    subject: str
    body: str
    html_body: str
    total: int
    unsubscribed: int
    kept: int


def _html_table(headers: Sequence[str], rows: List[Sequence[str]]) -> str:
    head = ''.join(f'<th align="left">{escape(h)}</th>' for h in headers)
    body = ''.join(
        '<tr>' + ''.join(f'<td>{escape(cell)}</td>' for cell in row) + '</tr>'
        for row in rows
    )
    return f'<table border="1" cellpadding="4" cellspacing="0"><tr>{head}</tr>{body}</table>'


def build_summary_report(
    results: Sequence[ProcessingResult],
    log_link: str = '',
    run_date: Optional[datetime] = None
) -> SummaryReport:
    """
    Build the report for one run.

    Args:
        results: Results processed in this run, in processing order
        log_link: Where the full result log can be found
        run_date: Date shown in the subject (defaults to now)
    """
    run_date = run_date or datetime.now()
    unsubscribed = [r for r in results if not r.is_kept]
    kept = [r for r in results if r.is_kept]

    subject = (
        f"Promo triage {run_date:%Y-%m-%d}: "
        f"{len(unsubscribed)} unsubscribed, {len(kept)} kept"
    )

    if not results:
        text_lines = ["No promotional emails were processed in this run.", "Total processed: 0"]
        html_parts = ["<p>No promotional emails were processed in this run.</p>", "<p>Total processed: 0</p>"]
    else:
        unsub_rows = [[r.sender, r.subject, r.status.value] for r in unsubscribed]
        kept_rows = [[r.sender, r.subject, r.verdict.reason] for r in kept]

        text_lines = [f"Total processed: {len(results)}", "", f"Unsubscribed ({len(unsubscribed)}):"]
        text_lines += [f"  - {sender} | {subj} | {status}" for sender, subj, status in unsub_rows] or ["  (none)"]
        text_lines += ["", f"Kept ({len(kept)}):"]
        text_lines += [f"  - {sender} | {subj} | {reason}" for sender, subj, reason in kept_rows] or ["  (none)"]

        html_parts = [f"<p>Total processed: {len(results)}</p>", f"<h3>Unsubscribed ({len(unsubscribed)})</h3>"]
        html_parts.append(_html_table(('From', 'Subject', 'Status'), unsub_rows) if unsub_rows else "<p>(none)</p>")
        html_parts.append(f"<h3>Kept ({len(kept)})</h3>")
        html_parts.append(_html_table(('From', 'Subject', 'Reason'), kept_rows) if kept_rows else "<p>(none)</p>")

    if log_link:
        text_lines += ["", f"Full log: {log_link}"]
        html_parts.append(f'<p><a href="{escape(log_link, quote=True)}">View full log</a></p>')

    return SummaryReport(
        subject=subject,
        body='\n'.join(text_lines),
        html_body='\n'.join(html_parts),
        total=len(results),
        unsubscribed=len(unsubscribed),
        kept=len(kept)
    )


class SummaryReporter:
    """Build and deliver the run report through the mail store."""

    def __init__(self, mail_store, recipient: str, log_link: str = ''):
        self.mail_store = mail_store
        self.recipient = recipient
        self.log_link = log_link
        self.logger = TriageLogger("summary_reporter")

    def send(self, results: Sequence[ProcessingResult]) -> SummaryReport:
        """Send the report; delivery failures are logged, not raised."""
        report = build_summary_report(results, self.log_link)

        if not self.recipient:
            self.logger.warning("No report recipient configured, report not sent")
            return report

        try:
            self.mail_store.send_email(self.recipient, report.subject, report.body, report.html_body)
            self.logger.info("Summary report sent", {'recipient': self.recipient, 'total': report.total})
        except Exception as e:
            self.logger.error("Failed to send summary report", {'error': str(e)})

        return report
