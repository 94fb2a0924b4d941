"""
Triage run command.

Fetches unread promotional messages, decides and acts on each, appends the
results to the log and mails the run report.
"""

import click
from sqlalchemy.exc import SQLAlchemyError

from promo_triage.cli_session import get_cli_session_manager
from promo_triage.config import Config, load_triage_settings, get_credential_store
from promo_triage.config.credentials import GEMINI_API_KEY
from promo_triage.database.result_log import ResultLog
from promo_triage.mail import GmailMailStore
from promo_triage.reporting import SummaryReporter
from promo_triage.runner import TriageRunner
from promo_triage.triage import DecisionEngine, MessageClassifier
from promo_triage.triage.exceptions import MailStoreError
from promo_triage.unsubscribe_executor import UnsubscribeExecutor
from ..utils import get_mail_password, truncate


def build_runner(settings, mail_store, session, dry_run=False, send_report=True) -> TriageRunner:
    """Wire the triage components for one run."""
    executor = UnsubscribeExecutor(
        mail_store,
        timeout=settings.request_timeout,
        user_agent=settings.user_agent,
        dry_run=dry_run
    )
    engine = DecisionEngine(settings, MessageClassifier(settings), executor)
    reporter = SummaryReporter(mail_store, settings.report_recipient, settings.log_link) if send_report else None

    return TriageRunner(
        settings,
        mail_store,
        engine,
        result_log=ResultLog(session),
        reporter=reporter,
        dry_run=dry_run
    )


@click.command('run')
@click.option('--limit', type=int, help='Maximum number of messages to process')
@click.option('--dry-run', is_flag=True, help='Classify without unsubscribing, archiving or logging')
@click.option('--no-report', is_flag=True, help='Do not email the run summary')
def run(limit, dry_run, no_report):
    """
    Triage unread promotional emails.

    Example:
        python main.py run
        python main.py run --limit 5 --dry-run
    """
    session_manager = get_cli_session_manager()
    mail_settings = Config.get_mail_settings()

    if not mail_settings['address']:
        click.secho("✗ Error: MAIL_ADDRESS is not configured", fg='red')
        raise click.Abort()

    api_key = get_credential_store().get_secret(GEMINI_API_KEY) or ''
    try:
        settings = load_triage_settings(
            api_key=api_key,
            log_link=Config.get_log_link(session_manager.database_url)
        )
    except ValueError as e:
        click.secho(f"✗ Error: {e}", fg='red')
        raise click.Abort()

    if not settings.api_key:
        click.secho("! No Gemini API key configured; every non allow-listed message "
                    f"will use the fallback decision ({settings.failure_decision})", fg='yellow')

    try:
        password = get_mail_password(mail_settings['address'])
    except Exception as e:
        click.secho(f"✗ Error getting password: {e}", fg='red')
        raise click.Abort()

    mail_store = GmailMailStore.from_settings(mail_settings, password, settings.snippet_length)

    if dry_run:
        click.echo("[DRY RUN] No unsubscribe, archive or log write will happen")
    click.echo(f"\nTriaging promotional emails for {mail_settings['address']}...")

    try:
        with session_manager.get_session() as session, mail_store:
            runner = build_runner(settings, mail_store, session, dry_run=dry_run, send_report=not no_report)
            summary = runner.run(limit=limit)
    except MailStoreError as e:
        click.secho(f"✗ Mail store error: {e}", fg='red')
        raise click.Abort()
    except SQLAlchemyError as e:
        click.secho(f"✗ Result log error: {e}", fg='red')
        raise click.Abort()

    for result in summary.results:
        click.echo(
            f"  {result.decision.value:<11} {result.status.value:<13} "
            f"{truncate(result.sender, 40):<40} {truncate(result.subject, 50)}"
        )

    click.secho(f"\n✓ Run complete: {summary.processed} processed", fg='green')
    click.echo(f"  Unsubscribed: {summary.report.unsubscribed}")
    click.echo(f"  Kept: {summary.report.kept}")
    if summary.failures:
        click.secho(f"  Failed: {summary.failures}", fg='yellow')
    if summary.deferred:
        click.echo(f"  Deferred to next run: {summary.deferred}")
    for operation, counts in summary.operations.items():
        click.echo(f"  {operation}: {counts['success']} succeeded, {counts['failure']} failed")
