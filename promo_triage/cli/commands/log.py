"""
Result log commands: review decisions, record corrections, export.
"""

import click

from promo_triage.cli_session import get_cli_session_manager
from promo_triage.config import load_triage_settings
from promo_triage.database.result_log import ResultLog
from ..utils import truncate


@click.command('log')
@click.option('--limit', type=int, default=20, show_default=True, help='Number of rows to show')
def show_log(limit):
    """
    Show the most recent triage decisions.

    Example:
        python main.py log --limit 50
    """
    session_manager = get_cli_session_manager()

    with session_manager.get_session() as session:
        entries = ResultLog(session).recent(limit)

        if not entries:
            click.echo("The log is empty.")
            return

        click.echo(f"\n{'ID':>5}  {'Date':<16}  {'Decision':<11}  {'Status':<13}  {'Correction':<11}  From / Subject")
        for entry in entries:
            date = entry.date.strftime('%Y-%m-%d %H:%M') if entry.date else ''
            click.echo(
                f"{entry.id:>5}  {date:<16}  {entry.decision:<11}  {entry.status:<13}  "
                f"{entry.correction or '':<11}  {truncate(entry.sender, 40)} / {truncate(entry.subject, 40)}"
            )
        click.echo()


@click.command('correct')
@click.argument('entry_id', type=int)
@click.argument('decision', type=click.Choice(['keep', 'unsubscribe'], case_sensitive=False))
def correct(entry_id, decision):
    """
    Record a correction for a logged decision.

    Corrections are shown to the classifier in later runs.

    Example:
        python main.py correct 42 keep
    """
    session_manager = get_cli_session_manager()

    with session_manager.get_session() as session:
        entry = ResultLog(session).record_correction(entry_id, decision)
        if entry is None:
            click.secho(f"✗ Error: Log entry {entry_id} not found", fg='red')
            raise click.Abort()

        click.secho(f"✓ Recorded correction {entry.correction} for {entry.sender}", fg='green')
        click.echo(f"  Original decision: {entry.decision}")


@click.command('corrections')
@click.option('--limit', type=int, help='Window size (defaults to CORRECTION_WINDOW)')
def list_corrections(limit):
    """
    Show the corrections the classifier will see on the next run.

    Example:
        python main.py corrections
    """
    window = limit if limit is not None else load_triage_settings().correction_window
    session_manager = get_cli_session_manager()

    with session_manager.get_session() as session:
        corrections = ResultLog(session).load_corrections(window)

    if not corrections:
        click.echo("No corrections recorded.")
        return

    click.echo(f"\nCorrection window ({len(corrections)} of max {window}):")
    for entry in corrections:
        click.echo(f"  - {entry.sender}: {entry.original_decision} → {entry.corrected_decision.value}")
    click.echo()


@click.command('export')
@click.argument('path', type=click.Path(dir_okay=False, writable=True))
def export(path):
    """
    Export the whole log to a CSV file.

    Example:
        python main.py export triage_log.csv
    """
    session_manager = get_cli_session_manager()

    with session_manager.get_session() as session:
        try:
            count = ResultLog(session).export_csv(path)
        except OSError as e:
            click.secho(f"✗ Error writing {path}: {e}", fg='red')
            raise click.Abort()

    click.secho(f"✓ Exported {count} rows to {path}", fg='green')
