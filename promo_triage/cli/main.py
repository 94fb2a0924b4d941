"""
Main CLI group for Promo Triage.

Integrates all commands into a single CLI application.
"""

import click

from promo_triage import __version__
from promo_triage.config import load_config_from_env_file
from promo_triage.triage.logging import configure_triage_logging
from .commands.admin import init
from .commands.run import run
from .commands.log import show_log, correct, list_corrections, export
from .commands.secret import secret


@click.group()
@click.version_option(version=__version__, prog_name='Promo Triage')
@click.option('--log-level', default='WARNING', show_default=True,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Structured log level')
@click.option('--log-file', type=click.Path(dir_okay=False), help='Also write logs to this file')
@click.option('--env-file', default='.env', show_default=True, help='Environment file to load')
def cli(log_level, log_file, env_file):
    """
    Promo Triage - Keep the promotions you care about, unsubscribe from the rest.

    Classifies unread promotional emails with an allow-list, a topic-based
    AI classifier and your past corrections, then unsubscribes and archives.
    """
    load_config_from_env_file(env_file)
    configure_triage_logging(
        level=log_level,
        output='both' if log_file else 'console',
        filename=log_file
    )


# Register command groups
cli.add_command(secret, name='secret')

# Register standalone commands
cli.add_command(init, name='init')
cli.add_command(run, name='run')
cli.add_command(show_log, name='log')
cli.add_command(correct, name='correct')
cli.add_command(list_corrections, name='corrections')
cli.add_command(export, name='export')


if __name__ == '__main__':
    cli()
