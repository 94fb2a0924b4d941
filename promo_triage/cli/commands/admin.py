"""
Admin commands.

Handles result log initialization.
"""

import click

from promo_triage.database import init_database


@click.command('init')
def init():
    """
    Initialize the result log database.

    Example:
        python main.py init
    """
    try:
        db_url = init_database()
        click.secho("✓ Database initialized successfully", fg='green')
        click.echo(f"Database location: {db_url}")
    except Exception as e:
        click.secho(f"✗ Error initializing database: {e}", fg='red')
        raise click.Abort()
