"""
Secret management commands.

Handles storing, removing, and listing the mail password and API key.
"""

import click

from promo_triage.config.credentials import get_credential_store, SECRET_ENV_VARS

SECRET_NAMES = sorted(SECRET_ENV_VARS)


@click.group()
def secret():
    """Secret management commands."""
    pass


@secret.command('store')
@click.argument('name', type=click.Choice(SECRET_NAMES, case_sensitive=False))
def store_secret(name):
    """
    Store a secret.

    Example:
        python main.py secret store mail_password
        python main.py secret store gemini_api_key
    """
    value = click.prompt('Value', hide_input=True, confirmation_prompt=True)

    store = get_credential_store()
    store.set_secret(name, value)

    click.secho(f"✓ Secret {name} stored successfully", fg='green')
    click.echo(f"Secrets are saved in: {store.store_path}")


@secret.command('remove')
@click.argument('name', type=click.Choice(SECRET_NAMES, case_sensitive=False))
@click.option('--force', '-f', is_flag=True, help='Skip confirmation prompt')
def remove_secret(name, force):
    """
    Remove a stored secret.

    Example:
        python main.py secret remove mail_password
    """
    store = get_credential_store()

    if not force:
        if not click.confirm(f"Remove secret {name}?"):
            click.echo("Cancelled.")
            raise click.Abort()

    if store.remove_secret(name):
        click.secho(f"✓ Secret {name} removed", fg='green')
    else:
        click.echo(f"No stored secret named {name}.")


@secret.command('list')
def list_secrets():
    """
    List stored secret names.

    Example:
        python main.py secret list
    """
    names = get_credential_store().list_secret_names()

    if not names:
        click.echo("No stored secrets.")
        return

    click.echo(f"\nStored secrets ({len(names)}):")
    for name in names:
        click.echo(f"  - {name}")
    click.echo()
