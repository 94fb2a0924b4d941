"""
Common utilities for CLI commands.
"""

import getpass

from promo_triage.config.credentials import get_credential_store, MAIL_PASSWORD


def get_mail_password(email_address: str) -> str:
    """
    Get the mail password, checking the environment and secret store first.

    Args:
        email_address: Account the password is for (used in the prompt)

    Returns:
        Password (stored or prompted)
    """
    stored_password = get_credential_store().get_secret(MAIL_PASSWORD)
    if stored_password:
        return stored_password

    return getpass.getpass(f"Password for {email_address}: ")


def truncate(text: str, width: int) -> str:
    """Shorten text for table output."""
    text = text or ''
    return text if len(text) <= width else text[:width - 1] + '…'
