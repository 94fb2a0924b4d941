"""
Secret storage for the mail account password and the classifier API key.

Secrets are looked up in the environment first, then in a JSON file kept
with owner-only permissions.
"""

import json
import os
from pathlib import Path
from typing import Optional, Dict, List

MAIL_PASSWORD = 'mail_password'
GEMINI_API_KEY = 'gemini_api_key'

# Environment variables that override stored secrets
SECRET_ENV_VARS = {
    MAIL_PASSWORD: 'MAIL_PASSWORD',
    GEMINI_API_KEY: 'GEMINI_API_KEY',
}


class CredentialStore:
    """Manages stored secrets keyed by name."""

    def __init__(self, store_path: Optional[Path] = None):
        """
        Initialize credential store.

        Args:
            store_path: Path to the JSON file storing secrets.
                       If None, secrets are kept in memory only.
        """
        self.store_path = store_path
        self._secrets: Dict[str, str] = {}
        self._load_secrets()

    def _load_secrets(self):
        """Load secrets from disk if the file exists."""
        if self.store_path and self.store_path.exists():
            try:
                with open(self.store_path, 'r') as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        self._secrets = data
                    else:
                        self._secrets = {}
            except (json.JSONDecodeError, IOError):
                # Corrupted or unreadable file, start fresh
                self._secrets = {}

    def _save_secrets(self):
        """Save secrets to disk."""
        if not self.store_path:
            return

        self.store_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.store_path, 'w') as f:
            json.dump(self._secrets, f, indent=2)

        # Owner read/write only
        os.chmod(self.store_path, 0o600)

    def get_secret(self, name: str) -> Optional[str]:
        """
        Get a secret by name.

        The matching environment variable, if set, wins over the stored value.

        Args:
            name: Secret name (e.g. ``mail_password``)

        Returns:
            Secret value if found, None otherwise
        """
        name = name.lower()
        env_var = SECRET_ENV_VARS.get(name)
        if env_var and os.getenv(env_var):
            return os.getenv(env_var)
        return self._secrets.get(name)

    def set_secret(self, name: str, value: str):
        """Store a secret under the given name."""
        self._secrets[name.lower()] = value
        self._save_secrets()

    def remove_secret(self, name: str) -> bool:
        """
        Remove a stored secret.

        Returns:
            True if the secret was removed, False if it didn't exist
        """
        name = name.lower()
        if name in self._secrets:
            del self._secrets[name]
            self._save_secrets()
            return True
        return False

    def list_secret_names(self) -> List[str]:
        """Get the sorted names of stored secrets."""
        return sorted(self._secrets.keys())

    def has_secret(self, name: str) -> bool:
        """Check if a secret is stored (environment overrides not considered)."""
        return name.lower() in self._secrets


# Global credential store instance
_credential_store = None


def get_credential_store(store_path: Optional[Path] = None) -> CredentialStore:
    """
    Get the global credential store instance.

    Args:
        store_path: Path to the secrets file. If None and no instance exists,
                   the default from config is used.
    """
    global _credential_store

    if _credential_store is None:
        if store_path is None:
            # Import here to avoid circular dependency
            from .settings import Config
            store_path = Config.get_secrets_store_path()

        _credential_store = CredentialStore(store_path)

    return _credential_store
