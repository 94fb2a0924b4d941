"""
Configuration module.
"""

from .settings import Config, TriageSettings, load_triage_settings, load_config_from_env_file
from .credentials import CredentialStore, get_credential_store

__all__ = [
    'Config', 'TriageSettings', 'load_triage_settings', 'load_config_from_env_file',
    'CredentialStore', 'get_credential_store'
]
