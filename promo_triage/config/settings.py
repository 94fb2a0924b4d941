"""
Configuration settings for the promotional inbox triage tool.

Environment-level settings live on ``Config``. Everything the triage core
needs is frozen into a ``TriageSettings`` value by ``load_triage_settings``
and handed to the components at construction time.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple

DEFAULT_TOPICS = (
    'software engineering',
    'personal finance',
    'travel deals',
    'books',
)

DEFAULT_GEMINI_API_URL = 'https://generativelanguage.googleapis.com/v1beta/models'
DEFAULT_MESSAGE_LINK_TEMPLATE = 'https://mail.google.com/mail/u/0/#inbox/{message_id}'


class Config:
    """Configuration settings."""

    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///triage_log.db')

    @classmethod
    def get_mail_settings(cls) -> Dict[str, Any]:
        """Get IMAP/SMTP settings for the mail account."""
        return {
            'address': os.getenv('MAIL_ADDRESS', ''),
            'imap_server': os.getenv('IMAP_SERVER', 'imap.gmail.com'),
            'imap_port': int(os.getenv('IMAP_PORT', '993')),
            'smtp_server': os.getenv('SMTP_SERVER', 'smtp.gmail.com'),
            'smtp_port': int(os.getenv('SMTP_PORT', '587')),
            'timeout': int(os.getenv('MAIL_TIMEOUT', '30')),
        }

    @classmethod
    def get_data_dir(cls) -> Path:
        """Get the data directory for storing the log database and secrets."""
        data_dir = Path(os.getenv('DATA_DIR', Path.cwd() / 'data'))
        data_dir.mkdir(exist_ok=True)
        return data_dir

    @classmethod
    def get_database_path(cls) -> str:
        """Get the full database URL, resolving relative SQLite paths."""
        database_url = os.getenv('DATABASE_URL', cls.DATABASE_URL)
        if database_url.startswith('sqlite:///'):
            db_file = database_url[10:]  # Remove 'sqlite:///'
            if not os.path.isabs(db_file):
                db_path = cls.get_data_dir() / db_file
                return f"sqlite:///{db_path}"
        return database_url

    @classmethod
    def get_log_link(cls, database_url: str = '') -> str:
        """Where the report points readers for the full log."""
        return os.getenv('LOG_LINK') or database_url or cls.get_database_path()

    @classmethod
    def get_secrets_store_path(cls) -> Path:
        """Get the path to the secrets store file."""
        store_path = os.getenv('SECRETS_STORE_PATH', 'secrets.json')

        # Expand {$DATA_DIR} variable if present
        if '{$DATA_DIR}' in store_path:
            store_path = store_path.replace('{$DATA_DIR}', str(cls.get_data_dir()))

        path = Path(store_path)
        if not path.is_absolute():
            path = cls.get_data_dir() / path

        return path


@dataclass(frozen=True)
class TriageSettings:
    """Immutable settings shared by the decision engine, classifier and executor."""

    allow_list: Tuple[str, ...] = ()
    topics: Tuple[str, ...] = DEFAULT_TOPICS

    # Classifier
    api_key: str = ''
    model: str = 'gemini-2.0-flash'
    api_url: str = DEFAULT_GEMINI_API_URL
    temperature: float = 0.1
    max_output_tokens: int = 200
    classifier_timeout: int = 30
    correction_window: int = 20
    prompt_snippet_length: int = 300
    failure_decision: str = 'UNSUBSCRIBE'

    # Unsubscribe execution
    request_timeout: int = 10
    user_agent: str = 'PromoTriage/1.0'

    # Scheduling policy
    max_items_per_run: int = 20
    min_interval_seconds: float = 6.0
    max_runtime_seconds: float = 300.0

    # Fetching and reporting
    snippet_length: int = 500
    message_link_template: str = DEFAULT_MESSAGE_LINK_TEMPLATE
    report_recipient: str = ''
    log_link: str = ''


def _split_list(value: str) -> Tuple[str, ...]:
    """Split a comma separated setting into a tuple of stripped, non-empty items."""
    return tuple(item.strip() for item in value.split(',') if item.strip())


def load_triage_settings(**overrides) -> TriageSettings:
    """
    Build ``TriageSettings`` from the environment.

    Args:
        **overrides: Field values that take precedence over the environment

    Returns:
        Frozen settings value
    """
    topics = _split_list(os.getenv('TRIAGE_TOPICS', '')) or DEFAULT_TOPICS

    values = {
        'allow_list': _split_list(os.getenv('TRIAGE_ALLOW_LIST', '')),
        'topics': topics,
        'api_key': os.getenv('GEMINI_API_KEY', ''),
        'model': os.getenv('GEMINI_MODEL', 'gemini-2.0-flash'),
        'api_url': os.getenv('GEMINI_API_URL', DEFAULT_GEMINI_API_URL),
        'temperature': float(os.getenv('CLASSIFIER_TEMPERATURE', '0.1')),
        'max_output_tokens': int(os.getenv('CLASSIFIER_MAX_TOKENS', '200')),
        'classifier_timeout': int(os.getenv('CLASSIFIER_TIMEOUT', '30')),
        'correction_window': int(os.getenv('CORRECTION_WINDOW', '20')),
        'prompt_snippet_length': int(os.getenv('PROMPT_SNIPPET_LENGTH', '300')),
        'failure_decision': os.getenv('CLASSIFIER_FAILURE_DECISION', 'UNSUBSCRIBE').strip().upper(),
        'request_timeout': int(os.getenv('REQUEST_TIMEOUT', '10')),
        'max_items_per_run': int(os.getenv('MAX_ITEMS_PER_RUN', '20')),
        'min_interval_seconds': float(os.getenv('MIN_INTERVAL_SECONDS', '6.0')),
        'max_runtime_seconds': float(os.getenv('MAX_RUNTIME_SECONDS', '300')),
        'snippet_length': int(os.getenv('SNIPPET_LENGTH', '500')),
        'message_link_template': os.getenv('MESSAGE_LINK_TEMPLATE', DEFAULT_MESSAGE_LINK_TEMPLATE),
        'report_recipient': os.getenv('REPORT_RECIPIENT', os.getenv('MAIL_ADDRESS', '')),
        'log_link': os.getenv('LOG_LINK', ''),
    }
    values.update(overrides)

    if values['failure_decision'] not in ('KEEP', 'UNSUBSCRIBE'):
        raise ValueError(
            f"CLASSIFIER_FAILURE_DECISION must be KEEP or UNSUBSCRIBE, "
            f"got {values['failure_decision']!r}"
        )

    return TriageSettings(**values)


def load_config_from_env_file(env_file: str = '.env'):
    """Load configuration from environment file."""
    env_path = Path(env_file)
    if env_path.exists():
        from dotenv import load_dotenv
        load_dotenv(env_path)
