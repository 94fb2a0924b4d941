"""
Shared fixtures for the triage test suite.
"""

import pytest

from promo_triage.config.settings import TriageSettings
from promo_triage.database.models import create_database_engine, create_tables, get_session_maker
from promo_triage.triage.types import MessageSummary


class FakeMailStore:
    """In-memory mail store recording every side effect."""

    def __init__(self, messages=None, archive_error=None, send_error=None, mark_error=None):
        self.messages = list(messages or [])
        self.archive_error = archive_error
        self.send_error = send_error
        self.mark_error = mark_error
        self.archived = []
        self.sent = []
        self.processed = []
        self.fetch_limits = []

    def fetch_promotional(self, limit):
        """Unread messages only: anything marked processed is no longer selected."""
        self.fetch_limits.append(limit)
        unread = [m for m in self.messages if m.message_id not in self.processed]
        return unread[:limit]

    def mark_processed(self, message):
        if self.mark_error:
            raise self.mark_error
        self.processed.append(message.message_id)

    def archive_thread(self, thread_id):
        if self.archive_error:
            raise self.archive_error
        self.archived.append(thread_id)

    def send_email(self, to_addr, subject, body, html_body=None):
        if self.send_error:
            raise self.send_error
        self.sent.append({'to': to_addr, 'subject': subject, 'body': body, 'html_body': html_body})


@pytest.fixture
def session():
    """Create an in-memory database session for testing."""
    engine = create_database_engine('sqlite:///:memory:')
    create_tables(engine)
    SessionMaker = get_session_maker(engine)
    session = SessionMaker()
    yield session
    session.close()


@pytest.fixture
def settings():
    """Settings with an allow-list and no scheduling delays."""
    return TriageSettings(
        allow_list=('linkedin', 'GitHub'),
        topics=('python', 'travel deals'),
        api_key='test-key',
        min_interval_seconds=0,
        log_link='https://example.com/log'
    )


@pytest.fixture
def make_message():
    """Factory for MessageSummary values."""
    def _make(
        sender='Deals Weekly <news@deals.example.com>',
        subject='50% off everything',
        snippet='Huge savings this weekend only',
        raw_headers='From: news@deals.example.com\r\nSubject: 50% off everything\r\n',
        message_id='18c2a1b3f4d5e6a7',
        thread_id='18c2a1b3f4d5e6a0',
        html_body=''
    ):
        return MessageSummary(
            sender=sender,
            subject=subject,
            snippet=snippet,
            raw_headers=raw_headers,
            message_id=message_id,
            thread_id=thread_id,
            html_body=html_body
        )
    return _make


@pytest.fixture
def mail_store():
    return FakeMailStore()


@pytest.fixture
def mail_store_factory():
    """Build a FakeMailStore with custom messages or failures."""
    return FakeMailStore
