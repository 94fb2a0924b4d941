"""
Tests for the cascading unsubscribe executor and thread archiving.
"""

import pytest
import requests
from unittest.mock import Mock, patch

from promo_triage.triage.types import OutcomeStatus, UnsubscribeLocator
from promo_triage.unsubscribe_executor import UnsubscribeExecutor


class TestAttempt:
    """Locator dispatch."""

    def test_email_sent(self, mail_store, make_message):
        executor = UnsubscribeExecutor(mail_store)

        status = executor.execute(make_message(), UnsubscribeLocator.email('mailto:unsub@x.com'))

        assert status == OutcomeStatus.EMAIL_SENT
        assert mail_store.sent[0]['to'] == 'unsub@x.com'

    def test_email_failure_needs_manual(self, mail_store_factory, make_message):
        store = mail_store_factory(send_error=OSError('smtp down'))

        status = UnsubscribeExecutor(store).execute(
            make_message(), UnsubscribeLocator.email('mailto:unsub@x.com')
        )

        assert status == OutcomeStatus.MANUAL_NEEDED

    @patch('promo_triage.unsubscribe_executor.http_executor.requests.get')
    def test_link_visited(self, mock_get, mail_store, make_message):
        mock_get.return_value = Mock(status_code=200, text='ok')

        status = UnsubscribeExecutor(mail_store).execute(
            make_message(), UnsubscribeLocator.http('https://x.com/u')
        )

        assert status == OutcomeStatus.LINK_VISITED

    @patch('promo_triage.unsubscribe_executor.http_executor.requests.get')
    def test_http_failure_needs_manual(self, mock_get, mail_store, make_message):
        mock_get.side_effect = requests.exceptions.Timeout()

        status = UnsubscribeExecutor(mail_store).execute(
            make_message(), UnsubscribeLocator.http('https://x.com/u')
        )

        assert status == OutcomeStatus.MANUAL_NEEDED

    @pytest.mark.parametrize('locator', [
        UnsubscribeLocator.not_found(),
        UnsubscribeLocator.extraction_error('bad header'),
    ])
    @patch('promo_triage.unsubscribe_executor.http_executor.requests.get')
    def test_no_network_or_mail_for_unusable_locator(self, mock_get, locator, mail_store, make_message):
        status = UnsubscribeExecutor(mail_store).execute(make_message(), locator)

        assert status == OutcomeStatus.MANUAL_NEEDED
        mock_get.assert_not_called()
        assert mail_store.sent == []


class TestArchive:
    """The thread is archived regardless of outcome."""

    def test_archives_after_success(self, mail_store, make_message):
        UnsubscribeExecutor(mail_store).execute(
            make_message(thread_id='abc'), UnsubscribeLocator.email('mailto:unsub@x.com')
        )

        assert mail_store.archived == ['abc']

    def test_archives_after_manual_needed(self, mail_store, make_message):
        UnsubscribeExecutor(mail_store).execute(make_message(thread_id='abc'), UnsubscribeLocator.not_found())

        assert mail_store.archived == ['abc']

    def test_archive_failure_swallowed(self, mail_store_factory, make_message):
        store = mail_store_factory(archive_error=RuntimeError('label missing'))
        executor = UnsubscribeExecutor(store)

        status = executor.execute(make_message(), UnsubscribeLocator.email('mailto:unsub@x.com'))

        assert status == OutcomeStatus.EMAIL_SENT
        assert executor.archive(make_message()) is False

    def test_dry_run_neither_sends_nor_archives(self, mail_store, make_message):
        executor = UnsubscribeExecutor(mail_store, dry_run=True)

        status = executor.execute(make_message(), UnsubscribeLocator.email('mailto:unsub@x.com'))

        assert status == OutcomeStatus.EMAIL_SENT
        assert mail_store.sent == []
        assert mail_store.archived == []
