"""
Cascading unsubscribe execution.

Turns an UNSUBSCRIBE decision and its locator into one terminal outcome:

    email locator  -> send request email -> EMAIL_SENT     | MANUAL_NEEDED
    http locator   -> GET the URL        -> LINK_VISITED   | MANUAL_NEEDED
    anything else  -> no action          -> MANUAL_NEEDED

The source thread is archived after the attempt, whatever the outcome.
Archive failures are logged and swallowed.
"""

from typing import Optional

from .email_reply_executor import EmailReplyExecutor
from .http_executor import HttpGetExecutor
from ..triage.logging import TriageLogger
from ..triage.types import LocatorKind, MessageSummary, OutcomeStatus, UnsubscribeLocator


class UnsubscribeExecutor:
    """Dispatch a locator to the matching executor and archive the thread."""

    def __init__(
        self,
        mail_store,
        http_executor: Optional[HttpGetExecutor] = None,
        email_executor: Optional[EmailReplyExecutor] = None,
        timeout: int = 10,
        user_agent: str = 'PromoTriage/1.0',
        dry_run: bool = False
    ):
        """
        Args:
            mail_store: Object with ``send_email`` and ``archive_thread``
            http_executor: Executor for HTTP locators (built if omitted)
            email_executor: Executor for mailto locators (built if omitted)
            timeout: HTTP timeout in seconds for the default executor
            user_agent: User-Agent for the default HTTP executor
            dry_run: Simulate actions and skip archiving
        """
        self.mail_store = mail_store
        self.dry_run = dry_run
        self.http_executor = http_executor or HttpGetExecutor(
            timeout=timeout, user_agent=user_agent, dry_run=dry_run
        )
        self.email_executor = email_executor or EmailReplyExecutor(mail_store, dry_run=dry_run)
        self.logger = TriageLogger("unsubscribe_executor")

    def attempt(self, locator: UnsubscribeLocator) -> OutcomeStatus:
        """Attempt the unsubscribe action for a locator, without archiving."""
        if locator.kind == LocatorKind.EMAIL:
            result = self.email_executor.execute(locator)
            return OutcomeStatus.EMAIL_SENT if result.get('success') else OutcomeStatus.MANUAL_NEEDED

        if locator.kind == LocatorKind.HTTP:
            result = self.http_executor.execute(locator)
            return OutcomeStatus.LINK_VISITED if result.get('success') else OutcomeStatus.MANUAL_NEEDED

        self.logger.debug("No actionable unsubscribe locator", {'kind': locator.kind.value})
        return OutcomeStatus.MANUAL_NEEDED

    def execute(self, message: MessageSummary, locator: UnsubscribeLocator) -> OutcomeStatus:
        """
        Attempt to unsubscribe, then archive the message's thread.

        Returns:
            EMAIL_SENT, LINK_VISITED or MANUAL_NEEDED
        """
        status = self.attempt(locator)
        self.archive(message)
        return status

    def archive(self, message: MessageSummary) -> bool:
        """Archive the message's thread; failures are logged, never raised."""
        if self.dry_run:
            self.logger.info("DRY RUN: Would archive thread", {'thread_id': message.thread_id})
            return False

        try:
            self.mail_store.archive_thread(message.thread_id)
            return True
        except Exception as e:
            self.logger.warning("Failed to archive thread", {
                'thread_id': message.thread_id,
                'error': str(e)
            })
            return False
