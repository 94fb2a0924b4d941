"""
Email Reply Unsubscribe Executor

Handles mailto: unsubscribe targets by sending a boilerplate request email
through the account's mail store. The subject comes from the mailto URL's
``subject`` parameter when present.
"""

from typing import Dict, Any, Optional
from urllib.parse import urlparse, parse_qs, unquote

from .base_executor import BaseUnsubscribeExecutor
from ..triage.constants import (
    DEFAULT_UNSUBSCRIBE_BODY, DEFAULT_UNSUBSCRIBE_SUBJECT, METHOD_EMAIL
)
from ..triage.exceptions import ExecutionError
from ..triage.types import LocatorKind, UnsubscribeLocator


class EmailReplyExecutor(BaseUnsubscribeExecutor):
    """Execute unsubscribe requests via email reply method."""

    def __init__(self, mail_sender, dry_run: bool = False):
        """
        Initialize Email Reply executor.

        Args:
            mail_sender: Object with ``send_email(to, subject, body, html_body=None)``
            dry_run: If True, simulate without actual execution
        """
        super().__init__(dry_run=dry_run)
        self.mail_sender = mail_sender

    @property
    def method_name(self) -> str:
        return METHOD_EMAIL

    @property
    def locator_kind(self) -> LocatorKind:
        return LocatorKind.EMAIL

    def _parse_mailto(self, mailto_url: str) -> Dict[str, Optional[str]]:
        """
        Parse mailto URL to extract recipient, subject, and body.

        Raises:
            ExecutionError: If the URL has no usable recipient address
        """
        parsed = urlparse(mailto_url)
        if parsed.scheme.lower() != 'mailto':
            raise ExecutionError('Not a mailto URL', method=self.method_name, target=mailto_url)

        to_addr = unquote(parsed.path).strip()
        if '@' not in to_addr or to_addr.startswith('@') or to_addr.endswith('@'):
            raise ExecutionError('Malformed mailto address', method=self.method_name, target=mailto_url)

        query_params = {key.lower(): values for key, values in parse_qs(parsed.query).items()}

        subject = query_params['subject'][0] if 'subject' in query_params else None
        body = query_params['body'][0] if 'body' in query_params else None

        return {
            'to': to_addr,
            'subject': subject or None,
            'body': body or None
        }

    def _perform_execution(self, locator: UnsubscribeLocator) -> Dict[str, Any]:
        try:
            mailto_info = self._parse_mailto(locator.target)
        except ExecutionError as e:
            return {
                'success': False,
                'error_message': str(e)
            }

        subject = mailto_info['subject'] or DEFAULT_UNSUBSCRIBE_SUBJECT
        body = mailto_info['body'] or DEFAULT_UNSUBSCRIBE_BODY

        if self.dry_run:
            return {
                'success': True,
                'dry_run': True,
                'message': f'DRY RUN: Would send email to {mailto_info["to"]}'
            }

        try:
            self.mail_sender.send_email(mailto_info['to'], subject, body)
        except Exception as e:
            return {
                'success': False,
                'error_message': f'Send error: {str(e)}'
            }

        return {
            'success': True,
            'to': mailto_info['to'],
            'subject': subject,
            'message': f'Sent unsubscribe email to {mailto_info["to"]}'
        }
