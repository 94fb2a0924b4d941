"""
Gmail IMAP access: fetch unread promotional messages and archive threads.

Uses Gmail's IMAP extensions: ``X-GM-RAW`` for search, ``X-GM-MSGID`` and
``X-GM-THRID`` for stable identifiers, ``X-GM-LABELS`` for archiving.
Messages are fetched with ``BODY.PEEK[]`` so a run that is cut short leaves
the rest unread for the next one; each message is flagged ``\\Seen`` once its
result has been logged.
"""

import email
import imaplib
import re
from email import policy
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

from ..triage.exceptions import MailStoreError
from ..triage.logging import TriageLogger
from ..triage.types import MessageSummary

PROMOTIONS_QUERY = 'category:promotions is:unread'

_GM_MSGID_RE = re.compile(rb'X-GM-MSGID (\d+)')
_GM_THRID_RE = re.compile(rb'X-GM-THRID (\d+)')
_HEADER_END_RE = re.compile(rb'\r?\n\r?\n')
_WHITESPACE_RE = re.compile(r'\s+')


class GmailIMAPClient:
    """Manages the IMAP connection to a Gmail account."""

    def __init__(self, server: str = 'imap.gmail.com', port: int = 993, timeout: int = 30):
        self.server = server
        self.port = port
        self.timeout = timeout
        self.connection = None
        self.logger = TriageLogger("imap_client")

    def connect(self, username: str, password: str):
        """
        Connect to the IMAP server and authenticate.

        Raises:
            MailStoreError: If the connection or login fails
        """
        try:
            self.connection = imaplib.IMAP4_SSL(self.server, self.port, timeout=self.timeout)
            self.connection.login(username, password)
        except (imaplib.IMAP4.error, OSError) as e:
            self.connection = None
            raise MailStoreError(f"Failed to connect to IMAP server: {e}", operation='connect') from e

    def disconnect(self):
        """Close the IMAP connection."""
        if self.connection:
            try:
                self.connection.logout()
            except (imaplib.IMAP4.error, OSError) as e:
                self.logger.debug("Error during IMAP logout", {'error': str(e)})
            self.connection = None

    def _require_connection(self, operation: str):
        if not self.connection:
            raise MailStoreError("Not connected", operation=operation)
        return self.connection

    def _select_inbox(self, operation: str):
        connection = self._require_connection(operation)
        status, _ = connection.select('INBOX')
        if status != 'OK':
            raise MailStoreError("Cannot select INBOX", operation=operation)
        return connection

    def search_promotional(self, limit: Optional[int] = None) -> List[bytes]:
        """Return UIDs of unread promotional messages, newest first."""
        connection = self._select_inbox('search')

        status, data = connection.uid('SEARCH', 'X-GM-RAW', f'"{PROMOTIONS_QUERY}"')
        if status != 'OK':
            raise MailStoreError("Search failed", operation='search')

        uids = data[0].split() if data and data[0] else []
        uids.reverse()
        if limit:
            uids = uids[:limit]
        return uids

    def fetch_summary(self, uid: bytes, snippet_length: int = 500) -> Optional[MessageSummary]:
        """Fetch one message by UID and project it into a MessageSummary."""
        connection = self._require_connection('fetch')

        status, data = connection.uid('FETCH', uid, '(X-GM-MSGID X-GM-THRID BODY.PEEK[])')
        if status != 'OK' or not data or not isinstance(data[0], tuple):
            self.logger.warning("Could not fetch message", {'uid': uid.decode(errors='replace')})
            return None

        metadata, raw_message = data[0]
        return parse_message(metadata, raw_message, snippet_length, uid=uid.decode())

    def fetch_promotional(self, limit: int, snippet_length: int = 500) -> List[MessageSummary]:
        """Fetch up to ``limit`` unread promotional messages."""
        messages = []
        for uid in self.search_promotional(limit):
            summary = self.fetch_summary(uid, snippet_length)
            if summary is not None:
                messages.append(summary)
        return messages

    def mark_seen(self, uid: str):
        """Flag one message as read so the promotions search no longer matches it."""
        connection = self._select_inbox('mark_seen')

        status, _ = connection.uid('STORE', uid, '+FLAGS', '(\\Seen)')
        if status != 'OK':
            raise MailStoreError(f"Cannot mark message {uid} as read", operation='mark_seen')

    def archive_thread(self, thread_id: str):
        """
        Remove the Inbox label from every message of a thread.

        Args:
            thread_id: Thread identifier in hex, as produced by ``parse_message``
        """
        connection = self._select_inbox('archive')

        status, data = connection.uid('SEARCH', 'X-GM-THRID', str(int(thread_id, 16)))
        if status != 'OK':
            raise MailStoreError("Thread search failed", operation='archive')

        uids = data[0].split() if data and data[0] else []
        if not uids:
            return

        uid_set = b','.join(uids).decode()
        status, _ = connection.uid('STORE', uid_set, '-X-GM-LABELS', '(\\Inbox)')
        if status != 'OK':
            raise MailStoreError(f"Cannot archive thread {thread_id}", operation='archive')

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()


def parse_message(
    metadata: bytes,
    raw_message: bytes,
    snippet_length: int = 500,
    uid: str = ''
) -> MessageSummary:
    """Build a MessageSummary from an IMAP FETCH response."""
    msg = email.message_from_bytes(raw_message, policy=policy.default)

    msgid_match = _GM_MSGID_RE.search(metadata)
    thrid_match = _GM_THRID_RE.search(metadata)
    message_id = format(int(msgid_match.group(1)), 'x') if msgid_match else str(msg.get('Message-ID', ''))
    thread_id = format(int(thrid_match.group(1)), 'x') if thrid_match else message_id

    raw_headers = _HEADER_END_RE.split(raw_message, 1)[0].decode('utf-8', errors='replace')
    bodies = _extract_bodies(msg)

    return MessageSummary(
        sender=str(msg.get('From', '')),
        subject=str(msg.get('Subject', '')),
        snippet=make_snippet(bodies['text'], bodies['html'], snippet_length),
        raw_headers=raw_headers,
        message_id=message_id,
        thread_id=thread_id,
        html_body=bodies['html'],
        uid=uid
    )


def _extract_bodies(msg) -> Dict[str, Any]:
    """Extract the plain text and HTML parts of a message."""
    bodies = {'text': '', 'html': ''}
    for kind, subtype in (('text', 'plain'), ('html', 'html')):
        part = msg.get_body(preferencelist=(subtype,))
        if part is None:
            continue
        try:
            bodies[kind] = part.get_content()
        except (LookupError, UnicodeError):
            payload = part.get_payload(decode=True) or b''
            bodies[kind] = payload.decode('utf-8', errors='ignore')
    return bodies


def make_snippet(text: str, html: str, length: int = 500) -> str:
    """Plain text snippet, falling back to the HTML rendered as text."""
    if not text.strip() and html:
        text = BeautifulSoup(html, 'html.parser').get_text(' ')
    return _WHITESPACE_RE.sub(' ', text).strip()[:length]
