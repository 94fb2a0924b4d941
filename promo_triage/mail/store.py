"""
The mail store used by a triage run: IMAP for reading and archiving, SMTP
for sending.
"""

from typing import List, Optional

from .imap_client import GmailIMAPClient
from .smtp_sender import SmtpMailSender
from ..triage.types import MessageSummary


class GmailMailStore:
    """Fetch, archive and send through one Gmail account."""

    def __init__(self, imap_client: GmailIMAPClient, sender: SmtpMailSender, snippet_length: int = 500):
        self.imap_client = imap_client
        self.sender = sender
        self.snippet_length = snippet_length

    @classmethod
    def from_settings(cls, mail_settings: dict, password: str, snippet_length: int = 500) -> 'GmailMailStore':
        """Build a store from ``Config.get_mail_settings()``."""
        imap_client = GmailIMAPClient(
            server=mail_settings['imap_server'],
            port=mail_settings['imap_port'],
            timeout=mail_settings['timeout']
        )
        sender = SmtpMailSender(
            email_address=mail_settings['address'],
            email_password=password,
            smtp_host=mail_settings['smtp_server'],
            smtp_port=mail_settings['smtp_port'],
            timeout=mail_settings['timeout']
        )
        return cls(imap_client, sender, snippet_length)

    def connect(self):
        self.imap_client.connect(self.sender.email_address, self.sender.email_password)

    def disconnect(self):
        self.imap_client.disconnect()

    def fetch_promotional(self, limit: int) -> List[MessageSummary]:
        return self.imap_client.fetch_promotional(limit, self.snippet_length)

    def mark_processed(self, message: MessageSummary):
        """Take a logged message out of the unread promotions selection."""
        if message.uid:
            self.imap_client.mark_seen(message.uid)

    def archive_thread(self, thread_id: str):
        self.imap_client.archive_thread(thread_id)

    def send_email(self, to_addr: str, subject: str, body: str, html_body: Optional[str] = None):
        self.sender.send_email(to_addr, subject, body, html_body)

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
