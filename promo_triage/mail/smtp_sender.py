"""
SMTP sending for unsubscribe requests and run reports.
"""

import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from ..triage.exceptions import MailStoreError


class SmtpMailSender:
    """Send mail from the account through SMTP with STARTTLS."""

    def __init__(
        self,
        email_address: str,
        email_password: str,
        smtp_host: str = 'smtp.gmail.com',
        smtp_port: int = 587,
        timeout: int = 30
    ):
        self.email_address = email_address
        self.email_password = email_password
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.timeout = timeout

    def compose_message(self, to_addr: str, subject: str, body: str, html_body: Optional[str] = None):
        """Compose a plain text message, or multipart/alternative with HTML."""
        if html_body:
            msg = MIMEMultipart('alternative')
            msg.attach(MIMEText(body, 'plain', 'utf-8'))
            msg.attach(MIMEText(html_body, 'html', 'utf-8'))
        else:
            msg = MIMEText(body, 'plain', 'utf-8')

        msg['From'] = self.email_address
        msg['To'] = to_addr
        msg['Subject'] = subject
        return msg

    def send_email(self, to_addr: str, subject: str, body: str, html_body: Optional[str] = None):
        """
        Send an email.

        Raises:
            MailStoreError: If credentials are missing or SMTP fails
        """
        if not self.email_address or not self.email_password:
            raise MailStoreError('Email credentials not provided', operation='send')

        msg = self.compose_message(to_addr, subject, body, html_body)

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                server.starttls()
                server.login(self.email_address, self.email_password)
                server.send_message(msg)
        except smtplib.SMTPAuthenticationError as e:
            raise MailStoreError(f'SMTP authentication error: {e}', operation='send') from e
        except (smtplib.SMTPException, OSError) as e:
            raise MailStoreError(f'SMTP error: {e}', operation='send') from e
