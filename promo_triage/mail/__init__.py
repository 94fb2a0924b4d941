"""
Mail store access over IMAP and SMTP.
"""

from .imap_client import GmailIMAPClient
from .smtp_sender import SmtpMailSender
from .store import GmailMailStore

__all__ = ['GmailIMAPClient', 'SmtpMailSender', 'GmailMailStore']
