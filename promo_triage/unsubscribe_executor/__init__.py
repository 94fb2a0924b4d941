"""
Unsubscribe Executor Module

This module handles the actual execution of unsubscribe requests.
"""

from .http_executor import HttpGetExecutor
from .email_reply_executor import EmailReplyExecutor
from .cascade import UnsubscribeExecutor

__all__ = ['HttpGetExecutor', 'EmailReplyExecutor', 'UnsubscribeExecutor']
