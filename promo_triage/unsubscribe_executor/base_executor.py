"""
Base Unsubscribe Executor

Provides the workflow shared by the HTTP GET and email reply executors:
- Locator kind validation
- Dry-run mode support
- Outcome logging and counting

Executors never raise: every failure comes back as an unsuccessful result.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any

from ..triage.logging import TriageLogger
from ..triage.types import LocatorKind, UnsubscribeLocator


class BaseUnsubscribeExecutor(ABC):
    """
    Abstract base class for unsubscribe executors.

    Subclasses declare the locator kind they handle and implement the
    actual request.
    """

    def __init__(self, timeout: int = 10, dry_run: bool = False):
        """
        Initialize base executor.

        Args:
            timeout: Request timeout in seconds
            dry_run: If True, simulate without actual execution
        """
        self.timeout = timeout
        self.dry_run = dry_run
        self.logger = TriageLogger(f"executor.{self.method_name}")

    @property
    @abstractmethod
    def method_name(self) -> str:
        """Return the method name (http_get, email_reply)."""

    @property
    @abstractmethod
    def locator_kind(self) -> LocatorKind:
        """Return the locator kind this executor acts on."""

    def should_execute(self, locator: UnsubscribeLocator) -> Dict[str, Any]:
        """
        Check if the locator can be handled by this executor.

        Returns:
            Dict with 'should_execute' (bool) and 'reason' (str)
        """
        if locator.kind != self.locator_kind:
            return {
                'should_execute': False,
                'reason': f'Method mismatch: {locator.kind.value} (expected {self.locator_kind.value})'
            }

        if not locator.target:
            return {
                'should_execute': False,
                'reason': 'No unsubscribe link available'
            }

        return {
            'should_execute': True,
            'reason': 'All checks passed'
        }

    def execute(self, locator: UnsubscribeLocator) -> Dict[str, Any]:
        """
        Execute an unsubscribe request (template method).

        Workflow:
        1. Validate the locator
        2. Perform method-specific execution (dry-run or real)
        3. Log and count the outcome

        Returns:
            Dict with at minimum 'success' (bool)
        """
        check = self.should_execute(locator)
        if not check['should_execute']:
            return {
                'success': False,
                'error_message': check['reason']
            }

        try:
            result = self._perform_execution(locator)
        except Exception as e:
            result = {
                'success': False,
                'error_message': f'Unexpected error: {str(e)}'
            }

        self.logger.count_outcome(self.method_name, result.get('success', False))
        if result.get('success'):
            self.logger.info("Unsubscribe request succeeded", {
                'target': locator.target,
                'dry_run': result.get('dry_run', False),
                'status_code': result.get('status_code')
            })
        else:
            self.logger.warning("Unsubscribe request failed", {
                'target': locator.target,
                'status_code': result.get('status_code'),
                'error': result.get('error_message')
            })

        return result

    @abstractmethod
    def _perform_execution(self, locator: UnsubscribeLocator) -> Dict[str, Any]:
        """
        Perform method-specific unsubscribe execution.

        Returns:
            Dict with at minimum:
            - success (bool): Whether execution succeeded
            - dry_run (bool, optional): If this was a dry-run
            - status_code (int, optional): HTTP status
            - error_message (str, optional): Error details if failed
            - message (str, optional): Success/status message
        """
