"""
HTTP GET Unsubscribe Executor

Visits an unsubscribe URL with a bounded timeout, following redirects.
Any final status in [200, 400) counts as visited.
"""

import requests
from typing import Dict, Any

from .base_executor import BaseUnsubscribeExecutor
from ..triage.constants import METHOD_HTTP_GET
from ..triage.types import LocatorKind, UnsubscribeLocator


class HttpGetExecutor(BaseUnsubscribeExecutor):
    """Execute unsubscribe requests via HTTP GET method."""

    def __init__(
        self,
        timeout: int = 10,
        user_agent: str = 'PromoTriage/1.0',
        dry_run: bool = False
    ):
        """
        Initialize HTTP GET executor.

        Args:
            timeout: Request timeout in seconds
            user_agent: User-Agent header for requests
            dry_run: If True, simulate without actual execution
        """
        super().__init__(timeout, dry_run)
        self.user_agent = user_agent

    @property
    def method_name(self) -> str:
        return METHOD_HTTP_GET

    @property
    def locator_kind(self) -> LocatorKind:
        return LocatorKind.HTTP

    def _perform_execution(self, locator: UnsubscribeLocator) -> Dict[str, Any]:
        if self.dry_run:
            return {
                'success': True,
                'dry_run': True,
                'message': f'DRY RUN: Would request {locator.target}'
            }

        try:
            response = requests.get(
                locator.target,
                headers={'User-Agent': self.user_agent},
                timeout=self.timeout,
                allow_redirects=True
            )

            success = 200 <= response.status_code < 400

            return {
                'success': success,
                'status_code': response.status_code,
                'message': 'Unsubscribe link visited' if success else response.text[:200],
                'error_message': None if success else f'HTTP {response.status_code}'
            }

        except requests.exceptions.Timeout:
            return {
                'success': False,
                'error_message': f'Request timed out after {self.timeout} seconds'
            }

        except requests.exceptions.RequestException as e:
            return {
                'success': False,
                'error_message': f'Connection error: {str(e)}'
            }
