"""
Unsubscribe link extraction from message headers and HTML body.

Priority, first match wins:
- List-Unsubscribe header (RFC 2369): an HTTP(S) target beats a mailto target
- Anchors in the HTML body whose URL mentions "unsubscribe"
- Not found

Parsing failures are reported as an error locator, never raised.
"""

from email.parser import HeaderParser
from typing import List, Optional

from bs4 import BeautifulSoup

from .constants import (
    UNSUBSCRIBE_HEADER, UNSUBSCRIBE_KEYWORD, HEADER_URL_PATTERN, SOFT_LINE_BREAK_PATTERN
)
from .exceptions import ExtractionError
from .logging import TriageLogger
from .types import MessageSummary, UnsubscribeLocator


class UnsubscribeLinkExtractor:
    """Discover the unsubscribe locator of a message."""

    def __init__(self):
        self.header_url_pattern = HEADER_URL_PATTERN
        self.logger = TriageLogger("link_extractor")

    def extract(self, message: MessageSummary) -> UnsubscribeLocator:
        """
        Find the best unsubscribe locator for a message.

        Args:
            message: Message to inspect

        Returns:
            HTTP or email locator, a not-found locator, or an error locator
        """
        try:
            header_locator = self.extract_from_headers(message.raw_headers)
            if header_locator is not None:
                return header_locator

            body_url = self.extract_from_body(message.html_body)
            if body_url is not None:
                return UnsubscribeLocator.from_url(body_url)

            return UnsubscribeLocator.not_found()

        except Exception as e:
            error = e if isinstance(e, ExtractionError) else ExtractionError(
                str(e), {'message_id': message.message_id}
            )
            self.logger.warning("Unsubscribe link extraction failed", {
                'message_id': message.message_id,
                'error': str(error)
            })
            return UnsubscribeLocator.extraction_error(str(error))

    def extract_from_headers(self, raw_headers: Optional[str]) -> Optional[UnsubscribeLocator]:
        """Pick the header's best candidate: HTTP if present, else mailto."""
        value = self._get_unsubscribe_header(raw_headers)
        if not value:
            return None

        candidates = self._parse_header_urls(value)
        for candidate in candidates:
            if candidate.lower().startswith(('http://', 'https://')):
                return UnsubscribeLocator.http(candidate)
        for candidate in candidates:
            if candidate.lower().startswith('mailto:'):
                return UnsubscribeLocator.email(candidate)

        return None

    def _get_unsubscribe_header(self, raw_headers: Optional[str]) -> str:
        if not raw_headers:
            return ''
        try:
            headers = HeaderParser().parsestr(raw_headers.lstrip('\r\n'), headersonly=True)
            value = headers.get(UNSUBSCRIBE_HEADER)
        except Exception as e:
            raise ExtractionError(f"Malformed header block: {e}") from e

        if value is None:
            return ''
        # Unfold continuation lines
        return ' '.join(str(value).split())

    def _parse_header_urls(self, value: str) -> List[str]:
        """Parse header format: <url1>, <url2>, ..."""
        urls = [match.strip() for match in self.header_url_pattern.findall(value) if match.strip()]
        return list(dict.fromkeys(urls))

    def extract_from_body(self, html_content: Optional[str]) -> Optional[str]:
        """Return the first anchor URL containing the unsubscribe keyword."""
        if not html_content:
            return None

        soup = BeautifulSoup(self._unwrap_quoted_printable_lines(html_content), 'html.parser')
        for a_tag in soup.find_all('a', href=True):
            href = a_tag['href'].strip()
            if href and UNSUBSCRIBE_KEYWORD in href.lower():
                return href

        return None

    def _unwrap_quoted_printable_lines(self, text: str) -> str:
        """
        Handle quoted-printable soft line breaks in raw body content.

        A line ending with '=' continues on the next line, which splits long
        URLs; ``=3D`` is the encoded '='.
        """
        text = SOFT_LINE_BREAK_PATTERN.sub('', text)
        return text.replace('=3D', '=')
