"""
Tests for unsubscribe link extraction.

Covers header priority (HTTP over mailto), body scanning fallback, the
not-found and error locators, and determinism.
"""

import pytest
from unittest.mock import patch

from promo_triage.triage.extractors import UnsubscribeLinkExtractor
from promo_triage.triage.types import LocatorKind


@pytest.fixture
def extractor():
    return UnsubscribeLinkExtractor()


class TestHeaderExtraction:
    """List-Unsubscribe header parsing."""

    def test_http_preferred_over_mailto_even_when_mailto_first(self, extractor, make_message):
        message = make_message(raw_headers=(
            'From: news@shop.example.com\r\n'
            'List-Unsubscribe: <mailto:unsub@shop.example.com>, <https://shop.example.com/u?id=1>\r\n'
        ))

        locator = extractor.extract(message)

        assert locator.kind == LocatorKind.HTTP
        assert locator.target == 'https://shop.example.com/u?id=1'

    def test_mailto_only(self, extractor, make_message):
        message = make_message(raw_headers='List-Unsubscribe: <mailto:unsub@x.com?subject=Remove+me>\r\n')

        locator = extractor.extract(message)

        assert locator.kind == LocatorKind.EMAIL
        assert locator.target == 'mailto:unsub@x.com?subject=Remove+me'

    def test_header_key_is_case_insensitive(self, extractor, make_message):
        message = make_message(raw_headers='list-unsubscribe: <http://x.example.com/stop>\r\n')

        locator = extractor.extract(message)

        assert locator.kind == LocatorKind.HTTP
        assert locator.target == 'http://x.example.com/stop'

    def test_folded_header(self, extractor, make_message):
        message = make_message(raw_headers=(
            'Subject: Sale\r\n'
            'List-Unsubscribe: <mailto:unsub@x.com>,\r\n'
            ' <https://x.com/unsub/abc>\r\n'
            'To: me@example.com\r\n'
        ))

        locator = extractor.extract(message)

        assert locator.kind == LocatorKind.HTTP
        assert locator.target == 'https://x.com/unsub/abc'

    def test_header_without_bracketed_urls_falls_through_to_body(self, extractor, make_message):
        message = make_message(
            raw_headers='List-Unsubscribe: please reply STOP\r\n',
            html_body='<a href="https://x.com/unsubscribe">Unsubscribe</a>'
        )

        locator = extractor.extract(message)

        assert locator.kind == LocatorKind.HTTP
        assert locator.target == 'https://x.com/unsubscribe'


class TestBodyExtraction:
    """Anchor scanning when the header gives nothing."""

    def test_anchor_with_unsubscribe_in_url(self, extractor, make_message):
        message = make_message(html_body=(
            '<p>Hi</p>'
            '<a href="https://shop.example.com/products">Shop</a>'
            '<a href="https://shop.example.com/UnSubscribe?u=9">Opt out</a>'
        ))

        locator = extractor.extract(message)

        assert locator.kind == LocatorKind.HTTP
        assert locator.target == 'https://shop.example.com/UnSubscribe?u=9'

    def test_anchor_text_alone_is_not_enough(self, extractor, make_message):
        message = make_message(html_body='<a href="https://shop.example.com/prefs">Unsubscribe</a>')

        locator = extractor.extract(message)

        assert locator.kind == LocatorKind.NOT_FOUND

    def test_quoted_printable_soft_breaks_are_unwrapped(self, extractor, make_message):
        message = make_message(html_body='<a href=3D"https://x.com/unsub=\nscribe?id=3D42">x</a>')

        locator = extractor.extract(message)

        assert locator.kind == LocatorKind.HTTP
        assert locator.target == 'https://x.com/unsubscribe?id=42'

    def test_mailto_anchor(self, extractor, make_message):
        message = make_message(html_body='<a href="mailto:unsubscribe@x.com">stop</a>')

        locator = extractor.extract(message)

        assert locator.kind == LocatorKind.EMAIL


class TestNotFoundAndErrors:
    """Absence and failure never raise."""

    def test_nothing_found(self, extractor, make_message):
        locator = extractor.extract(make_message(html_body='<p>No links</p>'))

        assert locator.kind == LocatorKind.NOT_FOUND
        assert locator.to_cell() == 'Not found'

    def test_empty_message(self, extractor, make_message):
        locator = extractor.extract(make_message(raw_headers='', html_body=''))

        assert locator.kind == LocatorKind.NOT_FOUND

    def test_parser_failure_maps_to_error_locator(self, extractor, make_message):
        message = make_message(html_body='<a href="https://x.com/unsubscribe">x</a>')

        with patch('promo_triage.triage.extractors.BeautifulSoup', side_effect=RuntimeError('boom')):
            locator = extractor.extract(message)

        assert locator.kind == LocatorKind.ERROR
        assert 'boom' in locator.error
        assert locator.to_cell() == 'Error'

    def test_error_and_not_found_are_distinct(self, extractor, make_message):
        not_found = extractor.extract(make_message())
        with patch('promo_triage.triage.extractors.HeaderParser', side_effect=ValueError('bad')):
            error = extractor.extract(make_message())

        assert not_found.kind != error.kind

    def test_extraction_is_deterministic(self, extractor, make_message):
        message = make_message(
            raw_headers='List-Unsubscribe: <mailto:a@x.com>, <https://x.com/u>\r\n',
            html_body='<a href="https://x.com/unsubscribe">x</a>'
        )

        assert extractor.extract(message) == extractor.extract(message)
