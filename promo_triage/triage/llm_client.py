"""
HTTP client for the text-generation service (Gemini ``generateContent``).
"""

import requests
from typing import Any, Dict

from .exceptions import ClassificationError


class GeminiClient:
    """Send a prompt to Gemini and return the generated text."""

    def __init__(
        self,
        api_key: str,
        model: str = 'gemini-2.0-flash',
        api_url: str = 'https://generativelanguage.googleapis.com/v1beta/models',
        timeout: int = 30
    ):
        """
        Initialize the client.

        Args:
            api_key: Gemini API key
            model: Model name
            api_url: Base URL of the models endpoint
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.model = model
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self.api_url}/{self.model}:generateContent"

    def generate(self, prompt: str, temperature: float, max_output_tokens: int) -> str:
        """
        Generate text for a prompt.

        Raises:
            ClassificationError: On transport failure, non-2xx status or a
                response without text content
        """
        if not self.api_key:
            raise ClassificationError('No API key configured')

        payload = {
            'contents': [{'parts': [{'text': prompt}]}],
            'generationConfig': {
                'temperature': temperature,
                'maxOutputTokens': max_output_tokens
            }
        }

        try:
            response = requests.post(
                self.endpoint,
                headers={'x-goog-api-key': self.api_key, 'Content-Type': 'application/json'},
                json=payload,
                timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            raise ClassificationError(f'Request timed out after {self.timeout} seconds') from e
        except requests.exceptions.RequestException as e:
            raise ClassificationError(f'Connection error: {str(e)}') from e

        if not 200 <= response.status_code < 300:
            raise ClassificationError(
                f'Service returned an error: {response.text[:200]}',
                status_code=response.status_code
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ClassificationError('Response is not valid JSON',
                                      status_code=response.status_code) from e

        return self._extract_text(body)

    def _extract_text(self, body: Dict[str, Any]) -> str:
        """Pull the generated text out of a ``generateContent`` response."""
        try:
            parts = body['candidates'][0]['content']['parts']
            text = ''.join(part.get('text', '') for part in parts)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise ClassificationError('Response has no content') from e

        if not text.strip():
            raise ClassificationError('Response content is empty')

        return text
