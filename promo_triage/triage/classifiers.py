"""
Topic-based classification of promotional messages.

The classifier builds a prompt from the user's topic interests, the recent
human corrections and the message itself, asks the text-generation service
for a JSON verdict, and normalizes whatever comes back. Any failure is
turned into the configured fallback verdict; nothing is raised to callers.
"""

import json
from typing import Any, Dict, Optional, Sequence

from .constants import FALLBACK_REASONS, FALLBACK_TOPIC
from .exceptions import ClassificationError
from .llm_client import GeminiClient
from .logging import TriageLogger
from .types import (
    ClassificationFailure, ClassificationResult, ClassificationVerdict,
    Confidence, CorrectionEntry, Decision, MessageSummary
)
from ..config.settings import TriageSettings

PROMPT_TEMPLATE = """You triage promotional emails for a user. Decide whether the user wants to KEEP receiving emails from this sender or UNSUBSCRIBE.

The user is interested in these topics:
{topics}
{corrections}
Email:
From: {sender}
Subject: {subject}
Snippet: {snippet}

Reply with a single JSON object and nothing else:
{{"decision": "KEEP" or "UNSUBSCRIBE", "confidence": "high" or "medium" or "low", "topic": "short topic label", "reason": "one short sentence"}}"""


def build_prompt(
    message: MessageSummary,
    corrections: Sequence[CorrectionEntry],
    topics: Sequence[str],
    correction_window: int = 20,
    snippet_length: int = 300
) -> str:
    """
    Build the classification prompt for one message.

    Only the last ``correction_window`` corrections are included.
    """
    topic_lines = '\n'.join(f'- {topic}' for topic in topics) or '- (none specified)'

    recent = list(corrections)[-correction_window:] if correction_window > 0 else []
    corrections_block = ''
    if recent:
        lines = '\n'.join(
            f'- {entry.sender} → {entry.corrected_decision.value}' for entry in recent
        )
        corrections_block = f'\nPast corrections by the user (follow these preferences):\n{lines}\n'

    return PROMPT_TEMPLATE.format(
        topics=topic_lines,
        corrections=corrections_block,
        sender=message.sender,
        subject=message.subject,
        snippet=(message.snippet or '')[:snippet_length]
    )


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Return the first complete JSON object found anywhere in the text."""
    decoder = json.JSONDecoder()
    start = text.find('{')
    while start != -1:
        try:
            value, _ = decoder.raw_decode(text, start)
        except ValueError:
            value = None
        if isinstance(value, dict):
            return value
        start = text.find('{', start + 1)
    return None


def parse_classification(text: str) -> ClassificationResult:
    """
    Parse service output into a verdict or a failure.

    Missing or unrecognized fields are defaulted: decision to UNSUBSCRIBE,
    confidence to medium, topic to "unknown", reason to an empty string.
    """
    payload = extract_json_object(text or '')
    if payload is None:
        return ClassificationFailure('No JSON object in response')

    decision = Decision.parse(payload.get('decision')) or Decision.UNSUBSCRIBE

    confidence_value = payload.get('confidence')
    try:
        confidence = Confidence(str(confidence_value).strip().lower())
    except ValueError:
        confidence = Confidence.MEDIUM

    topic = payload.get('topic')
    reason = payload.get('reason')

    return ClassificationVerdict(
        decision=decision,
        confidence=confidence,
        topic=str(topic) if topic else FALLBACK_TOPIC,
        reason=str(reason) if reason else ''
    )


def fallback_verdict(failure_decision: Decision = Decision.UNSUBSCRIBE) -> ClassificationVerdict:
    """The fixed verdict used whenever classification fails."""
    return ClassificationVerdict(
        decision=failure_decision,
        confidence=Confidence.LOW,
        topic=FALLBACK_TOPIC,
        reason=FALLBACK_REASONS[failure_decision.value]
    )


def normalize_result(
    result: ClassificationResult,
    failure_decision: Decision = Decision.UNSUBSCRIBE
) -> ClassificationVerdict:
    """Map a tagged classification result to a verdict."""
    if isinstance(result, ClassificationVerdict):
        return result
    return fallback_verdict(failure_decision)


class MessageClassifier:
    """Classify messages through the text-generation service."""

    def __init__(self, settings: TriageSettings, client: Optional[GeminiClient] = None):
        self.settings = settings
        self.client = client or GeminiClient(
            api_key=settings.api_key,
            model=settings.model,
            api_url=settings.api_url,
            timeout=settings.classifier_timeout
        )
        self.failure_decision = Decision(settings.failure_decision)
        self.logger = TriageLogger("classifier")

    def classify_result(
        self,
        message: MessageSummary,
        corrections: Sequence[CorrectionEntry] = ()
    ) -> ClassificationResult:
        """Classify a message, returning a verdict or a failure."""
        prompt = build_prompt(
            message,
            corrections,
            self.settings.topics,
            correction_window=self.settings.correction_window,
            snippet_length=self.settings.prompt_snippet_length
        )

        try:
            text = self.client.generate(
                prompt,
                temperature=self.settings.temperature,
                max_output_tokens=self.settings.max_output_tokens
            )
        except ClassificationError as e:
            return ClassificationFailure(str(e))
        except Exception as e:
            return ClassificationFailure(f'Unexpected error: {str(e)}')

        return parse_classification(text)

    def classify(
        self,
        message: MessageSummary,
        corrections: Sequence[CorrectionEntry] = ()
    ) -> ClassificationVerdict:
        """Classify a message; failures yield the fallback verdict."""
        result = self.classify_result(message, corrections)

        if isinstance(result, ClassificationFailure):
            self.logger.warning("Classification failed, using fallback verdict", {
                'message_id': message.message_id,
                'error': result.error,
                'fallback_decision': self.failure_decision.value
            })
            self.logger.count_outcome('classify', success=False)
        else:
            self.logger.debug("Message classified", {
                'message_id': message.message_id,
                'decision': result.decision.value,
                'confidence': result.confidence.value,
                'topic': result.topic
            })
            self.logger.count_outcome('classify', success=True)

        return normalize_result(result, self.failure_decision)
