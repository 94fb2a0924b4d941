"""
Promotional message triage core.

This package provides the decision pipeline:
- Allow-list short-circuit for senders that are always kept
- Topic-based classification through a text-generation service
- Unsubscribe link extraction from headers and HTML body
- The decision engine combining them into one result per message
"""

from .types import (
    Decision, Confidence, LocatorKind, OutcomeStatus, MessageSummary,
    CorrectionEntry, ClassificationVerdict, ClassificationFailure,
    UnsubscribeLocator, ProcessingResult
)
from .allowlist import AllowListMatcher
from .extractors import UnsubscribeLinkExtractor
from .classifiers import MessageClassifier
from .engine import DecisionEngine

__all__ = [
    'Decision', 'Confidence', 'LocatorKind', 'OutcomeStatus', 'MessageSummary',
    'CorrectionEntry', 'ClassificationVerdict', 'ClassificationFailure',
    'UnsubscribeLocator', 'ProcessingResult',
    'AllowListMatcher', 'UnsubscribeLinkExtractor', 'MessageClassifier', 'DecisionEngine'
]
