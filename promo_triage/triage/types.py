"""
Type-safe values flowing through the triage pipeline.

Decisions, confidences, locator kinds and statuses are enums; the strings
written to the result log are only produced when a value is rendered.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union


class Decision(str, Enum):
    """Keep the message or unsubscribe from its sender."""

    KEEP = 'KEEP'
    UNSUBSCRIBE = 'UNSUBSCRIBE'

    @classmethod
    def parse(cls, value) -> Optional['Decision']:
        """Normalize a free-form value to a decision, or None if unrecognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class Confidence(str, Enum):
    HIGH = 'high'
    MEDIUM = 'medium'
    LOW = 'low'


class LocatorKind(str, Enum):
    """How an unsubscribe locator can be acted upon."""

    EMAIL = 'email'
    HTTP = 'http'
    NOT_FOUND = 'not_found'
    ERROR = 'error'
    MESSAGE_LINK = 'message_link'


class OutcomeStatus(str, Enum):
    """Terminal status of one processed message."""

    EMAIL_SENT = 'Email sent'
    LINK_VISITED = 'Link visited'
    MANUAL_NEEDED = 'Manual needed'
    KEPT = 'Kept'


UNSUBSCRIBE_OUTCOMES = frozenset({
    OutcomeStatus.EMAIL_SENT,
    OutcomeStatus.LINK_VISITED,
    OutcomeStatus.MANUAL_NEEDED,
})


@dataclass(frozen=True)
class MessageSummary:
    """Read-only projection of one promotional mail message."""

    sender: str
    subject: str
    snippet: str
    raw_headers: str
    message_id: str
    thread_id: str
    html_body: str = ''
    uid: str = ''


@dataclass(frozen=True)
class CorrectionEntry:
    """A human override of a past automated decision."""

    sender: str
    original_decision: str
    corrected_decision: Decision


@dataclass(frozen=True)
class ClassificationVerdict:
    decision: Decision
    confidence: Confidence
    topic: str
    reason: str


@dataclass(frozen=True)
class ClassificationFailure:
    """Why the classifier could not produce a verdict."""

    error: str


ClassificationResult = Union[ClassificationVerdict, ClassificationFailure]


@dataclass(frozen=True)
class UnsubscribeLocator:
    """Discovered unsubscribe target, or an explicit absence."""

    kind: LocatorKind
    target: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def email(cls, url: str) -> 'UnsubscribeLocator':
        return cls(LocatorKind.EMAIL, url)

    @classmethod
    def http(cls, url: str) -> 'UnsubscribeLocator':
        return cls(LocatorKind.HTTP, url)

    @classmethod
    def not_found(cls) -> 'UnsubscribeLocator':
        return cls(LocatorKind.NOT_FOUND)

    @classmethod
    def extraction_error(cls, error: str) -> 'UnsubscribeLocator':
        return cls(LocatorKind.ERROR, error=error)

    @classmethod
    def message_link(cls, url: str) -> 'UnsubscribeLocator':
        return cls(LocatorKind.MESSAGE_LINK, url)

    @classmethod
    def from_url(cls, url: str) -> 'UnsubscribeLocator':
        """Type a raw URL by its scheme."""
        lowered = url.strip().lower()
        if lowered.startswith('mailto:'):
            return cls.email(url.strip())
        if lowered.startswith(('http://', 'https://')):
            return cls.http(url.strip())
        return cls.not_found()

    @property
    def is_actionable(self) -> bool:
        return self.kind in (LocatorKind.EMAIL, LocatorKind.HTTP)

    def to_cell(self) -> str:
        """Render the locator for the result log."""
        if self.kind == LocatorKind.NOT_FOUND:
            return 'Not found'
        if self.kind == LocatorKind.ERROR:
            return 'Error'
        return self.target or ''


@dataclass(frozen=True)
class ProcessingResult:
    """The record that leaves the triage core for one message."""

    timestamp: datetime
    sender: str
    subject: str
    verdict: ClassificationVerdict
    locator: UnsubscribeLocator
    status: OutcomeStatus
    message_id: str = ''
    correction: Optional[str] = field(default=None)

    def __post_init__(self):
        if self.verdict.decision == Decision.KEEP and self.status != OutcomeStatus.KEPT:
            raise ValueError(f"KEEP decision requires status Kept, got {self.status.value}")
        if self.verdict.decision == Decision.UNSUBSCRIBE and self.status not in UNSUBSCRIBE_OUTCOMES:
            raise ValueError(f"UNSUBSCRIBE decision cannot have status {self.status.value}")

    @property
    def decision(self) -> Decision:
        return self.verdict.decision

    @property
    def is_kept(self) -> bool:
        return self.status == OutcomeStatus.KEPT
