"""
Decision engine: one authoritative result per message.

Allow-listed senders are kept without calling the classifier. Everyone else
is classified, and UNSUBSCRIBE verdicts go through the unsubscribe executor.
The locator is always extracted so it can be logged for KEEP results too.
"""

from datetime import datetime
from typing import Callable, Optional, Sequence

from .allowlist import AllowListMatcher
from .classifiers import MessageClassifier
from .extractors import UnsubscribeLinkExtractor
from .logging import TriageLogger
from .types import (
    ClassificationVerdict, CorrectionEntry, Decision, MessageSummary,
    OutcomeStatus, ProcessingResult, UnsubscribeLocator
)
from ..config.settings import TriageSettings


class DecisionEngine:
    """Combine allow-list, classifier and executor into a ProcessingResult."""

    def __init__(
        self,
        settings: TriageSettings,
        classifier: MessageClassifier,
        executor,
        extractor: Optional[UnsubscribeLinkExtractor] = None,
        clock: Callable[[], datetime] = datetime.now
    ):
        """
        Args:
            settings: Immutable triage settings (allow-list, link template)
            classifier: Classifier used for non allow-listed senders
            executor: Object with ``execute(message, locator) -> OutcomeStatus``
            extractor: Link extractor (built if omitted)
            clock: Source of result timestamps
        """
        self.settings = settings
        self.allow_list = AllowListMatcher(settings.allow_list)
        self.classifier = classifier
        self.executor = executor
        self.extractor = extractor or UnsubscribeLinkExtractor()
        self.clock = clock
        self.logger = TriageLogger("decision_engine")

    def decide(
        self,
        message: MessageSummary,
        corrections: Sequence[CorrectionEntry] = ()
    ) -> ClassificationVerdict:
        """Allow-list first; the classifier only runs when nothing matches."""
        verdict = self.allow_list.match(message.sender)
        if verdict is not None:
            self.logger.debug("Sender is allow-listed", {'sender': message.sender})
            return verdict
        return self.classifier.classify(message, corrections)

    def message_link(self, message: MessageSummary) -> UnsubscribeLocator:
        """Deep link back to the original message for manual follow-up."""
        return UnsubscribeLocator.message_link(
            self.settings.message_link_template.format(
                message_id=message.message_id,
                thread_id=message.thread_id
            )
        )

    def process(
        self,
        message: MessageSummary,
        corrections: Sequence[CorrectionEntry] = ()
    ) -> ProcessingResult:
        """
        Decide and act on one message.

        Args:
            message: Message to triage
            corrections: Correction window loaded for this run

        Returns:
            The result to hand to the log
        """
        with self.logger.scoped_context({'message_id': message.message_id, 'sender': message.sender}):
            verdict = self.decide(message, corrections)
            locator = self.extractor.extract(message)

            if verdict.decision == Decision.KEEP:
                status = OutcomeStatus.KEPT
            else:
                status = self.executor.execute(message, locator)
                if status == OutcomeStatus.MANUAL_NEEDED:
                    locator = self.message_link(message)

            self.logger.info("Message processed", {
                'decision': verdict.decision.value,
                'confidence': verdict.confidence.value,
                'status': status.value
            })

        return ProcessingResult(
            timestamp=self.clock(),
            sender=message.sender,
            subject=message.subject,
            verdict=verdict,
            locator=locator,
            status=status,
            message_id=message.message_id
        )
