"""
Allow-list matching of senders that must always be kept.
"""

from typing import Iterable, Optional

from .constants import WHITELIST_TOPIC
from .types import ClassificationVerdict, Confidence, Decision


class AllowListMatcher:
    """Case-insensitive substring matcher over configured sender patterns."""

    def __init__(self, entries: Iterable[str]):
        self.entries = tuple(entry.strip() for entry in entries if entry and entry.strip())
        self._folded = tuple(entry.casefold() for entry in self.entries)

    def find_match(self, sender: str) -> Optional[str]:
        """Return the first allow-list entry contained in the sender, if any."""
        folded_sender = (sender or '').casefold()
        for entry, folded in zip(self.entries, self._folded):
            if folded in folded_sender:
                return entry
        return None

    def match(self, sender: str) -> Optional[ClassificationVerdict]:
        """
        Produce a KEEP verdict for allow-listed senders.

        Args:
            sender: Sender identity string (e.g. ``"Name <addr@domain>"``)

        Returns:
            KEEP verdict if the sender matches, None to defer to the classifier
        """
        term = self.find_match(sender)
        if term is None:
            return None

        return ClassificationVerdict(
            decision=Decision.KEEP,
            confidence=Confidence.HIGH,
            topic=WHITELIST_TOPIC,
            reason=f'Sender matches whitelist: {term}'
        )
