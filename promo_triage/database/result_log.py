"""
Append-only result log and the correction source read back from it.
"""

import csv
from pathlib import Path
from typing import List, Optional, Union

from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import LOG_COLUMNS, ProcessingLogEntry
from ..triage.logging import TriageLogger
from ..triage.types import CorrectionEntry, Decision, ProcessingResult


class ResultLog:
    """Persist processing results and read human corrections back."""

    def __init__(self, session: Session):
        self.session = session
        self.logger = TriageLogger("result_log")

    def append(self, result: ProcessingResult) -> ProcessingLogEntry:
        """Append one row for a processed message."""
        entry = ProcessingLogEntry(
            date=result.timestamp,
            sender=result.sender,
            subject=result.subject,
            decision=result.verdict.decision.value,
            confidence=result.verdict.confidence.value,
            topic=result.verdict.topic,
            reason=result.verdict.reason,
            unsubscribe_link=result.locator.to_cell(),
            status=result.status.value,
            correction=result.correction,
            message_id=result.message_id
        )
        try:
            self.session.add(entry)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return entry

    def load_corrections(self, limit: int = 20) -> List[CorrectionEntry]:
        """
        Load the most recent human corrections, oldest first.

        Rows whose correction is not a recognizable decision are skipped.

        Args:
            limit: Maximum number of corrections to return
        """
        if limit <= 0:
            return []

        entries = self.session.query(ProcessingLogEntry).filter(
            and_(
                ProcessingLogEntry.correction.isnot(None),
                ProcessingLogEntry.correction != ''
            )
        ).order_by(ProcessingLogEntry.id.desc())

        corrections = []
        for entry in entries:
            decision = Decision.parse(entry.correction)
            if decision is None:
                self.logger.warning("Ignoring unrecognized correction", {
                    'entry_id': entry.id,
                    'correction': entry.correction
                })
                continue

            corrections.append(CorrectionEntry(
                sender=entry.sender,
                original_decision=entry.decision,
                corrected_decision=decision
            ))
            if len(corrections) >= limit:
                break

        corrections.reverse()
        return corrections

    def record_correction(self, entry_id: int, decision: Union[str, Decision]) -> Optional[ProcessingLogEntry]:
        """
        Record a human override for a logged decision.

        Returns:
            The updated entry, or None if no entry has that id

        Raises:
            ValueError: If the decision is not KEEP or UNSUBSCRIBE
        """
        parsed = Decision.parse(decision)
        if parsed is None:
            raise ValueError(f"Correction must be KEEP or UNSUBSCRIBE, got {decision!r}")

        entry = self.session.query(ProcessingLogEntry).filter_by(id=entry_id).first()
        if entry is None:
            return None

        entry.correction = parsed.value
        self.session.commit()
        return entry

    def recent(self, limit: int = 20) -> List[ProcessingLogEntry]:
        """Most recent entries, newest first."""
        return self.session.query(ProcessingLogEntry).order_by(
            ProcessingLogEntry.id.desc()
        ).limit(limit).all()

    def count(self) -> int:
        return self.session.query(ProcessingLogEntry).count()

    def export_csv(self, path: Union[str, Path]) -> int:
        """
        Write the whole log to a CSV file, header row first.

        Returns:
            Number of data rows written
        """
        entries = self.session.query(ProcessingLogEntry).order_by(ProcessingLogEntry.id).all()

        with open(path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(LOG_COLUMNS)
            for entry in entries:
                writer.writerow(entry.to_row())

        return len(entries)
