"""
Database models for the triage result log.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, Text, create_engine, Index
)
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

# Column headers of the result log, in order
LOG_COLUMNS = (
    'Date', 'From', 'Subject', 'AI Decision', 'Confidence', 'Topic',
    'Reason', 'Unsubscribe Link', 'Status', 'Correction'
)


class ProcessingLogEntry(Base):
    """One processed message: the decision taken and its outcome."""
    __tablename__ = 'processing_log'

    id = Column(Integer, primary_key=True)
    date = Column(DateTime, nullable=False, default=func.now())
    sender = Column(String(512), nullable=False)
    subject = Column(Text)
    decision = Column(String(20), nullable=False)  # KEEP, UNSUBSCRIBE
    confidence = Column(String(10))  # high, medium, low
    topic = Column(String(255))
    reason = Column(Text)
    unsubscribe_link = Column(Text)
    status = Column(String(50), nullable=False)  # Email sent, Link visited, Manual needed, Kept
    correction = Column(String(20))  # Human override, empty until reviewed
    message_id = Column(String(255))

    __table_args__ = (
        Index('idx_log_date', 'date'),
        Index('idx_log_correction', 'correction'),
    )

    def to_row(self) -> list:
        """Render the entry in log column order."""
        return [
            self.date.strftime('%Y-%m-%d %H:%M:%S') if self.date else '',
            self.sender or '',
            self.subject or '',
            self.decision or '',
            self.confidence or '',
            self.topic or '',
            self.reason or '',
            self.unsubscribe_link or '',
            self.status or '',
            self.correction or '',
        ]

    def __repr__(self):
        return f"<ProcessingLogEntry(sender='{self.sender}', decision='{self.decision}', status='{self.status}')>"


def create_database_engine(database_url: str = "sqlite:///triage_log.db"):
    """Create database engine."""
    return create_engine(database_url, echo=False)


def create_tables(engine):
    """Create all tables that don't exist yet."""
    Base.metadata.create_all(engine)


def get_session_maker(engine):
    """Get session maker for database operations."""
    return sessionmaker(bind=engine)
