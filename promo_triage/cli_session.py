"""
CLI session management utilities for dependency injection.
"""

from contextlib import contextmanager
from typing import Generator, Optional
from sqlalchemy.orm import Session

from .database import DatabaseManager


class CLISessionManager:
    """Manages database sessions for CLI commands."""

    def __init__(self, database_url: Optional[str] = None):
        self.db_manager = DatabaseManager(database_url)

    @property
    def database_url(self) -> str:
        return self.db_manager.database_url

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session with the log table present."""
        self.db_manager.initialize_database()
        with self.db_manager.session_scope() as session:
            yield session


# Global CLI session manager instance
_cli_session_manager = None


def get_cli_session_manager(database_url: Optional[str] = None) -> CLISessionManager:
    """Get the global CLI session manager instance."""
    global _cli_session_manager
    if _cli_session_manager is None:
        _cli_session_manager = CLISessionManager(database_url)
    return _cli_session_manager
