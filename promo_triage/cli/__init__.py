"""
CLI module for Promo Triage.

Provides click-based command-line interface with subcommands.
"""

from .main import cli

__all__ = ['cli']
