#!/usr/bin/env python3
"""
Command-line entry point for Promo Triage.

Usage:
    python main.py init                      Initialize the result log
    python main.py run [--limit N]           Triage unread promotional emails
    python main.py run --dry-run             Classify only, no side effects
    python main.py log [--limit N]           Show recent decisions
    python main.py correct <id> keep         Override a decision
    python main.py corrections               Show the correction window
    python main.py export <file.csv>         Export the log as CSV
    python main.py secret store <name>       Store mail_password or gemini_api_key

Schedule ``python main.py run`` with cron or a systemd timer for periodic runs.
"""

from promo_triage.cli import cli


if __name__ == '__main__':
    cli()
