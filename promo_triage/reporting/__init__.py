"""
Run summary reports.
"""

from .summary import SummaryReport, SummaryReporter, build_summary_report

__all__ = ['SummaryReport', 'SummaryReporter', 'build_summary_report']
