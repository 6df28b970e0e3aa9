# ABOUTME: Exposes multi-year progression tracking and reporting entrypoints.
# ABOUTME: Groups the history tracker, report-card builder, and cohort statistics.

from .history import build_history, group_by_year, history_frame
from .report_card import build_report_card, report_card_frame
from .statistics import subject_statistics, classify_cohort, approval_summary

__all__ = [
    "build_history",
    "group_by_year",
    "history_frame",
    "build_report_card",
    "report_card_frame",
    "subject_statistics",
    "classify_cohort",
    "approval_summary",
]
