"""Cron schedule calculation and report schedule defaults."""

from compliance_engine.scheduling.cron import (
    CronExpressionError,
    CronField,
    CronSchedule,
    CronSearchExhaustedError,
    describe_cron_schedule,
    get_next_run_time,
    matches_cron_field,
)
from compliance_engine.scheduling.reports import (
    ReportFormat,
    ScheduledReportType,
    get_default_schedule_for_type,
    get_file_extension_for_format,
    get_mime_type_for_format,
    get_next_report_run,
    get_report_type_label,
)

__all__ = [
    "CronExpressionError",
    "CronField",
    "CronSchedule",
    "CronSearchExhaustedError",
    "ReportFormat",
    "ScheduledReportType",
    "describe_cron_schedule",
    "get_default_schedule_for_type",
    "get_file_extension_for_format",
    "get_mime_type_for_format",
    "get_next_report_run",
    "get_next_run_time",
    "get_report_type_label",
    "matches_cron_field",
]
