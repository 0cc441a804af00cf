"""
Scheduled report types and their default schedules.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from compliance_engine.config import get_settings
from compliance_engine.scheduling.cron import get_next_run_time


class ScheduledReportType(str, Enum):
    """Report types that can be generated on a schedule."""

    COMPLIANCE_SUMMARY = "COMPLIANCE_SUMMARY"
    MONTHLY_DIGEST = "MONTHLY_DIGEST"
    QUARTERLY_REVIEW = "QUARTERLY_REVIEW"
    ANNUAL_COMPLIANCE = "ANNUAL_COMPLIANCE"
    INCIDENT_DIGEST = "INCIDENT_DIGEST"
    AUTHORIZATION_STATUS = "AUTHORIZATION_STATUS"
    DOCUMENT_INVENTORY = "DOCUMENT_INVENTORY"
    DEADLINE_FORECAST = "DEADLINE_FORECAST"
    AUDIT_TRAIL = "AUDIT_TRAIL"
    COMPLIANCE_CERTIFICATE = "COMPLIANCE_CERTIFICATE"


class ReportFormat(str, Enum):
    """Output formats for generated reports."""

    PDF = "PDF"
    CSV = "CSV"
    JSON = "JSON"
    XLSX = "XLSX"


WEEKLY_MONDAY_9AM = "0 9 * * 1"
MONTHLY_FIRST = "0 0 1 * *"
QUARTERLY_FIRST = "0 0 1 1,4,7,10 *"
ANNUAL_JANUARY_FIRST = "0 0 1 1 *"

REPORT_TYPE_LABELS: dict[ScheduledReportType, str] = {
    ScheduledReportType.COMPLIANCE_SUMMARY: "Compliance Summary",
    ScheduledReportType.MONTHLY_DIGEST: "Monthly Digest",
    ScheduledReportType.QUARTERLY_REVIEW: "Quarterly Review",
    ScheduledReportType.ANNUAL_COMPLIANCE: "Annual Compliance Report",
    ScheduledReportType.INCIDENT_DIGEST: "Incident Digest",
    ScheduledReportType.AUTHORIZATION_STATUS: "Authorization Status",
    ScheduledReportType.DOCUMENT_INVENTORY: "Document Inventory",
    ScheduledReportType.DEADLINE_FORECAST: "Deadline Forecast",
    ScheduledReportType.AUDIT_TRAIL: "Audit Trail",
    ScheduledReportType.COMPLIANCE_CERTIFICATE: "Compliance Certificate",
}

DEFAULT_SCHEDULES: dict[ScheduledReportType, str] = {
    ScheduledReportType.COMPLIANCE_SUMMARY: WEEKLY_MONDAY_9AM,
    ScheduledReportType.MONTHLY_DIGEST: MONTHLY_FIRST,
    ScheduledReportType.QUARTERLY_REVIEW: QUARTERLY_FIRST,
    ScheduledReportType.ANNUAL_COMPLIANCE: ANNUAL_JANUARY_FIRST,
    ScheduledReportType.INCIDENT_DIGEST: WEEKLY_MONDAY_9AM,
    ScheduledReportType.AUTHORIZATION_STATUS: WEEKLY_MONDAY_9AM,
    ScheduledReportType.DOCUMENT_INVENTORY: MONTHLY_FIRST,
    ScheduledReportType.DEADLINE_FORECAST: WEEKLY_MONDAY_9AM,
    ScheduledReportType.AUDIT_TRAIL: MONTHLY_FIRST,
    ScheduledReportType.COMPLIANCE_CERTIFICATE: ANNUAL_JANUARY_FIRST,
}

MIME_TYPES: dict[ReportFormat, str] = {
    ReportFormat.PDF: "application/pdf",
    ReportFormat.CSV: "text/csv",
    ReportFormat.JSON: "application/json",
    ReportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}

FILE_EXTENSIONS: dict[ReportFormat, str] = {
    ReportFormat.PDF: "pdf",
    ReportFormat.CSV: "csv",
    ReportFormat.JSON: "json",
    ReportFormat.XLSX: "xlsx",
}


def get_report_type_label(report_type: ScheduledReportType | str) -> str:
    """Display label for a report type; unknown types are returned as-is."""
    try:
        return REPORT_TYPE_LABELS[ScheduledReportType(report_type)]
    except ValueError:
        return str(report_type)


def get_default_schedule_for_type(report_type: ScheduledReportType | str) -> str:
    """Default cron schedule for a report type."""
    try:
        return DEFAULT_SCHEDULES[ScheduledReportType(report_type)]
    except ValueError:
        return get_settings().scheduler.default_schedule


def get_mime_type_for_format(report_format: ReportFormat | str) -> str:
    return MIME_TYPES[ReportFormat(report_format)]


def get_file_extension_for_format(report_format: ReportFormat | str) -> str:
    return FILE_EXTENSIONS[ReportFormat(report_format)]


def get_next_report_run(
    report_type: ScheduledReportType | str,
    from_date: Optional[datetime] = None,
    schedule: Optional[str] = None,
) -> datetime:
    """Next run of a report on its explicit schedule, or its type's default."""
    return get_next_run_time(
        schedule or get_default_schedule_for_type(report_type),
        from_date,
    )
