"""
Unit tests for report schedule helpers.
"""

from datetime import datetime

import pytest

from compliance_engine.scheduling import (
    ReportFormat,
    ScheduledReportType,
    describe_cron_schedule,
    get_default_schedule_for_type,
    get_file_extension_for_format,
    get_mime_type_for_format,
    get_next_report_run,
    get_report_type_label,
)


class TestReportTypes:
    """Tests for report type labels and schedules."""

    def test_every_type_has_label_and_schedule(self):
        """Test no report type falls through to a fallback."""
        for report_type in ScheduledReportType:
            assert get_report_type_label(report_type) != report_type.value
            assert get_default_schedule_for_type(report_type) != "0 0 * * *"

    @pytest.mark.parametrize(
        "report_type,label",
        [
            (ScheduledReportType.ANNUAL_COMPLIANCE, "Annual Compliance Report"),
            ("INCIDENT_DIGEST", "Incident Digest"),
        ],
    )
    def test_labels(self, report_type, label):
        """Test labels for enum members and raw strings."""
        assert get_report_type_label(report_type) == label

    def test_unknown_type_label_passthrough(self):
        """Test unknown report types are returned as their own label."""
        assert get_report_type_label("CUSTOM_EXPORT") == "CUSTOM_EXPORT"

    @pytest.mark.parametrize(
        "report_type,description",
        [
            (ScheduledReportType.COMPLIANCE_SUMMARY, "Weekly on Monday at 9:00 AM"),
            (ScheduledReportType.MONTHLY_DIGEST, "Monthly on the 1st at midnight"),
            (ScheduledReportType.QUARTERLY_REVIEW, "Quarterly on the 1st at midnight"),
            (ScheduledReportType.COMPLIANCE_CERTIFICATE, "Annually on January 1st at midnight"),
        ],
    )
    def test_default_schedules(self, report_type, description):
        """Test default schedules describe as expected."""
        schedule = get_default_schedule_for_type(report_type)

        assert describe_cron_schedule(schedule) == description

    def test_unknown_type_uses_configured_default(self):
        """Test unknown types fall back to the scheduler default."""
        assert get_default_schedule_for_type("CUSTOM_EXPORT") == "0 0 * * *"


class TestReportFormats:
    """Tests for report format helpers."""

    @pytest.mark.parametrize(
        "report_format,mime_type,extension",
        [
            (ReportFormat.PDF, "application/pdf", "pdf"),
            (ReportFormat.CSV, "text/csv", "csv"),
            (ReportFormat.JSON, "application/json", "json"),
            (
                ReportFormat.XLSX,
                "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                "xlsx",
            ),
        ],
    )
    def test_format_metadata(self, report_format, mime_type, extension):
        """Test MIME types and file extensions."""
        assert get_mime_type_for_format(report_format) == mime_type
        assert get_file_extension_for_format(report_format.value) == extension

    def test_unknown_format_rejected(self):
        """Test unknown formats raise ValueError."""
        with pytest.raises(ValueError):
            get_mime_type_for_format("DOCX")


class TestNextReportRun:
    """Tests for next report run calculation."""

    def test_default_schedule(self):
        """Test the report type's default schedule is used."""
        from_date = datetime(2025, 1, 15, 10, 30)

        result = get_next_report_run(ScheduledReportType.MONTHLY_DIGEST, from_date)

        assert result == datetime(2025, 2, 1)

    def test_explicit_schedule_wins(self):
        """Test an explicit schedule overrides the default."""
        from_date = datetime(2025, 1, 15, 10, 30)

        result = get_next_report_run(
            ScheduledReportType.MONTHLY_DIGEST, from_date, schedule="0 12 * * *"
        )

        assert result == datetime(2025, 1, 15, 12, 0)
