"""
PDF activity report tests (``timelog_services.report``).

The PDF content streams are compressed, so these tests check the file,
its name and the page accounting rather than the rendered text.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from timelog_config.schema import CompanySettings
from timelog_kernel.domain.values import Activity, ActivityCategory
from timelog_kernel.exceptions import EmptyReportError
from timelog_services.report import (
    format_generated_on,
    render_period_report,
    report_filename,
)

GENERATED_AT = datetime(2024, 2, 15, 9, 5, 0)


def _activities(count):
    return [
        Activity.create(
            f"Task <{n}> & more",
            "1.25",
            date(2024, 2, 1 + n % 14),
            category=ActivityCategory.LOCKSMITH,
            description="Detailed notes " * 10 if n % 2 else "",
            accomplishments="Finished early" if n % 3 == 0 else "",
        )
        for n in range(count)
    ]


class TestReportFilename:

    def test_spaces_become_underscores(self):
        assert report_filename("First Half of May") == "WK_Report_First_Half_of_May.pdf"

    def test_whitespace_runs_collapse(self):
        assert report_filename("Second  Half\tof June") == "WK_Report_Second_Half_of_June.pdf"

    def test_custom_prefix(self):
        assert report_filename("Custom Selection", "KRU") == "KRU_Custom_Selection.pdf"


class TestGeneratedOn:

    @pytest.mark.parametrize("moment,expected", [
        (datetime(2024, 2, 3, 9, 5, 0), "2/3/2024, 9:05:00 AM"),
        (datetime(2024, 12, 25, 0, 30, 15), "12/25/2024, 12:30:15 AM"),
        (datetime(2024, 7, 4, 12, 0, 0), "7/4/2024, 12:00:00 PM"),
        (datetime(2024, 7, 4, 23, 59, 59), "7/4/2024, 11:59:59 PM"),
    ])
    def test_en_us_format(self, moment, expected):
        assert format_generated_on(moment) == expected


class TestRenderPeriodReport:

    def test_writes_pdf(self, tmp_path):
        rendered = render_period_report(
            _activities(3), "First Half of February", "Solid period.", tmp_path, GENERATED_AT,
        )

        assert rendered.path == tmp_path / "WK_Report_First_Half_of_February.pdf"
        assert rendered.path.read_bytes().startswith(b"%PDF")
        assert rendered.page_count == 1
        assert rendered.activity_count == 3
        assert rendered.total_hours == Decimal("3.75")

    def test_long_log_spans_pages(self, tmp_path):
        rendered = render_period_report(
            _activities(60), "Second Half of March", "Busy.", tmp_path, GENERATED_AT,
        )
        assert rendered.page_count > 1

    def test_company_prefix(self, tmp_path):
        company = CompanySettings(short_name="Keys R Us", report_file_prefix="KRU")
        rendered = render_period_report(
            _activities(1), "Custom Selection", "Ok.", tmp_path, GENERATED_AT, company=company,
        )
        assert rendered.path.name == "KRU_Custom_Selection.pdf"

    def test_creates_output_directory(self, tmp_path):
        target = tmp_path / "reports" / "2024"
        rendered = render_period_report(_activities(1), "X", "Ok.", target, GENERATED_AT)
        assert rendered.path.parent == target

    def test_empty(self, tmp_path):
        with pytest.raises(EmptyReportError) as exc_info:
            render_period_report([], "First Half of May", "-", tmp_path, GENERATED_AT)
        assert exc_info.value.label == "First Half of May"
        assert not list(tmp_path.iterdir())
