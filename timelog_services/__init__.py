"""
timelog_services -- Package init and public API.

Responsibility:
    Orchestration and external collaborators around the pure kernel: the
    timesheet service, the text assistant, the payroll backend and the PDF
    report.  This is the only layer that talks to the network, renders
    files or waits on wall-clock time.

Architecture position:
    Services -- stateful orchestration over the kernel.

    Dependency direction (enforced by tests/architecture/test_kernel_boundary.py):
        timelog_services/ -> timelog_kernel/  (allowed)
        timelog_services/ -> timelog_config/  (allowed)
        timelog_kernel/   -> timelog_services/ (FORBIDDEN)
"""

from timelog_services.assistant import (
    GeminiAssistant,
    OfflineAssistant,
    TextAssistant,
    build_assistant,
)
from timelog_services.backend import (
    PayrollCompanySettings,
    SimulatedPayrollBackend,
    SubmitResult,
)
from timelog_services.report import RenderedReport, render_period_report, report_filename
from timelog_services.timesheet_service import DashboardStats, TimesheetService

__all__ = [
    "DashboardStats",
    "GeminiAssistant",
    "OfflineAssistant",
    "PayrollCompanySettings",
    "RenderedReport",
    "SimulatedPayrollBackend",
    "SubmitResult",
    "TextAssistant",
    "TimesheetService",
    "build_assistant",
    "render_period_report",
    "report_filename",
]
