"""
Staff time log CLI -- the command-line front end to TimesheetService.

Log activities, watch the payroll deadline, submit a period and render
PDF reports.

Entry point: the ``timelog`` console script or ``python -m scripts.cli``.
"""

from scripts.cli.main import main

__all__ = ["main"]
