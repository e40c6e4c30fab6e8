"""CLI main: argument parsing, service wiring, subcommand dispatch."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from datetime import date
from pathlib import Path
from uuid import UUID

from scripts.cli import config as cli_config
from scripts.cli.util import enable_quiet_logging, fmt_activity, fmt_hours, restore_logging
from timelog_config import StorageSettings, TimelogConfig, get_active_config
from timelog_kernel.db.engine import create_tables, init_engine_from_url
from timelog_kernel.domain.clock import Clock, SystemClock
from timelog_kernel.domain.payroll_period import (
    format_display_date,
    is_deadline_approaching,
    resolve_payroll_period,
)
from timelog_kernel.domain.values import NARRATIVE_FIELDS, ActivityCategory
from timelog_kernel.exceptions import TimelogError
from timelog_kernel.logging_config import configure_logging, get_logger
from timelog_kernel.store.sql import SqlTimesheetStore
from timelog_services.assistant import build_assistant
from timelog_services.backend import SimulatedPayrollBackend
from timelog_services.timesheet_service import TimesheetService

logger = get_logger("cli")


def build_service(config: TimelogConfig, clock: Clock | None = None) -> TimesheetService:
    """Wire the production collaborators for ``config``."""
    init_engine_from_url(config.storage.database_url, echo=False)
    create_tables()
    return TimesheetService(
        store=SqlTimesheetStore(),
        assistant=build_assistant(config.assistant, config.company.short_name),
        backend=SimulatedPayrollBackend(config.backend, config.company, config.schedule),
        clock=clock or SystemClock(),
        config=config,
    )


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def cmd_period(service: TimesheetService, args: argparse.Namespace) -> int:
    period = resolve_payroll_period(args.date) if args.date else service.current_period()
    print(f"\n  {period.label} ({period.period_code})")
    print(f"  Covers:    {format_display_date(period.start)} - {format_display_date(period.end)}")
    print(f"  Deadline:  {format_display_date(period.deadline)} {period.deadline:%H:%M:%S}")
    print(f"  Payment:   {format_display_date(period.payment_date)}")
    if not args.date and is_deadline_approaching(period.deadline):
        print("  Submission deadline is approaching.")
    print()
    return 0


def cmd_log(service: TimesheetService, args: argparse.Namespace) -> int:
    category = ActivityCategory(args.category) if args.category else None
    if category is None and args.suggest:
        category = service.suggest_category(args.task)
    activity = service.log_activity(
        args.task,
        hours=args.hours,
        category=category,
        on=args.date,
        description=args.description,
        **{name: getattr(args, name) for name in NARRATIVE_FIELDS if getattr(args, name)},
    )
    print(f"  Logged {activity.id}: {activity.task} ({fmt_hours(activity.duration_hours)}, "
          f"{activity.category.value})")
    return 0


def cmd_list(service: TimesheetService, args: argparse.Namespace) -> int:
    activities = service.activities() if args.all else service.current_period_activities()
    if not activities:
        print("  No activities.")
        return 0
    for activity in activities:
        print(fmt_activity(activity))
    return 0


def cmd_delete(service: TimesheetService, args: argparse.Namespace) -> int:
    service.delete_activity(args.activity_id)
    print(f"  Deleted {args.activity_id}")
    return 0


def cmd_enhance(service: TimesheetService, args: argparse.Namespace) -> int:
    activity = service.enhance_description(args.activity_id)
    print(f"  {activity.description or '(no description)'}")
    return 0


def cmd_suggest(service: TimesheetService, args: argparse.Namespace) -> int:
    print(f"  {service.suggest_category(args.task).value}")
    return 0


def cmd_dashboard(service: TimesheetService, args: argparse.Namespace) -> int:
    stats = service.dashboard()
    print(f"\n  {stats.period.label}")
    print(f"  Hours this period:  {fmt_hours(stats.total_hours)}")
    print(f"  Activities:         {stats.activity_count}")
    deadline = f"  Deadline:           {stats.deadline_display}"
    if stats.is_urgent:
        deadline += "  (URGENT)"
    print(deadline)
    if stats.is_submission_day:
        print("  Today is a submission day.")
    for category, hours in stats.hours_by_category.items():
        print(f"    {category.value:<16} {fmt_hours(hours):>7}")
    print()
    return 0


def cmd_report(service: TimesheetService, args: argparse.Namespace) -> int:
    output_dir = args.output_dir or cli_config.REPORT_DIR
    if args.submission:
        rendered = service.build_submission_report(args.submission, output_dir)
    else:
        rendered = service.build_report(output_dir)
    print(f"  Wrote {rendered.path} ({rendered.page_count} page(s), "
          f"{fmt_hours(rendered.total_hours)})")
    return 0


def cmd_submit(service: TimesheetService, args: argparse.Namespace) -> int:
    submission = service.submit_period()
    print(f"  Submitted {submission.period_label}: {submission.activity_count} activities, "
          f"{fmt_hours(submission.total_hours)}")
    print(f"  Remote reference: {submission.remote_id}")
    return 0


def cmd_history(service: TimesheetService, args: argparse.Namespace) -> int:
    submissions = service.submissions()
    if not submissions:
        print("  No submissions yet.")
        return 0
    for sub in submissions:
        print(f"  {sub.id}  {sub.period_label:<26} {fmt_hours(sub.total_hours):>7}  "
              f"{sub.status.value:<8} {sub.remote_id or '-'}")
        print(f"      {sub.headline()}")
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="timelog",
        description="Staff time log and bi-monthly payroll reporting.",
    )
    parser.add_argument("--config", type=Path, default=None,
                        help="YAML config file (default: TIMELOG_CONFIG or the bundled set).")
    parser.add_argument("--db", default=None,
                        help="SQLAlchemy database URL, overrides storage.database_url.")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show structured log lines on stderr.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("period", help="Show the payroll period for a date.")
    p.add_argument("--date", type=date.fromisoformat, default=None)
    p.set_defaults(handler=cmd_period)

    p = sub.add_parser("log", help="Log a new activity.")
    p.add_argument("task")
    p.add_argument("--hours", required=True)
    p.add_argument("--category", choices=[c.value for c in ActivityCategory], default=None)
    p.add_argument("--suggest", action="store_true",
                   help="Ask the assistant for a category when --category is omitted.")
    p.add_argument("--date", type=date.fromisoformat, default=None)
    p.add_argument("--description", default="")
    for name in NARRATIVE_FIELDS:
        p.add_argument(f"--{name.replace('_', '-')}", dest=name, default="",
                       help=f"Narrative: {name.replace('_', ' ')}.")
    p.set_defaults(handler=cmd_log)

    p = sub.add_parser("list", help="List activities of the current period.")
    p.add_argument("--all", action="store_true", help="Include every logged activity.")
    p.set_defaults(handler=cmd_list)

    p = sub.add_parser("delete", help="Delete an unsubmitted activity.")
    p.add_argument("activity_id", type=UUID)
    p.set_defaults(handler=cmd_delete)

    p = sub.add_parser("enhance", help="Polish an activity description.")
    p.add_argument("activity_id", type=UUID)
    p.set_defaults(handler=cmd_enhance)

    p = sub.add_parser("suggest", help="Suggest a category for a task title.")
    p.add_argument("task")
    p.set_defaults(handler=cmd_suggest)

    p = sub.add_parser("dashboard", help="Current period totals and deadline.")
    p.set_defaults(handler=cmd_dashboard)

    p = sub.add_parser("report", help="Render a PDF report.")
    p.add_argument("--submission", type=UUID, default=None,
                   help="Re-render an earlier submission instead of the current period.")
    p.add_argument("--output-dir", type=Path, default=None)
    p.set_defaults(handler=cmd_report)

    p = sub.add_parser("submit", help="Submit the current period for payroll.")
    p.set_defaults(handler=cmd_submit)

    p = sub.add_parser("history", help="List past submissions.")
    p.set_defaults(handler=cmd_history)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    muted = [] if args.verbose else enable_quiet_logging()
    try:
        config = get_active_config(args.config)
        if args.db:
            config = dataclasses.replace(config, storage=StorageSettings(database_url=args.db))
        service = build_service(config)
        logger.info("cli_command", extra={"command": args.command})
        return args.handler(service, args)
    except TimelogError as exc:
        print(f"ERROR [{exc.code}]: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    finally:
        restore_logging(muted)


if __name__ == "__main__":
    sys.exit(main())
