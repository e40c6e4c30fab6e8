"""CLI utilities: formatting, logging mute/restore."""

import logging
from decimal import Decimal

from timelog_kernel.domain.values import Activity


def fmt_hours(v) -> str:
    """Format hours for display (e.g. 2.5h)."""
    d = Decimal(str(v))
    return f"{d:.1f}h"


def fmt_activity(activity: Activity) -> str:
    """One table row for ``timelog list``."""
    flag = "  [submitted]" if activity.submitted else ""
    return (
        f"  {activity.id}  {activity.date.isoformat()}  "
        f"{fmt_hours(activity.duration_hours):>7}  "
        f"{activity.category.value:<16}  {activity.task}{flag}"
    )


def enable_quiet_logging():
    """Mute console handlers so CLI output stays clean. Returns list to pass to restore_logging."""
    tk_logger = logging.getLogger("timelog_kernel")
    muted = []
    for h in tk_logger.handlers:
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            muted.append((h, h.level))
            h.setLevel(logging.CRITICAL + 1)
    return muted


def restore_logging(muted):
    """Restore muted handlers after a quiet-logging section."""
    for h, orig_level in muted:
        h.setLevel(orig_level)
