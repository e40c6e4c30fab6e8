"""CLI configuration: paths and environment names."""

import os
from pathlib import Path

# Project root (parent of scripts/)
ROOT = Path(__file__).resolve().parent.parent.parent

# Where ``timelog report`` writes PDFs unless --output-dir is given.
REPORT_DIR = Path(os.environ.get("TIMELOG_REPORT_DIR", ROOT / "reports"))
