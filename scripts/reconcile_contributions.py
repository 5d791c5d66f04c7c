"""Rebuild every student's contribution_amount from the contributions ledger.

Run after manual SQL edits or a restore if dashboard totals and per-student
totals disagree.
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from reunion_manager.config import get_settings_module
from reunion_manager.container import build_container


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    settings = importlib.import_module(get_settings_module())

    container = build_container(backend="mysql", db_config=dict(settings.DB_CONFIG))
    changed = container.contribution_service.recalculate_student_totals()
    print(f"OK: {changed} student totals corrected (ledger total={container.contribution_service.total_amount()})")


if __name__ == "__main__":
    main()
