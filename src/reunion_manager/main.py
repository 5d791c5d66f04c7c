from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from types import ModuleType
from typing import Optional, Union

from dotenv import load_dotenv
from flask import Flask

from .budget.controller import register as register_budget
from .categories.controller import register as register_categories
from .common.datetime_utils import parse_iso_date
from .config import get_settings_module
from .container import build_container
from .contributions.controller import register as register_contributions
from .core import constants
from .database.bootstrap import apply_schema, list_tables
from .expenses.controller import register as register_expenses
from .reports.controller import register as register_reports
from .students.controller import register as register_students
from .users.controller import register as register_users

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _configure_logging(app: Flask, level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("reunion_manager").setLevel(level)
    app.logger.setLevel(level)


def create_app(settings_module: Optional[Union[str, ModuleType]] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    if settings_module is None:
        settings_module = get_settings_module()
    settings = importlib.import_module(settings_module) if isinstance(settings_module, str) else settings_module

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.permanent_session_lifetime = timedelta(
        days=int(getattr(settings, "SESSION_DAYS", constants.DEFAULT_SESSION_DAYS))
    )
    _configure_logging(app, getattr(settings, "LOG_LEVEL", "INFO"))

    backend = str(getattr(settings, "STORAGE_BACKEND", "mysql")).lower()
    db_config = getattr(settings, "DB_CONFIG", {})

    app.logger.info("settings=%s backend=%s", settings.__name__, backend)
    if backend == "mysql":
        app.logger.info(
            "db=%s@%s:%s/%s",
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

    container = build_container(
        backend=backend,
        db_config=db_config,
        sections=getattr(settings, "SECTIONS", None),
        expense_categories=getattr(settings, "EXPENSE_CATEGORIES", None),
        reunion_date=parse_iso_date(getattr(settings, "REUNION_DATE", constants.DEFAULT_REUNION_DATE)),
        planning_days=int(getattr(settings, "PLANNING_DAYS", constants.DEFAULT_PLANNING_DAYS)),
    )

    if container.conn is not None and bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(container.conn)
        app.logger.info("schema ready (tables=%d)", len(list_tables(container.conn)))

    container.user_service.ensure_default_admin(
        getattr(settings, "DEFAULT_ADMIN_USERNAME", constants.DEFAULT_ADMIN_USERNAME),
        getattr(settings, "DEFAULT_ADMIN_PASSWORD", constants.DEFAULT_ADMIN_PASSWORD),
    )

    app.extensions["reunion_manager"] = container

    register_users(app, container)
    register_students(app, container)
    register_contributions(app, container)
    register_expenses(app, container)
    register_budget(app, container)
    register_categories(app, container)
    register_reports(app, container)

    return app
