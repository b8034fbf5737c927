from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, list_tables

from .common.web import register_error_handlers
from .container import Container, build_container
from .scheduling.jobs import BackgroundJobs
from .attendance.controller import register as register_attendance
from .breaks.controller import register as register_breaks
from .issues.controller import register as register_issues
from .summary.controller import register as register_summary

logger = logging.getLogger(__name__)


def start_background_jobs(container: Container, settings) -> BackgroundJobs:
    scheduler = BackgroundScheduler(
        timezone=container.tz,
        job_defaults={"coalesce": True, "max_instances": 1, "misfire_grace_time": 3600},
    )
    jobs = BackgroundJobs(
        scheduler,
        container.auto_close_daemon,
        container.issue_service,
        tz=container.tz,
        catchup_days=int(getattr(settings, "AUTO_CLOSE_CATCHUP_DAYS", 3)),
    )
    jobs.start()
    atexit.register(jobs.shutdown)
    return jobs


def create_app(*, container: Optional[Container] = None) -> Flask:
    """Application factory.

    Passing a ready ``container`` skips database bootstrap and the background
    scheduler.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))

        container = build_container(db_config=db_config, settings=settings)
        if bool(getattr(settings, "ENABLE_SCHEDULER", False)):
            app.extensions["background_jobs"] = start_background_jobs(container, settings)

    app.extensions["container"] = container
    register_error_handlers(app)
    register_summary(app, container)
    register_issues(app, container)
    register_attendance(app, container)
    register_breaks(app, container)

    return app
