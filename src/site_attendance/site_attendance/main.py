from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, apply_seed_sql, list_tables

from .container import Container, build_container
from .checkin.controller import register as register_checkin
from .compliance.controller import register as register_compliance
from .sites.controller import register as register_sites
from .tokens.controller import register as register_tokens

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the API. A ready container (e.g. in-memory repositories) skips all database setup."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        database_dir = Path(__file__).resolve().parents[3] / "database"
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=database_dir / "schema.sql")
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=database_dir / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            evidence_dir=getattr(settings, "EVIDENCE_DIR", "var/evidence"),
            timezone_name=getattr(settings, "TIMEZONE", "America/La_Paz"),
            accuracy_ceiling_m=float(getattr(settings, "ACCURACY_CEILING_M", 60.0)),
        )

    register_checkin(app, container)
    register_tokens(app, container)
    register_compliance(app, container)
    register_sites(app, container)

    return app
