"""Create the VISION schema on the configured MySQL server.

    python scripts/init_db.py           # schema only
    python scripts/init_db.py --seed    # schema, then the CS001-CS006 demo roster
"""
from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

from mysql.connector import Error as MySQLError

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.vision.vision.common.logging_setup import configure_logging
from src.vision.vision.database.bootstrap import apply_schema, ensure_demo_students, list_tables
from src.vision.vision.database.connection import DBConfig

logger = logging.getLogger("vision.init_db")

SCHEMA_PATH = REPO_ROOT / "database" / "schema.sql"


def main(argv: list[str]) -> int:
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)
    target = DBConfig.from_dict(db_config).describe()

    try:
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        tables = list_tables(db_config)
        logger.info("Schema applied to %s: %s", target, ", ".join(tables))
        if "--seed" in argv:
            logger.info("Demo roster: %d new students", ensure_demo_students(db_config))
    except MySQLError as e:
        logger.error("Could not initialise %s: %s", target, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
