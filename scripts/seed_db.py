"""Enroll the demo roster (CS001-CS006) into an existing VISION database."""
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
from src.vision.vision.database.bootstrap import ensure_demo_students
from src.vision.vision.database.connection import DBConfig

logger = logging.getLogger("vision.seed_db")


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)
    target = DBConfig.from_dict(db_config).describe()

    try:
        inserted = ensure_demo_students(db_config)
    except MySQLError as e:
        logger.error("Could not seed %s: %s", target, e)
        return 1
    logger.info("Seeded %s: %d new students", target, inserted)
    return 0


if __name__ == "__main__":
    sys.exit(main())
