#!/usr/bin/env python3
"""Database reset script.

Development helper: drops every table, recreates the schema and empties the
local object storage directory.

Usage:
    cd backend
    python scripts/db_reset.py
"""

import shutil
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dataroom.db import Base, get_engine
from dataroom.settings import settings
from dataroom.utils import get_logger

logger = get_logger(__name__)


def reset_database() -> None:
    """Recreate the schema and wipe stored objects."""

    # Refuse to run against deployed environments
    if settings.environment not in ["local-dev", "test"]:
        logger.error("Database reset is only allowed in local-dev or test environment")
        logger.error(f"Current environment: {settings.environment}")
        sys.exit(1)

    engine = get_engine()
    logger.info(f"Database: {settings.get_database_url_auto().split('@')[-1]}")

    Base.metadata.drop_all(bind=engine)
    logger.info("All tables dropped")

    Base.metadata.create_all(bind=engine)
    logger.info("Tables created")

    storage_root = settings.get_storage_root()
    if storage_root.exists():
        shutil.rmtree(storage_root)
        logger.info(f"Removed object storage: {storage_root}")

    logger.info("Database reset completed")


if __name__ == "__main__":
    reset_database()
