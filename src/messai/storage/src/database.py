"""
Database connection utilities for MESSAI storage.
"""

import os
import sqlite3
from pathlib import Path
from typing import Optional

from ...core.logging import get_logger
from ...core.settings import BackendSettings

logger = get_logger(__name__)


def get_db_path() -> str:
    """
    Get the database file path.

    Returns:
        str: Path from MESSAI_DB_PATH, else storage/messai.db under the working directory
    """
    db_path = BackendSettings.get_db_path()
    logger.debug(f"Resolved database path: {db_path}")
    return db_path


def get_db_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """
    Get a SQLite database connection.

    Args:
        db_path: Database file, or ':memory:'. Defaults to get_db_path().

    Returns:
        sqlite3.Connection: Database connection object
    """
    db_path = db_path or get_db_path()

    if db_path != ":memory:":
        storage_dir = Path(db_path).parent
        storage_dir.mkdir(parents=True, exist_ok=True)
        if not os.access(storage_dir, os.W_OK):
            logger.error(f"Storage directory is not writable: {storage_dir}")

    try:
        conn = sqlite3.connect(db_path, check_same_thread=False)
    except sqlite3.Error as e:
        logger.error(f"Failed to connect to database: {e}")
        raise

    # Enable row factory
    conn.row_factory = sqlite3.Row
    logger.debug("Database connection successful")
    return conn
