import logging
import os
import sqlite3

logger = logging.getLogger(__name__)


def setup_database(path: str) -> None:
    """Create the accounts table (idempotent)."""

    # make sure the parent directory exists
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    conn = sqlite3.connect(path)
    try:
        conn.execute('''
        CREATE TABLE IF NOT EXISTS accounts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            secret_key TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
        ''')
        conn.commit()
    finally:
        conn.close()
    logger.debug("Database ready at %s", path)


if __name__ == "__main__":
    from .db_manager import DATABASE_FILE

    logging.basicConfig(level=logging.INFO)
    setup_database(DATABASE_FILE)
    logger.info("Database setup completed successfully!")
