# logging_config.py

import logging
import sqlite3
import sys
from contextlib import closing
from datetime import datetime, timezone

MAX_LOG_ENTRIES = 10000  # Maximum number of log entries to keep
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class SQLiteHandler(logging.Handler):
    """Persists log records to a SQLite table, keeping only the newest max_entries rows."""

    def __init__(self, db_path: str, max_entries: int = MAX_LOG_ENTRIES):
        super().__init__()
        self.db_path = db_path
        self.max_entries = max_entries
        self.create_table()

    def create_table(self):
        with closing(sqlite3.connect(self.db_path)) as conn, conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    level TEXT NOT NULL,
                    message TEXT NOT NULL,
                    module TEXT,
                    exception TEXT
                )
            """)

    def emit(self, record):
        try:
            log_entry = {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "level": record.levelname,
                "message": record.getMessage(),
                "module": record.module,
                "exception": self.formatter.formatException(record.exc_info)
                if record.exc_info and self.formatter else None,
            }
            with closing(sqlite3.connect(self.db_path)) as conn, conn:
                conn.execute("""
                    INSERT INTO logs (timestamp, level, message, module, exception)
                    VALUES (:timestamp, :level, :message, :module, :exception)
                """, log_entry)
                # Drop the oldest rows beyond the cap.
                conn.execute("""
                    DELETE FROM logs
                    WHERE id <= (SELECT MAX(id) FROM logs) - ?
                """, (self.max_entries,))
        except Exception:
            self.handleError(record)


def setup_logging(debug: bool = False, log_db_path: str = ""):
    level = logging.DEBUG if debug else logging.INFO
    logger = logging.getLogger()
    logger.setLevel(level)

    # Console handler for real-time logs
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)

    # SQLite handler for persistent logs
    if log_db_path:
        sqlite_handler = SQLiteHandler(db_path=log_db_path, max_entries=MAX_LOG_ENTRIES)
        sqlite_handler.setLevel(level)
        sqlite_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(sqlite_handler)
