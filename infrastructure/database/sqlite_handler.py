import logging
import shutil
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

from flask import Flask

from infrastructure.database.ops.activity_log import ActivityOperations
from infrastructure.database.ops.devices import DeviceOperations
from infrastructure.database.ops.readings import ReadingOperations

logger = logging.getLogger(__name__)


class SQLiteDatabaseHandler(
    DeviceOperations,
    ReadingOperations,
    ActivityOperations,
):
    """Thread-safe SQLite handler decoupled from Flask globals.

    Connections are thread-local, so an in-memory database (``":memory:"``)
    is private to the thread that opened it.
    """

    def __init__(self, database_path: str) -> None:
        self._database_path = database_path
        self._local = threading.local()

        db_path = Path(database_path)
        if database_path != ":memory:" and not db_path.parent.exists():
            db_path.parent.mkdir(parents=True, exist_ok=True)
            logger.info("Created database directory: %s", db_path.parent)

    @property
    def database_path(self) -> str:
        return self._database_path

    # --- Lifecycle ------------------------------------------------------------
    def init_app(self, app: Flask | None = None) -> None:
        # Closing an in-memory connection would discard the database
        if app is not None and self._database_path != ":memory:":
            app.teardown_appcontext(self.close_db)
        self.create_tables()

    def get_db(self) -> sqlite3.Connection:
        connection: Optional[sqlite3.Connection] = getattr(self._local, "connection", None)
        if connection is None:
            try:
                connection = self._open_connection()
            except sqlite3.DatabaseError as exc:
                if self._is_corruption_error(exc):
                    logger.error("Database appears corrupt (%s). Recreating a fresh database.", exc)
                    self._quarantine_corrupt_db()
                    connection = self._open_connection()
                else:
                    raise
            self._local.connection = connection
        return connection

    def _open_connection(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._database_path, check_same_thread=False)
        try:
            connection.row_factory = sqlite3.Row
            self._configure_connection(connection)
            return connection
        except Exception:
            connection.close()
            raise

    def _is_corruption_error(self, exc: sqlite3.Error) -> bool:
        message = str(exc).lower()
        return "malformed" in message or "is not a database" in message

    def _quarantine_corrupt_db(self) -> Optional[Path]:
        db_path = Path(self._database_path)
        if not db_path.exists():
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        quarantine_dir = db_path.parent / "corrupt"
        quarantine_dir.mkdir(parents=True, exist_ok=True)

        quarantined = quarantine_dir / f"{db_path.stem}_corrupt_{timestamp}{db_path.suffix or '.db'}"
        try:
            shutil.move(str(db_path), str(quarantined))
            logger.warning("Quarantined corrupt database to %s", quarantined)
            return quarantined
        except OSError as exc:
            logger.error("Failed to quarantine corrupt database %s: %s", db_path, exc)
            return None

    def _configure_connection(self, connection: sqlite3.Connection) -> None:
        """WAL for concurrent dashboard reads while the watcher writes."""
        connection.execute("PRAGMA journal_mode=WAL")
        connection.execute("PRAGMA synchronous=NORMAL")
        connection.execute("PRAGMA temp_store=MEMORY")
        connection.commit()

    def close_db(self, _e: Optional[BaseException] = None) -> None:
        connection: Optional[sqlite3.Connection] = getattr(self._local, "connection", None)
        if connection is not None:
            connection.close()
            delattr(self._local, "connection")

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        conn = self.get_db()
        try:
            yield conn
        finally:
            conn.commit()

    # --- Schema ----------------------------------------------------------------
    def create_tables(self) -> None:
        """Creates the necessary tables in the database if they do not already exist."""
        with self.connection() as db:
            # Registered devices, one owner each
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS Devices (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    location TEXT NOT NULL DEFAULT '',
                    lat REAL NOT NULL DEFAULT 0,
                    lng REAL NOT NULL DEFAULT 0,
                    user_id TEXT NOT NULL,
                    auth_token TEXT NOT NULL,
                    registration_date TEXT NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP
                )
                """
            )
            db.execute("CREATE INDEX IF NOT EXISTS idx_devices_user ON Devices(user_id)")
            # A token addresses exactly one reading stream
            db.execute("DROP INDEX IF EXISTS idx_devices_token")
            db.execute("CREATE UNIQUE INDEX IF NOT EXISTS uq_devices_token ON Devices(auth_token)")

            # Reading streams are keyed by device token, not device id
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS SensorReadings (
                    device_token TEXT NOT NULL,
                    record_key TEXT NOT NULL,
                    timestamp_ms INTEGER NOT NULL,
                    temperature REAL NOT NULL,
                    ph_level REAL NOT NULL,
                    ammonia REAL NOT NULL,
                    PRIMARY KEY (device_token, record_key)
                )
                """
            )
            db.execute(
                "CREATE INDEX IF NOT EXISTS idx_readings_token_time "
                "ON SensorReadings(device_token, timestamp_ms DESC)"
            )

            db.execute(
                """
                CREATE TABLE IF NOT EXISTS ActivityLogs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    device_id TEXT NOT NULL DEFAULT '',
                    device_name TEXT NOT NULL DEFAULT '',
                    type TEXT NOT NULL,
                    message TEXT NOT NULL,
                    severity TEXT NOT NULL,
                    timestamp TEXT NOT NULL
                )
                """
            )
            db.execute(
                "CREATE INDEX IF NOT EXISTS idx_activity_logs_user_time ON ActivityLogs(user_id, timestamp DESC)"
            )
        logger.info("Database schema ready at %s", self._database_path)
