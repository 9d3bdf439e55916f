# src/pagescope/database.py
"""Database abstraction layer supporting local SQLite and remote Turso backends."""

import json
import sqlite3
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from pagescope.config import settings
from pagescope.exceptions import PersistenceError
from pagescope.models import ScrapedRecord, StoredRecord

logger = logging.getLogger(__name__)

# SQL schema shared between backends
CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS scraped_pages (
    id TEXT PRIMARY KEY,
    url TEXT NOT NULL,
    title TEXT,
    description TEXT,
    favicon TEXT,
    schema_version INTEGER NOT NULL,
    content TEXT NOT NULL,
    scraped_at TIMESTAMP NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""

INSERT_SQL = """
INSERT INTO scraped_pages (id, url, title, description, favicon, schema_version, content, scraped_at)
VALUES (?, ?, ?, ?, ?, ?, ?, ?)
"""

SELECT_COLUMNS = "id, url, title, description, schema_version, content, scraped_at"

LIST_SQL = f"SELECT {SELECT_COLUMNS} FROM scraped_pages ORDER BY scraped_at DESC"

GET_SQL = f"SELECT {SELECT_COLUMNS} FROM scraped_pages WHERE id = ?"

DELETE_SQL = "DELETE FROM scraped_pages WHERE id = ?"


def _record_to_row(record_id: str, record: ScrapedRecord) -> tuple:
    """Flatten a record into the column values of scraped_pages."""
    return (
        record_id,
        record.url,
        record.title,
        record.description,
        record.content.meta.favicon,
        record.schema_version,
        json.dumps(record.to_dict()),
        record.scraped_at.isoformat(),
    )


def _row_to_stored(row: Dict[str, Any]) -> StoredRecord:
    """Rehydrate a scraped_pages row into a typed StoredRecord."""
    data = json.loads(row['content'])
    data.setdefault('schema_version', row['schema_version'])
    record = ScrapedRecord.from_dict(data)

    scraped_at = row['scraped_at']
    if isinstance(scraped_at, str):
        scraped_at = datetime.fromisoformat(scraped_at)

    return StoredRecord(
        id=row['id'],
        url=row['url'],
        title=row['title'],
        description=row['description'],
        scraped_at=scraped_at,
        record=record,
    )


class AbstractDatabase(ABC):
    """Abstract base class defining the database interface."""

    @abstractmethod
    def connect(self) -> None:
        """Establish database connection."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close database connection."""
        pass

    @abstractmethod
    def create_schema(self) -> None:
        """Create the necessary database tables."""
        pass

    @abstractmethod
    def save_record(self, record: ScrapedRecord) -> str:
        """Insert an analysis record.

        Args:
            record: The record to store

        Returns:
            Identifier of the stored row

        Raises:
            PersistenceError: If the backend rejects the write
        """
        pass

    @abstractmethod
    def list_records(self) -> List[StoredRecord]:
        """Retrieve all stored records.

        Returns:
            List of stored records ordered by scraped_at descending.
        """
        pass

    @abstractmethod
    def get_record(self, record_id: str) -> Optional[StoredRecord]:
        """Retrieve one record by identifier, or None if it does not exist."""
        pass

    @abstractmethod
    def delete_record(self, record_id: str) -> bool:
        """Delete a record by identifier.

        Returns:
            True if a row was deleted
        """
        pass


class LocalSqliteDatabase(AbstractDatabase):
    """SQLite database implementation for local storage."""

    def __init__(self, db_url: Optional[str] = None):
        """Initialize local SQLite database.

        Args:
            db_url: Database URL (sqlite:///path/to/db.db). Defaults to settings.DATABASE_URL.
        """
        self.db_url = db_url or settings.DATABASE_URL
        self.db_path = self.db_url.replace("sqlite:///", "")
        self.conn: Optional[sqlite3.Connection] = None
        # Writes arrive from the analyzer's background thread
        self._lock = threading.Lock()
        self.connect()
        self.create_schema()

    def connect(self) -> None:
        """Establish SQLite connection."""
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        logger.debug(f"Connected to local SQLite database: {self.db_path}")

    def close(self) -> None:
        """Close SQLite connection."""
        with self._lock:
            if self.conn:
                self.conn.close()
                self.conn = None
                logger.debug("Closed local SQLite connection")

    def create_schema(self) -> None:
        """Create the scraped_pages table if it doesn't exist."""
        with self._lock, self.conn:
            self.conn.execute(CREATE_TABLE_SQL)
        logger.debug("Schema verified/created for local SQLite")

    def save_record(self, record: ScrapedRecord) -> str:
        """Save a record to SQLite."""
        record_id = str(uuid.uuid4())
        try:
            with self._lock, self.conn:
                self.conn.execute(INSERT_SQL, _record_to_row(record_id, record))
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to save record for {record.url}: {e}") from e
        logger.debug(f"Saved record {record_id} for {record.url}")
        return record_id

    def list_records(self) -> List[StoredRecord]:
        """Retrieve all records from SQLite, newest first."""
        with self._lock:
            cursor = self.conn.cursor()
            cursor.execute(LIST_SQL)
            rows = [dict(row) for row in cursor.fetchall()]
        return [_row_to_stored(row) for row in rows]

    def get_record(self, record_id: str) -> Optional[StoredRecord]:
        """Retrieve one record from SQLite."""
        with self._lock:
            cursor = self.conn.cursor()
            cursor.execute(GET_SQL, (record_id,))
            row = cursor.fetchone()
        return _row_to_stored(dict(row)) if row else None

    def delete_record(self, record_id: str) -> bool:
        """Delete a record from SQLite."""
        with self._lock, self.conn:
            cursor = self.conn.execute(DELETE_SQL, (record_id,))
        deleted = cursor.rowcount > 0
        logger.debug(f"Delete {record_id}: {'removed' if deleted else 'not found'}")
        return deleted


class TursoDatabase(AbstractDatabase):
    """Turso (libSQL) database implementation for remote storage."""

    def __init__(
        self,
        database_url: Optional[str] = None,
        auth_token: Optional[str] = None,
        client: Any = None,
    ):
        """Initialize Turso database connection.

        Args:
            database_url: Turso database URL (libsql://...). Defaults to settings.TURSO_DATABASE_URL.
            auth_token: Turso auth token. Defaults to settings.TURSO_AUTH_TOKEN.
            client: Pre-built synchronous libSQL client (skips connect())
        """
        self.database_url = database_url or settings.TURSO_DATABASE_URL
        self.auth_token = auth_token or settings.TURSO_AUTH_TOKEN
        self.client = client

        if self.client is None:
            if not self.database_url:
                raise ValueError("TURSO_DATABASE_URL is required for Turso backend")
            if not self.auth_token:
                raise ValueError("TURSO_AUTH_TOKEN is required for Turso backend")
            self.connect()

        self.create_schema()

    def connect(self) -> None:
        """Establish Turso connection using libsql-client."""
        try:
            import libsql_client
        except ImportError:
            raise ImportError(
                "libsql-client is required for Turso backend. "
                "Install it with: pip install 'pagescope[turso]'"
            )
        self.client = libsql_client.create_client_sync(
            url=self.database_url,
            auth_token=self.auth_token,
        )
        logger.info(f"Connected to Turso database: {self.database_url}")

    def close(self) -> None:
        """Close Turso connection."""
        if self.client:
            self.client.close()
            self.client = None
            logger.debug("Closed Turso connection")

    def create_schema(self) -> None:
        """Create the scraped_pages table in Turso if it doesn't exist."""
        self.client.execute(CREATE_TABLE_SQL)
        logger.debug("Schema verified/created for Turso database")

    def save_record(self, record: ScrapedRecord) -> str:
        """Save a record to Turso."""
        record_id = str(uuid.uuid4())
        try:
            self.client.execute(INSERT_SQL, list(_record_to_row(record_id, record)))
        except Exception as e:
            raise PersistenceError(f"Failed to save record for {record.url}: {e}") from e
        logger.debug(f"Saved record {record_id} to Turso for {record.url}")
        return record_id

    def _rows(self, sql: str, params: Optional[list] = None) -> List[Dict[str, Any]]:
        result = self.client.execute(sql, params or [])
        columns = list(result.columns)
        return [dict(zip(columns, row)) for row in result.rows]

    def list_records(self) -> List[StoredRecord]:
        """Retrieve all records from Turso, newest first."""
        return [_row_to_stored(row) for row in self._rows(LIST_SQL)]

    def get_record(self, record_id: str) -> Optional[StoredRecord]:
        """Retrieve one record from Turso."""
        rows = self._rows(GET_SQL, [record_id])
        return _row_to_stored(rows[0]) if rows else None

    def delete_record(self, record_id: str) -> bool:
        """Delete a record from Turso."""
        result = self.client.execute(DELETE_SQL, [record_id])
        return result.rows_affected > 0


def get_db_client(
    backend: Optional[str] = None,
    **kwargs,
) -> Optional[AbstractDatabase]:
    """Factory function to create the appropriate database client.

    Args:
        backend: Database backend ('local', 'turso' or 'none'). Defaults to settings.DB_BACKEND.
        **kwargs: Additional arguments passed to the database constructor.

    Returns:
        An instance of AbstractDatabase, or None when storage is disabled.

    Raises:
        ValueError: If an unknown backend is specified.
    """
    backend = (backend or settings.DB_BACKEND).lower()

    if backend == "local":
        logger.info("Using local SQLite database backend")
        return LocalSqliteDatabase(**kwargs)
    elif backend == "turso":
        logger.info("Using Turso database backend")
        return TursoDatabase(**kwargs)
    elif backend == "none":
        logger.info("Persistence disabled")
        return None
    else:
        raise ValueError(
            f"Unknown database backend: '{backend}'. "
            "Supported backends: 'local', 'turso', 'none'"
        )
