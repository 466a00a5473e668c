import asyncio
import itertools
import json
import re
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Tuple

from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_DB_PATH = Path(__file__).parent.parent / "data" / "directory.db"

_memory_ids = itertools.count(1)

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class StoreError(Exception):
    """A single read against the document store failed."""


@dataclass(frozen=True)
class Document:
    collection: str
    id: str
    data: Mapping[str, Any]


class DocumentStore(Protocol):
    """The three read primitives resolution relies on, plus a change counter.

    `identity` names the underlying data so caches never mix two stores.
    """

    identity: str

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        ...

    async def query_equal(self, collection: str, field: str, value: Any,
                          limit: int = 1) -> List[Document]:
        ...

    async def scan(self, collection: str) -> List[Document]:
        ...

    async def revision(self, collection: str) -> int:
        ...


class InMemoryDocumentStore:
    """Dict backed store. Scans return documents ordered by id."""

    def __init__(self, collections: Optional[Mapping[str, Mapping[str, Mapping[str, Any]]]] = None):
        self.identity = f"memory:{next(_memory_ids)}"
        self._collections: Dict[str, Dict[str, Mapping[str, Any]]] = {}
        self._revisions: Dict[str, int] = {}
        for collection, documents in (collections or {}).items():
            for doc_id, data in documents.items():
                self.put(collection, doc_id, data)

    def put(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        self._collections.setdefault(collection, {})[doc_id] = dict(data)
        self._revisions[collection] = self._revisions.get(collection, 0) + 1

    def delete(self, collection: str, doc_id: str) -> None:
        if self._collections.get(collection, {}).pop(doc_id, None) is not None:
            self._revisions[collection] = self._revisions.get(collection, 0) + 1

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        data = self._collections.get(collection, {}).get(doc_id)
        if data is None:
            return None
        return Document(collection, doc_id, data)

    async def query_equal(self, collection: str, field: str, value: Any,
                          limit: int = 1) -> List[Document]:
        documents = self._collections.get(collection, {})
        matches = [
            Document(collection, doc_id, documents[doc_id])
            for doc_id in sorted(documents)
            if documents[doc_id].get(field) == value
        ]
        return matches[:limit]

    async def scan(self, collection: str) -> List[Document]:
        documents = self._collections.get(collection, {})
        return [Document(collection, doc_id, documents[doc_id]) for doc_id in sorted(documents)]

    async def revision(self, collection: str) -> int:
        return self._revisions.get(collection, 0)


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS documents (
    collection TEXT NOT NULL,
    doc_id     TEXT NOT NULL,
    body       TEXT NOT NULL,
    PRIMARY KEY (collection, doc_id)
);

CREATE TABLE IF NOT EXISTS revisions (
    collection TEXT PRIMARY KEY,
    revision   INTEGER NOT NULL DEFAULT 0
);
"""

_BUMP_REVISION_SQL = """
INSERT INTO revisions (collection, revision) VALUES (?, 1)
ON CONFLICT(collection) DO UPDATE SET revision = revision + 1
"""


@contextmanager
def get_db_connection(db_path: Path = DEFAULT_DB_PATH):
    logger.debug(f"Opening database connection: {db_path}")
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()
        logger.debug("Database connection closed")


def check_database_exists(db_path: Path = DEFAULT_DB_PATH) -> bool:
    exists = db_path.exists()
    if exists:
        logger.debug(f"Database exists: {db_path}")
    else:
        logger.warning(f"Database NOT found: {db_path}")
    return exists


def _to_document(collection: str, row: sqlite3.Row) -> Document:
    try:
        data = json.loads(row["body"])
    except json.JSONDecodeError as e:
        logger.error(f"Unreadable body for {collection}/{row['doc_id']}: {e}")
        raise StoreError(f"malformed JSON in {collection}/{row['doc_id']}") from e

    if not isinstance(data, dict):
        logger.error(f"Body of {collection}/{row['doc_id']} is not an object")
        raise StoreError(f"{collection}/{row['doc_id']} is not a JSON object")
    return Document(collection, row["doc_id"], data)


class SQLiteDocumentStore:
    """
    Documents kept as JSON bodies in a single SQLite table.

    Every call opens its own connection, so the blocking work can be pushed
    onto a worker thread without sharing connections between threads.
    """

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.identity = f"sqlite:{self.db_path.resolve()}"

    def create_schema(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with get_db_connection(self.db_path) as conn:
            conn.executescript(SCHEMA_SQL)

    def put_documents(self, collection: str, documents: Iterable[Tuple[str, Mapping[str, Any]]]) -> int:
        written = 0
        try:
            with get_db_connection(self.db_path) as conn:
                with conn:
                    for doc_id, data in documents:
                        conn.execute(
                            "INSERT OR REPLACE INTO documents (collection, doc_id, body) VALUES (?, ?, ?)",
                            (collection, str(doc_id), json.dumps(data, ensure_ascii=False)),
                        )
                        written += 1
                    conn.execute(_BUMP_REVISION_SQL, (collection,))
        except sqlite3.Error as e:
            logger.error(f"Database error while writing {collection}: {e}")
            raise StoreError(str(e)) from e

        logger.info(f"Wrote {written} documents to {collection}")
        return written

    def clear(self) -> None:
        #revisions survive a clear so cached slug indexes see the change
        try:
            with get_db_connection(self.db_path) as conn:
                with conn:
                    conn.execute("DELETE FROM documents")
                    conn.execute("UPDATE revisions SET revision = revision + 1")
        except sqlite3.Error as e:
            logger.error(f"Database error while clearing documents: {e}")
            raise StoreError(str(e)) from e

    def _fetch(self, sql: str, params: Tuple[Any, ...]) -> List[sqlite3.Row]:
        try:
            with get_db_connection(self.db_path) as conn:
                return conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            logger.error(f"Database error: {e}")
            raise StoreError(str(e)) from e

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        rows = await asyncio.to_thread(
            self._fetch,
            "SELECT doc_id, body FROM documents WHERE collection = ? AND doc_id = ?",
            (collection, doc_id),
        )
        return _to_document(collection, rows[0]) if rows else None

    async def query_equal(self, collection: str, field: str, value: Any,
                          limit: int = 1) -> List[Document]:
        if not _FIELD_NAME.match(field):
            raise ValueError(f"Unsupported field name: {field!r}")

        rows = await asyncio.to_thread(
            self._fetch,
            "SELECT doc_id, body FROM documents "
            "WHERE collection = ? AND json_extract(body, ?) = ? "
            "ORDER BY doc_id LIMIT ?",
            (collection, f"$.{field}", value, limit),
        )
        return [_to_document(collection, row) for row in rows]

    async def scan(self, collection: str) -> List[Document]:
        rows = await asyncio.to_thread(
            self._fetch,
            "SELECT doc_id, body FROM documents WHERE collection = ? ORDER BY doc_id",
            (collection,),
        )
        return [_to_document(collection, row) for row in rows]

    async def revision(self, collection: str) -> int:
        rows = await asyncio.to_thread(
            self._fetch,
            "SELECT revision FROM revisions WHERE collection = ?",
            (collection,),
        )
        return rows[0]["revision"] if rows else 0
