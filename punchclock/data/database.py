"""
Database module for the punch clock application.

The application persists everything through a small key-value mapping
(string keys to string values). The mapping is backed by a peewee
KeyValue table in SQLite, or SQLCipher for transparent AES-256
encryption at rest when a passphrase is configured.
"""
import logging
from typing import Optional

from peewee import PeeweeException, SqliteDatabase, TextField
from playhouse.kv import KeyValue

from ..config import ENV_KEY_NAME, DB_FILE
from ..utils.errors import StorageError

logger = logging.getLogger(__name__)

TABLE_NAME = "punchclock_kv"


def open_database(path: str = DB_FILE, passphrase: Optional[str] = None):
    """
    Create and return the database connection.
    Uses SQLCipher when a passphrase is given, otherwise plain SQLite.
    """
    if passphrase:
        from playhouse.sqlcipher_ext import SqlCipherDatabase
        logger.info("SQLCipher encryption enabled")
        return SqlCipherDatabase(
            path,
            passphrase=passphrase,
            # SQLCipher 4.x settings
            pragmas={
                'kdf_iter': 256000,
                'cipher_page_size': 4096,
                'cipher_use_hmac': True,
            }
        )

    logger.warning(
        f"No encryption key set. Set {ENV_KEY_NAME} environment variable "
        "for encrypted database. Running with UNENCRYPTED database!"
    )
    return SqliteDatabase(path)


def is_encrypted(db) -> bool:
    """Check if the database is using SQLCipher encryption."""
    try:
        from playhouse.sqlcipher_ext import SqlCipherDatabase
    except ImportError:
        return False
    return isinstance(db, SqlCipherDatabase)


class MappingStore:
    """
    Durable string-to-string mapping.

    Subclasses implement the four coroutines; every failure of the
    underlying medium must surface as StorageError.
    """

    async def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    async def remove(self, key: str) -> None:
        raise NotImplementedError

    async def clear(self) -> None:
        raise NotImplementedError


class KeyValueMappingStore(MappingStore):
    """MappingStore backed by a peewee KeyValue table"""

    def __init__(self, db, table_name: str = TABLE_NAME):
        self.db = db
        try:
            if db.is_closed():
                db.connect(reuse_if_open=True)
                logger.debug("Database connection opened")
            self._kv = KeyValue(
                value_field=TextField(),
                database=db,
                table_name=table_name,
            )
        except PeeweeException as e:
            logger.error(f"Database initialization failed: {e}")
            raise StorageError(f"Cannot open key-value table: {e}") from e
        logger.info(f"Key-value store ready (table={table_name}, encrypted={is_encrypted(db)})")

    async def get(self, key: str) -> Optional[str]:
        try:
            return self._kv.get(key)
        except PeeweeException as e:
            logger.error(f"Failed to read key {key!r}: {e}")
            raise StorageError(f"Failed to read {key!r}: {e}") from e

    async def set(self, key: str, value: str) -> None:
        try:
            with self.db.atomic():
                self._kv[key] = value
        except PeeweeException as e:
            logger.error(f"Failed to write key {key!r}: {e}")
            raise StorageError(f"Failed to write {key!r}: {e}") from e

    async def remove(self, key: str) -> None:
        try:
            del self._kv[key]
        except PeeweeException as e:
            logger.error(f"Failed to remove key {key!r}: {e}")
            raise StorageError(f"Failed to remove {key!r}: {e}") from e

    async def clear(self) -> None:
        try:
            self._kv.clear()
            logger.info("Key-value store cleared")
        except PeeweeException as e:
            logger.error(f"Failed to clear store: {e}")
            raise StorageError(f"Failed to clear store: {e}") from e

    def close(self):
        """Close database connection"""
        if not self.db.is_closed():
            self.db.close()
            logger.info("Database connection closed")
