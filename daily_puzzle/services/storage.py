"""
Storage Backends

Key-value stores holding whole JSON records. Every ``put`` replaces the
record for its key as one unit.
"""

import json
import os
import tempfile
import threading
from typing import Any, Dict, Optional

from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..utils.game_logger import game_logger


class KeyValueStore:
    """Interface shared by all storage backends."""

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def put(self, key: str, value: Dict[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def close(self):
        pass


class MemoryStore(KeyValueStore):
    """In-process store. Values are round-tripped through JSON like the other backends."""

    def __init__(self):
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def put(self, key: str, value: Dict[str, Any]) -> None:
        raw = json.dumps(value, ensure_ascii=False)
        with self._lock:
            self._data[key] = raw

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """
    All records in one JSON document on disk.

    Writes go to a temporary file in the same directory which then replaces
    the document, so readers never see a half-written file.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            game_logger.logger.warning(f"Storage file {self.path} is not valid JSON, starting empty: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.storage-', suffix='.json')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._read().get(key)

    def put(self, key: str, value: Dict[str, Any]) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)


class MongoStore(KeyValueStore):
    """One MongoDB document per key: ``{_id: key, value: record}``."""

    def __init__(self, mongo_uri: str, db_name: str = 'daily_puzzle',
                 collection_name: str = 'storage', client: Optional[MongoClient] = None):
        """
        Initialize the store with a MongoDB connection.

        Args:
            mongo_uri: MongoDB connection string
            db_name: Database holding the storage collection
            collection_name: Collection holding one document per key
            client: Pre-built client, used instead of connecting to ``mongo_uri``
        """
        self.client = client or MongoClient(mongo_uri, server_api=ServerApi('1'))
        self.collection = self.client[db_name][collection_name]

        if client is None:
            try:
                self.client.admin.command('ping')
                game_logger.logger.info("Successfully connected to MongoDB")
            except Exception as e:
                game_logger.logger.error(f"MongoDB connection error: {e}")
                raise

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        document = self.collection.find_one({'_id': key})
        return None if document is None else document.get('value')

    def put(self, key: str, value: Dict[str, Any]) -> None:
        self.collection.replace_one({'_id': key}, {'_id': key, 'value': value}, upsert=True)

    def delete(self, key: str) -> None:
        self.collection.delete_one({'_id': key})

    def close(self):
        """Close the MongoDB connection."""
        if self.client:
            self.client.close()


def create_store(config_class) -> KeyValueStore:
    """
    Build the storage backend named by ``STORAGE_BACKEND``.

    Raises:
        ValueError: If the backend is unknown or misconfigured
    """
    backend = str(getattr(config_class, 'STORAGE_BACKEND', 'file')).lower()
    if backend == 'memory':
        return MemoryStore()
    if backend == 'file':
        return JsonFileStore(config_class.STORAGE_PATH)
    if backend == 'mongo':
        if not config_class.MONGO_URI:
            raise ValueError("STORAGE_BACKEND is 'mongo' but MONGO_URI is not configured")
        return MongoStore(config_class.MONGO_URI, config_class.MONGO_DB_NAME)
    raise ValueError(f"Unknown storage backend: {backend}")
