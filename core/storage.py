"""
Persistent store for the portfolio backend.

Two backends share one small document-style interface:

- DatabaseStore: Django ORM models behind collection names
- FlatFileStore: JSON files under DATA_DIR

Which one runs is decided once per process by open_store(), which probes
the configured database and falls back to flat files when it is missing
or unreachable. Views reach the store through get_store().
"""
import json
import logging
import os
import tempfile
import threading
from datetime import timezone as dt_timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from django.apps import apps
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError, connections, transaction
from django.db.models import F
from django.utils import timezone
from django.utils.dateparse import parse_datetime

logger = logging.getLogger(__name__)


COUNTER_ID = 'global'

# Collection name -> model label used in database mode
COLLECTION_MODELS = {
    'contacts': 'contact.ContactSubmission',
    'notes': 'notes.Note',
}
COUNTER_MODEL = 'visitors.VisitorCounter'


class StoreMode:
    DATABASE = 'database'
    FLAT_FILE = 'flat_file'


class StoreError(Exception):
    """Raised when a backend read or write fails."""
    pass


class BaseStore:
    """Interface shared by both backends."""

    mode = None

    def increment(self, counter_id: str = COUNTER_ID) -> int:
        raise NotImplementedError

    def append(self, collection: str, record: Dict) -> None:
        raise NotImplementedError

    def list(self, collection: str, sort_key: str = 'createdAt',
             descending: bool = True) -> List[Dict]:
        raise NotImplementedError


# =============================================================================
# DATABASE BACKEND
# =============================================================================

class DatabaseStore(BaseStore):
    """
    Store backed by the Django ORM.

    Collections map to models exposing DOCUMENT_FIELDS (document key ->
    model field), so records keep the same shape as in flat-file mode.
    """

    mode = StoreMode.DATABASE

    def _model(self, collection):
        try:
            return apps.get_model(COLLECTION_MODELS[collection])
        except KeyError:
            raise StoreError(f"Unknown collection: {collection}")

    def increment(self, counter_id: str = COUNTER_ID) -> int:
        counter_model = apps.get_model(COUNTER_MODEL)
        try:
            with transaction.atomic():
                counter_model.objects.get_or_create(id=counter_id)
                counter_model.objects.filter(id=counter_id).update(count=F('count') + 1)
                return counter_model.objects.values_list('count', flat=True).get(id=counter_id)
        except DatabaseError as e:
            logger.error(f"Failed to increment counter '{counter_id}': {e}")
            raise StoreError(str(e)) from e

    def append(self, collection: str, record: Dict) -> None:
        model = self._model(collection)
        try:
            model.objects.create(**model.fields_from_document(record))
        except DatabaseError as e:
            logger.error(f"Failed to insert into '{collection}': {e}")
            raise StoreError(str(e)) from e

    def list(self, collection: str, sort_key: str = 'createdAt',
             descending: bool = True) -> List[Dict]:
        model = self._model(collection)
        field = model.DOCUMENT_FIELDS.get(sort_key)
        if field is None:
            raise StoreError(f"Cannot sort '{collection}' by {sort_key}")

        ordering = f"-{field}" if descending else field
        try:
            return [obj.to_document() for obj in model.objects.order_by(ordering)]
        except DatabaseError as e:
            logger.error(f"Failed to read '{collection}': {e}")
            raise StoreError(str(e)) from e


# =============================================================================
# FLAT-FILE BACKEND
# =============================================================================

# One lock per file, shared by every FlatFileStore in the process
_file_locks: Dict[str, threading.Lock] = {}
_file_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _file_locks_guard:
        if key not in _file_locks:
            _file_locks[key] = threading.Lock()
        return _file_locks[key]


def _sort_value(value) -> Tuple:
    """
    Sort key for one field of a flat-file record.

    Missing values rank below everything else, ISO timestamps compare as
    instants (so differing UTC offsets order correctly) and other values
    compare as text. Callers append the file position, so ties keep a later
    append as newer.
    """
    if value in (None, ''):
        return (0, '')
    if isinstance(value, str):
        try:
            parsed = parse_datetime(value)
        except ValueError:
            parsed = None
        if parsed is not None:
            if timezone.is_naive(parsed):
                parsed = timezone.make_aware(parsed, dt_timezone.utc)
            return (2, parsed)
    return (1, str(value))


class FlatFileStore(BaseStore):
    """
    Store backed by JSON files in a data directory.

    Layout:
        visitors.json   {"count": n}
        <collection>.json   [document, ...]

    Every read-modify-write holds the file's lock, so concurrent requests
    in this process cannot lose updates. Other processes are not excluded.
    """

    mode = StoreMode.FLAT_FILE

    COUNTER_FILE = 'visitors.json'

    def __init__(self, data_dir=None):
        self.data_dir = Path(data_dir or settings.DATA_DIR)

    def _path(self, name: str) -> Path:
        return self.data_dir / name

    def _read_json(self, path: Path, default):
        if not path.exists():
            return default
        try:
            with open(path, 'r', encoding='utf-8') as fh:
                return json.load(fh)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read {path}: {e}")
            raise StoreError(f"Failed to read {path.name}") from e

    def _write_json(self, path: Path, data) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
            with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp_name, path)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            raise StoreError(f"Failed to write {path.name}") from e

    def increment(self, counter_id: str = COUNTER_ID) -> int:
        # A single counter file; counter_id is kept for interface parity
        path = self._path(self.COUNTER_FILE)
        with _lock_for(path):
            data = self._read_json(path, {'count': 0})
            try:
                count = int(data.get('count') or 0) + 1
            except (AttributeError, TypeError, ValueError) as e:
                raise StoreError(f"Malformed counter file {path.name}") from e
            self._write_json(path, {'count': count})
        return count

    def append(self, collection: str, record: Dict) -> None:
        path = self._path(f"{collection}.json")
        with _lock_for(path):
            records = self._read_json(path, [])
            if not isinstance(records, list):
                raise StoreError(f"Malformed collection file {path.name}")
            records.append(record)
            self._write_json(path, records)

    def list(self, collection: str, sort_key: str = 'createdAt',
             descending: bool = True) -> List[Dict]:
        path = self._path(f"{collection}.json")
        with _lock_for(path):
            records = self._read_json(path, [])
        if not isinstance(records, list):
            raise StoreError(f"Malformed collection file {path.name}")

        ordered = sorted(
            enumerate(records),
            key=lambda item: _sort_value(item[1].get(sort_key)) + (item[0],),
            reverse=descending,
        )
        return [record for _, record in ordered]

    def ensure_files(self) -> None:
        """Create the data directory and seed empty files, as a fresh deployment expects."""
        counter_path = self._path(self.COUNTER_FILE)
        with _lock_for(counter_path):
            if not counter_path.exists():
                self._write_json(counter_path, {'count': 0})
        for collection in COLLECTION_MODELS:
            path = self._path(f"{collection}.json")
            with _lock_for(path):
                if not path.exists():
                    self._write_json(path, [])


# =============================================================================
# STARTUP PROBE
# =============================================================================

def database_configured() -> bool:
    """Whether settings name a real database (not Django's dummy backend)."""
    engine = settings.DATABASES.get('default', {}).get('ENGINE', '')
    return bool(engine) and not engine.endswith('.dummy')


def probe_database() -> Optional[str]:
    """
    Try to open a connection to the default database.

    Returns:
        None when the connection works, otherwise the error message.
    """
    connection = connections['default']
    try:
        connection.ensure_connection()
    except (DatabaseError, ImproperlyConfigured) as e:
        return str(e)
    finally:
        connection.close()
    return None


def _flat_file_store() -> FlatFileStore:
    store = FlatFileStore()
    try:
        store.ensure_files()
    except StoreError as e:
        # Requests will surface the same failure when they touch the files
        logger.error(f"Could not prepare flat-file storage in {store.data_dir}: {e}")
    return store


def open_store() -> BaseStore:
    """
    Pick the backend for this process.

    Database mode when a database is configured and reachable, flat files
    otherwise. Never raises: an unreachable database is logged and the
    flat-file store is returned.
    """
    if not database_configured():
        logger.info("No database configured, using JSON flat-file storage.")
        return _flat_file_store()

    error = probe_database()
    if error is None:
        logger.info("Database connected, using database storage.")
        return DatabaseStore()

    logger.warning(f"Database connection failed, falling back to JSON storage: {error}")
    return _flat_file_store()


# Singleton instance
_store = None
_store_lock = threading.Lock()


def get_store() -> BaseStore:
    """Get or create the process-wide store, probing on first use."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = open_store()
    return _store


def set_store(store: Optional[BaseStore]) -> None:
    """Replace the process-wide store. None makes the next get_store() probe again."""
    global _store
    with _store_lock:
        _store = store
