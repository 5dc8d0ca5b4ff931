"""
Store adapter tests for both backends and the startup probe.

Run with: pytest tests/integration/test_storage_backends.py -v
"""
import json
import logging

import pytest
from unittest.mock import patch

from core import storage
from core.storage import (
    DatabaseStore,
    FlatFileStore,
    StoreError,
    StoreMode,
    get_store,
    open_store,
    probe_database,
    set_store,
)
from notes.models import Note
from visitors.models import VisitorCounter


# =============================================================================
# FLAT-FILE BACKEND
# =============================================================================

class TestFlatFileStore:

    def test_increment_from_missing_file(self, tmp_path):
        store = FlatFileStore(tmp_path)

        assert store.increment() == 1
        assert json.loads((tmp_path / 'visitors.json').read_text()) == {'count': 1}

    def test_increment_is_consecutive(self, tmp_path):
        store = FlatFileStore(tmp_path)
        assert [store.increment() for _ in range(4)] == [1, 2, 3, 4]

    def test_append_and_list(self, tmp_path):
        store = FlatFileStore(tmp_path)
        store.append('contacts', {'name': 'A', 'createdAt': '2026-01-01T00:00:00+00:00'})
        store.append('contacts', {'name': 'B', 'createdAt': '2026-01-02T00:00:00+00:00'})

        assert [r['name'] for r in store.list('contacts')] == ['B', 'A']
        assert [r['name'] for r in store.list('contacts', descending=False)] == ['A', 'B']

    def test_file_holds_json_array(self, tmp_path):
        store = FlatFileStore(tmp_path)
        store.append('contacts', {'name': 'A'})

        assert json.loads((tmp_path / 'contacts.json').read_text()) == [{'name': 'A'}]

    def test_equal_timestamps_list_later_append_first(self, tmp_path):
        store = FlatFileStore(tmp_path)
        store.append('notes', {'title': 'first', 'createdAt': '2026-01-01T00:00:00+00:00'})
        store.append('notes', {'title': 'second', 'createdAt': '2026-01-01T00:00:00+00:00'})

        assert [r['title'] for r in store.list('notes')] == ['second', 'first']

    def test_list_orders_timestamps_as_instants(self, tmp_path):
        store = FlatFileStore(tmp_path)
        store.append('notes', {'title': 'older', 'createdAt': '2026-01-01T10:00:00+05:30'})
        store.append('notes', {'title': 'newer', 'createdAt': '2026-01-01T05:00:00+00:00'})
        store.append('notes', {'title': 'newest', 'createdAt': '2026-01-01T01:00:00-05:00'})

        assert [r['title'] for r in store.list('notes')] == ['newest', 'newer', 'older']
        assert [r['title'] for r in store.list('notes', descending=False)] == ['older', 'newer', 'newest']

    def test_list_matches_database_order_for_mixed_offsets(self, tmp_path, db):
        records = [
            {'subject': 'S', 'title': 'older', 'link': 'https://example.com/a',
             'sizeMB': 1.0, 'createdAt': '2026-01-01T10:00:00+05:30'},
            {'subject': 'S', 'title': 'newer', 'link': 'https://example.com/b',
             'sizeMB': 1.0, 'createdAt': '2026-01-01T05:00:00+00:00'},
        ]
        flat, database = FlatFileStore(tmp_path), DatabaseStore()
        for record in records:
            flat.append('notes', record)
            database.append('notes', record)

        flat_titles = [r['title'] for r in flat.list('notes')]
        database_titles = [r['title'] for r in database.list('notes')]
        assert flat_titles == database_titles == ['newer', 'older']

    def test_list_missing_collection_is_empty(self, tmp_path):
        assert FlatFileStore(tmp_path).list('notes') == []

    def test_corrupt_counter_raises(self, tmp_path):
        (tmp_path / 'visitors.json').write_text('garbage')

        with pytest.raises(StoreError):
            FlatFileStore(tmp_path).increment()

    def test_non_numeric_count_raises(self, tmp_path):
        (tmp_path / 'visitors.json').write_text('{"count": "many"}')

        with pytest.raises(StoreError):
            FlatFileStore(tmp_path).increment()

    def test_corrupt_collection_raises_and_keeps_file(self, tmp_path):
        (tmp_path / 'contacts.json').write_text('{"oops": true}')

        with pytest.raises(StoreError):
            FlatFileStore(tmp_path).append('contacts', {'name': 'A'})

        assert (tmp_path / 'contacts.json').read_text() == '{"oops": true}'

    def test_ensure_files_seeds_empty_state(self, tmp_path):
        data_dir = tmp_path / 'fresh'
        FlatFileStore(data_dir).ensure_files()

        assert json.loads((data_dir / 'visitors.json').read_text()) == {'count': 0}
        assert json.loads((data_dir / 'notes.json').read_text()) == []
        assert json.loads((data_dir / 'contacts.json').read_text()) == []

    def test_ensure_files_keeps_existing_data(self, tmp_path):
        (tmp_path / 'visitors.json').write_text('{"count": 9}')
        FlatFileStore(tmp_path).ensure_files()

        assert json.loads((tmp_path / 'visitors.json').read_text()) == {'count': 9}

    def test_mode(self, tmp_path):
        assert FlatFileStore(tmp_path).mode == StoreMode.FLAT_FILE


# =============================================================================
# DATABASE BACKEND
# =============================================================================

@pytest.mark.django_db
class TestDatabaseStore:

    def test_increment_upserts_global_counter(self):
        store = DatabaseStore()

        assert not VisitorCounter.objects.exists()
        assert store.increment() == 1
        assert VisitorCounter.objects.get(id='global').count == 1

    def test_increment_is_consecutive(self):
        store = DatabaseStore()
        assert [store.increment() for _ in range(4)] == [1, 2, 3, 4]

    def test_increment_continues_existing_count(self):
        VisitorCounter.objects.create(id='global', count=5)
        assert DatabaseStore().increment() == 6

    def test_append_and_list_round_trip(self):
        store = DatabaseStore()
        record = {
            'name': 'A',
            'email': 'a@x.com',
            'phone': '9999999999',
            'message': 'hi',
            'createdAt': '2026-06-01T12:00:00+00:00',
        }
        store.append('contacts', record)

        assert store.list('contacts') == [record]

    @pytest.mark.parametrize('created_at', ['yesterday', '2026-13-01T00:00:00+00:00'])
    def test_unreadable_timestamp_is_rejected(self, created_at, caplog):
        record = {'subject': 'S', 'title': 'T', 'link': 'https://example.com/t',
                  'sizeMB': 1.0, 'createdAt': created_at}

        with caplog.at_level(logging.ERROR, logger='core.documents'):
            with pytest.raises(StoreError):
                DatabaseStore().append('notes', record)

        assert not Note.objects.exists()
        assert 'Unreadable timestamp' in caplog.text

    def test_unknown_collection(self):
        with pytest.raises(StoreError):
            DatabaseStore().append('orders', {'x': 1})

    def test_unknown_sort_key(self):
        with pytest.raises(StoreError):
            DatabaseStore().list('notes', sort_key='popularity')

    def test_database_error_becomes_store_error(self):
        from django.db import DatabaseError

        with patch('visitors.models.VisitorCounter.objects.get_or_create', side_effect=DatabaseError('down')):
            with pytest.raises(StoreError):
                DatabaseStore().increment()

    def test_mode(self):
        assert DatabaseStore().mode == StoreMode.DATABASE


# =============================================================================
# STARTUP PROBE
# =============================================================================

class TestOpenStore:

    def test_no_database_configured_uses_flat_files(self, settings, tmp_path):
        settings.DATA_DIR = tmp_path / 'probe'

        with patch('core.storage.database_configured', return_value=False), \
                patch('core.storage.probe_database') as probe:
            store = open_store()

        assert isinstance(store, FlatFileStore)
        assert (tmp_path / 'probe' / 'visitors.json').exists()
        probe.assert_not_called()

    def test_unreachable_database_falls_back_with_warning(self, settings, tmp_path, caplog):
        settings.DATA_DIR = tmp_path / 'probe'

        with patch('core.storage.database_configured', return_value=True), \
                patch('core.storage.probe_database', return_value='connection refused'), \
                caplog.at_level(logging.WARNING, logger='core.storage'):
            store = open_store()

        assert isinstance(store, FlatFileStore)
        assert 'falling back to JSON storage' in caplog.text

    def test_reachable_database_is_used(self):
        with patch('core.storage.database_configured', return_value=True), \
                patch('core.storage.probe_database', return_value=None):
            store = open_store()

        assert isinstance(store, DatabaseStore)

    @pytest.mark.django_db
    def test_probe_succeeds_against_test_database(self):
        assert probe_database() is None

    def test_probe_reports_connection_errors(self):
        from django.db import OperationalError

        with patch.object(storage.connections['default'], 'ensure_connection',
                          side_effect=OperationalError('timeout expired')):
            assert probe_database() == 'timeout expired'


class TestGetStore:

    def test_probes_once(self, tmp_path):
        set_store(None)
        fake = FlatFileStore(tmp_path)

        with patch('core.storage.open_store', return_value=fake) as opener:
            first = get_store()
            second = get_store()

        assert first is second is fake
        opener.assert_called_once()

    def test_set_store_replaces_instance(self, tmp_path):
        replacement = FlatFileStore(tmp_path)
        set_store(replacement)

        assert get_store() is replacement
