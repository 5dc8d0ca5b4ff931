"""
Tests for the visitor counter.
"""
import json

import pytest
from unittest.mock import Mock
from rest_framework import status

from core.storage import StoreError
from visitors.models import VisitorCounter
from visitors.services import VisitorCounterService

VISITORS_URL = '/api/visitors'


class TestVisitorCountView:

    def test_first_visit_counts_one(self, api_client):
        response = api_client.get(VISITORS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'count': 1}

    def test_sequential_calls_are_consecutive(self, api_client):
        counts = [api_client.get(VISITORS_URL).json()['count'] for _ in range(5)]
        assert counts == [1, 2, 3, 4, 5]

    def test_continues_from_existing_file(self, api_client, flat_store):
        flat_store.data_dir.mkdir(parents=True, exist_ok=True)
        (flat_store.data_dir / 'visitors.json').write_text(json.dumps({'count': 41}))

        response = api_client.get(VISITORS_URL)

        assert response.json() == {'count': 42}

    def test_unreadable_counter_returns_500(self, api_client, flat_store):
        flat_store.data_dir.mkdir(parents=True, exist_ok=True)
        (flat_store.data_dir / 'visitors.json').write_text('{not json')

        response = api_client.get(VISITORS_URL)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {'error': 'Failed to update counter'}

    def test_database_mode(self, api_client, db_store):
        counts = [api_client.get(VISITORS_URL).json()['count'] for _ in range(3)]

        assert counts == [1, 2, 3]
        assert VisitorCounter.objects.get(id='global').count == 3

    def test_post_not_allowed(self, api_client):
        response = api_client.post(VISITORS_URL)
        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED


class TestVisitorCounterService:

    def test_bump_increments_global_counter(self):
        store = Mock()
        store.increment.return_value = 7

        assert VisitorCounterService(store).bump() == 7
        store.increment.assert_called_once_with('global')

    def test_bump_propagates_store_errors(self):
        store = Mock()
        store.increment.side_effect = StoreError('boom')

        with pytest.raises(StoreError):
            VisitorCounterService(store).bump()
