"""
Tests for the notes listing and the add_note command.
"""
import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from rest_framework import status

from notes.models import Note

NOTES_URL = '/api/notes'


def make_note(title, created_at, **extra):
    note = {
        'subject': 'Electronics',
        'title': title,
        'link': f'https://example.com/{title.lower().replace(" ", "-")}.pdf',
        'sizeMB': 1.5,
        'createdAt': created_at,
    }
    note.update(extra)
    return note


class TestNoteListView:

    def test_empty(self, api_client):
        response = api_client.get(NOTES_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'notes': []}

    def test_newest_first(self, api_client, flat_store):
        older = make_note('Ohm law', '2026-01-01T08:00:00+00:00')
        newer = make_note('Diodes', '2026-03-01T08:00:00+00:00')
        middle = make_note('Transistors', '2026-02-01T08:00:00+00:00')
        for note in (older, newer, middle):
            flat_store.append('notes', note)

        notes = api_client.get(NOTES_URL).json()['notes']

        assert [n['title'] for n in notes] == ['Diodes', 'Transistors', 'Ohm law']

    def test_fields_unchanged(self, api_client, flat_store):
        note = make_note('Logic gates', '2026-04-01T10:30:00+00:00', sizeMB=2.25)
        flat_store.append('notes', note)

        listed = api_client.get(NOTES_URL).json()['notes']

        assert listed == [note]

    def test_newest_first_across_utc_offsets(self, api_client, flat_store):
        # 04:30 UTC, written with an Indian offset
        older = make_note('Ohm law', '2026-01-01T10:00:00+05:30')
        newer = make_note('Diodes', '2026-01-01T05:00:00+00:00')
        flat_store.append('notes', older)
        flat_store.append('notes', newer)

        notes = api_client.get(NOTES_URL).json()['notes']

        assert [n['title'] for n in notes] == ['Diodes', 'Ohm law']
        assert notes[1]['createdAt'] == '2026-01-01T10:00:00+05:30'

    def test_notes_without_timestamp_listed_after_dated_ones(self, api_client, flat_store):
        flat_store.append('notes', {'subject': 'Maths', 'title': 'Legacy', 'link': 'https://example.com/a', 'sizeMB': 1})
        flat_store.append('notes', make_note('Fresh', '2026-05-01T00:00:00+00:00'))

        notes = api_client.get(NOTES_URL).json()['notes']

        assert [n['title'] for n in notes] == ['Fresh', 'Legacy']

    def test_unreadable_notes_returns_500(self, api_client, flat_store):
        flat_store.data_dir.mkdir(parents=True, exist_ok=True)
        (flat_store.data_dir / 'notes.json').write_text('{"not": "a list"}')

        response = api_client.get(NOTES_URL)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {'error': 'Failed to fetch notes'}

    def test_database_mode_round_trip(self, api_client, db_store):
        older = make_note('Ohm law', '2026-01-01T08:00:00+00:00')
        newer = make_note('Diodes', '2026-03-01T08:00:00.123456+00:00', sizeMB=0.75)
        db_store.append('notes', older)
        db_store.append('notes', newer)

        notes = api_client.get(NOTES_URL).json()['notes']

        assert notes == [newer, older]
        assert Note.objects.count() == 2


class TestAddNoteCommand:

    def test_adds_note_to_active_store(self, flat_store):
        call_command(
            'add_note',
            '--subject', 'Electronics',
            '--title', 'Diode basics',
            '--link', 'https://example.com/diodes.pdf',
            '--size-mb', '1.2',
        )

        notes = flat_store.list('notes')
        assert len(notes) == 1
        assert notes[0]['title'] == 'Diode basics'
        assert notes[0]['sizeMB'] == 1.2
        assert notes[0]['createdAt']

    def test_later_note_listed_first(self, api_client):
        for title in ('First', 'Second'):
            call_command('add_note', '--subject', 'Physics', '--title', title,
                         '--link', 'https://example.com/n.pdf')

        notes = api_client.get(NOTES_URL).json()['notes']

        assert [n['title'] for n in notes] == ['Second', 'First']

    def test_invalid_link_rejected(self, flat_store):
        with pytest.raises(CommandError):
            call_command('add_note', '--subject', 'Physics', '--title', 'Broken', '--link', 'not-a-url')

        assert flat_store.list('notes') == []
