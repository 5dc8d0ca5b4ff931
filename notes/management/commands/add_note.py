"""
Add Note Command

Adds a note to whichever store the process selects (database or JSON
files). This is the only way notes enter the system; the API is read-only.

Usage:
    python manage.py add_note --subject Electronics --title "Diode basics" \
        --link https://example.com/diodes.pdf --size-mb 1.2
"""
from django.core.management.base import BaseCommand, CommandError

from core.storage import StoreError, get_store
from notes.serializers import NoteInputSerializer


class Command(BaseCommand):
    help = 'Add a note to the active store'

    def add_arguments(self, parser):
        parser.add_argument('--subject', type=str, required=True, help='Subject (e.g., Electronics)')
        parser.add_argument('--title', type=str, required=True, help='Display title')
        parser.add_argument('--link', type=str, required=True, help='Download or view URL')
        parser.add_argument('--size-mb', type=float, default=None, help='File size in MB')

    def handle(self, *args, **options):
        serializer = NoteInputSerializer(data={
            'subject': options['subject'],
            'title': options['title'],
            'link': options['link'],
            'sizeMB': options['size_mb'],
        })
        if not serializer.is_valid():
            raise CommandError(f"Invalid note: {dict(serializer.errors)}")

        store = get_store()
        note = serializer.to_document()
        try:
            store.append('notes', note)
        except StoreError as e:
            raise CommandError(f"Failed to save note: {e}")

        self.stdout.write(self.style.SUCCESS(
            f"Added note '{note['title']}' ({note['subject']}) to {store.mode} storage"
        ))
