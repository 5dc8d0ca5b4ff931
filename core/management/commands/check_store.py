"""
Management command to check database connectivity for the store.

Exit codes:
    0  database reachable
    1  database configured but the connection failed
    2  no database configured (the store runs on JSON files)
"""
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from core.storage import StoreMode, database_configured, probe_database


class Command(BaseCommand):
    help = 'Check that the configured database is reachable'

    def handle(self, *args, **options):
        if not database_configured():
            raise CommandError(
                f"ERR: no database configured (set DB_NAME). "
                f"Storage mode: {StoreMode.FLAT_FILE} ({settings.DATA_DIR})",
                returncode=2
            )

        db = settings.DATABASES['default']
        target = f"{db.get('HOST') or 'localhost'}:{db.get('PORT') or '(default)'} db={db.get('NAME')}"

        error = probe_database()
        if error is not None:
            raise CommandError(
                f"ERR: {error}. Storage mode: {StoreMode.FLAT_FILE} ({settings.DATA_DIR})",
                returncode=1
            )

        self.stdout.write(self.style.SUCCESS(f"OK: Connected to database at {target}"))
        self.stdout.write(f"Storage mode: {StoreMode.DATABASE}")
