"""
Run the development server on the first free port.

Starts at settings.PORT (or --port) and walks upward while the port is in
use. Any other bind error is fatal.

Usage:
    python manage.py serve
    python manage.py serve --host 0.0.0.0 --port 8080
"""
import errno
import logging
import socket

from django.conf import settings
from django.core.management import call_command
from django.core.management.base import BaseCommand, CommandError

from core.storage import get_store

logger = logging.getLogger(__name__)

MAX_PORT = 65535


def find_available_port(host: str, start_port: int) -> int:
    """
    Return the first port >= start_port that can be bound on host.

    Raises:
        CommandError: when a bind fails for a reason other than the port
            being in use, or no port up to 65535 is free
    """
    port = start_port
    while port <= MAX_PORT:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            try:
                sock.bind((host, port))
                return port
            except OSError as e:
                if e.errno != errno.EADDRINUSE:
                    raise CommandError(f"Server error on port {port}: {e}")
        logger.warning(f"Port {port} is already in use. Trying port {port + 1}...")
        port += 1

    raise CommandError(f"No free port between {start_port} and {MAX_PORT}")


class Command(BaseCommand):
    help = 'Run the development server, moving to the next port if one is taken'

    def add_arguments(self, parser):
        parser.add_argument('--host', type=str, default='127.0.0.1', help='Interface to bind')
        parser.add_argument('--port', type=int, default=None, help='First port to try (default: PORT)')

    def handle(self, *args, **options):
        host = options['host']
        start_port = options['port'] or settings.PORT

        store = get_store()
        self.stdout.write(f"Storage: {store.mode}")

        port = find_available_port(host, start_port)
        self.stdout.write(self.style.SUCCESS(f"Server running on http://{host}:{port}"))

        call_command('runserver', f'{host}:{port}', use_reloader=False)
