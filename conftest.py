"""
Shared pytest fixtures.

Every test gets its own flat-file store in a temporary directory so that
no test touches ./data or probes a database. Tests that need database mode
request `db_store`.
"""
import pytest
from rest_framework.test import APIClient

from core.storage import DatabaseStore, FlatFileStore, set_store


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient()


@pytest.fixture(autouse=True)
def flat_store(tmp_path, settings):
    """Install a fresh flat-file store before each test and drop it after."""
    settings.DATA_DIR = tmp_path / 'data'
    store = FlatFileStore(settings.DATA_DIR)
    set_store(store)
    yield store
    set_store(None)


@pytest.fixture
def db_store(db):
    """Switch the process store to database mode for one test."""
    store = DatabaseStore()
    set_store(store)
    yield store
    set_store(None)


@pytest.fixture
def contact_data():
    return {
        'name': 'A',
        'email': 'a@x.com',
        'phone': '9999999999',
        'message': 'hi',
    }


@pytest.fixture
def email_configured(settings):
    """Complete SMTP configuration; mail lands in the locmem outbox."""
    settings.EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'
    settings.SMTP_HOST = 'smtp.example.com'
    settings.SMTP_PORT = '587'
    settings.SMTP_USER = 'mailer@example.com'
    settings.SMTP_PASSWORD = 'secret'
    settings.CONTACT_EMAIL_TO = 'owner@example.com'
    settings.CONTACT_EMAIL_FROM = ''
    return settings


@pytest.fixture
def chat_configured(settings):
    """Complete Twilio WhatsApp configuration."""
    settings.TWILIO_ACCOUNT_SID = 'AC0123456789abcdef'
    settings.TWILIO_AUTH_TOKEN = 'token'
    settings.TWILIO_WHATSAPP_FROM = 'whatsapp:+14155238886'
    settings.TWILIO_DEFAULT_COUNTRY_CODE = '+91'
    return settings
