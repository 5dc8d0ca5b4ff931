"""
Settings used by the pytest suite.

SQLite in memory stands in for the production database, mail goes to the
locmem outbox and no notification channel is configured unless a test
overrides it.
"""
import os

os.environ.setdefault('SECRET_KEY', 'test-secret-key-not-for-production')

from core.settings import *  # noqa: E402,F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

SMTP_HOST = ''
SMTP_PORT = ''
SMTP_USER = ''
SMTP_PASSWORD = ''
CONTACT_EMAIL_TO = ''
CONTACT_EMAIL_FROM = ''

TWILIO_ACCOUNT_SID = ''
TWILIO_AUTH_TOKEN = ''
TWILIO_WHATSAPP_FROM = ''
TWILIO_DEFAULT_COUNTRY_CODE = '+91'

LOG_TO_FILE = False
