"""
Tests for the contact form: validation, best-effort persistence and the
notification channels.
"""
import pytest
from unittest.mock import Mock, patch

import requests
from rest_framework import status

from contact.models import ContactSubmission
from contact.notifications import EmailChannelConfig, NotificationDispatcher
from contact.views import NOT_CONFIGURED_NOTE
from core.storage import StoreError
from core.whatsapp_service import ChatChannelConfig, normalize_phone_number

CONTACT_URL = '/api/contact'


def twilio_response(status_code=201, payload=None):
    response = Mock()
    response.status_code = status_code
    response.content = b'{}'
    response.json.return_value = payload if payload is not None else {'sid': 'SM123', 'status': 'queued'}
    return response


class TestContactSubmission:
    """Public contact form submission."""

    def test_no_channels_configured_returns_advisory_note(self, api_client, flat_store, contact_data):
        response = api_client.post(CONTACT_URL, contact_data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'ok': True, 'note': NOT_CONFIGURED_NOTE}

        saved = flat_store.list('contacts')
        assert len(saved) == 1
        assert saved[0]['name'] == 'A'
        assert saved[0]['email'] == 'a@x.com'
        assert saved[0]['phone'] == '9999999999'
        assert saved[0]['message'] == 'hi'
        assert saved[0]['createdAt']

    @pytest.mark.parametrize('missing', ['name', 'email', 'phone', 'message'])
    def test_missing_field_rejected(self, api_client, flat_store, contact_data, missing):
        del contact_data[missing]

        with patch.object(NotificationDispatcher, 'notify') as notify:
            response = api_client.post(CONTACT_URL, contact_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {'ok': False, 'error': 'Missing fields'}
        assert flat_store.list('contacts') == []
        notify.assert_not_called()

    @pytest.mark.parametrize('blank', ['name', 'email', 'phone', 'message'])
    def test_blank_field_rejected(self, api_client, flat_store, contact_data, blank):
        contact_data[blank] = '   '

        response = api_client.post(CONTACT_URL, contact_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert flat_store.list('contacts') == []

    def test_empty_body_rejected(self, api_client):
        response = api_client.post(CONTACT_URL, {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['ok'] is False

    def test_values_are_stored_as_submitted(self, api_client, flat_store, contact_data):
        contact_data['name'] = '<Admin>'
        contact_data['message'] = 'is a<b and c>d true?'

        response = api_client.post(CONTACT_URL, contact_data, format='json')

        assert response.status_code == status.HTTP_200_OK
        saved = flat_store.list('contacts')[0]
        assert saved['name'] == '<Admin>'
        assert saved['message'] == 'is a<b and c>d true?'

    def test_surrounding_whitespace_is_trimmed(self, api_client, flat_store, contact_data):
        contact_data['name'] = '  Asha  '

        api_client.post(CONTACT_URL, contact_data, format='json')

        assert flat_store.list('contacts')[0]['name'] == 'Asha'

    def test_long_values_are_accepted(self, api_client, flat_store, contact_data):
        contact_data['name'] = 'n' * 300
        contact_data['phone'] = '9' * 80
        contact_data['message'] = 'x' * 5001

        response = api_client.post(CONTACT_URL, contact_data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert flat_store.list('contacts')[0]['message'] == 'x' * 5001

    def test_long_message_persists_in_database_mode(self, api_client, db_store, contact_data):
        contact_data['message'] = 'x' * 20000

        response = api_client.post(CONTACT_URL, contact_data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert ContactSubmission.objects.get().message == 'x' * 20000

    def test_store_failure_does_not_fail_request(self, api_client, flat_store, contact_data):
        with patch.object(flat_store, 'append', side_effect=StoreError('disk full')):
            response = api_client.post(CONTACT_URL, contact_data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['ok'] is True

    def test_store_failure_still_notifies(self, api_client, flat_store, contact_data, email_configured, mailoutbox):
        with patch.object(flat_store, 'append', side_effect=StoreError('disk full')):
            response = api_client.post(CONTACT_URL, contact_data, format='json')

        assert response.json() == {'ok': True}
        assert len(mailoutbox) == 2

    def test_email_configured_sends_two_messages(self, api_client, contact_data, email_configured, mailoutbox):
        response = api_client.post(CONTACT_URL, contact_data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'ok': True}

        admin_mail, confirmation = mailoutbox
        assert admin_mail.to == ['owner@example.com']
        assert admin_mail.reply_to == ['a@x.com']
        assert admin_mail.subject == 'New contact from A'
        assert 'Phone: 9999999999' in admin_mail.body
        assert admin_mail.from_email == 'mailer@example.com'
        assert confirmation.to == ['a@x.com']
        assert 'hi' in confirmation.body

    def test_chat_only_success_has_no_note(self, api_client, contact_data, chat_configured):
        with patch('core.whatsapp_service.requests.post', return_value=twilio_response()) as post:
            response = api_client.post(CONTACT_URL, contact_data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'ok': True}
        assert post.call_args.kwargs['data']['To'] == 'whatsapp:+919999999999'
        assert post.call_args.kwargs['data']['From'] == 'whatsapp:+14155238886'

    def test_chat_failure_without_email_returns_note(self, api_client, contact_data, chat_configured):
        failed = twilio_response(400, {'message': 'Invalid To number'})
        with patch('core.whatsapp_service.requests.post', return_value=failed):
            response = api_client.post(CONTACT_URL, contact_data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'ok': True, 'note': NOT_CONFIGURED_NOTE}

    def test_email_failure_with_chat_success_has_no_note(self, api_client, contact_data, email_configured, chat_configured):
        with patch('contact.notifications.EmailMessage.send', side_effect=OSError('connection refused')), \
                patch('core.whatsapp_service.requests.post', return_value=twilio_response()):
            response = api_client.post(CONTACT_URL, contact_data, format='json')

        assert response.json() == {'ok': True}

    def test_database_mode_persists_submission(self, api_client, db_store, contact_data):
        response = api_client.post(CONTACT_URL, contact_data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert ContactSubmission.objects.count() == 1
        submission = ContactSubmission.objects.get()
        assert submission.email == 'a@x.com'
        assert submission.message == 'hi'

    def test_get_not_allowed(self, api_client):
        response = api_client.get(CONTACT_URL)
        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED


class TestNotificationDispatcher:
    """Channel selection and failure isolation."""

    @pytest.fixture
    def submission(self, contact_data):
        return dict(contact_data, createdAt='2026-01-01T00:00:00+00:00')

    def test_nothing_configured(self, submission, mailoutbox):
        dispatcher = NotificationDispatcher()

        with patch('core.whatsapp_service.requests.post') as post:
            result = dispatcher.notify(submission)

        assert result == {'email_sent': False, 'chat_sent': False}
        assert mailoutbox == []
        post.assert_not_called()

    def test_email_failure_does_not_stop_chat(self, submission, email_configured, chat_configured):
        dispatcher = NotificationDispatcher.from_settings()

        with patch('contact.notifications.EmailMessage.send', side_effect=OSError('smtp down')), \
                patch('core.whatsapp_service.requests.post', return_value=twilio_response()) as post:
            result = dispatcher.notify(submission)

        assert result == {'email_sent': False, 'chat_sent': True}
        post.assert_called_once()

    def test_confirmation_failure_marks_email_unsent(self, submission, email_configured):
        dispatcher = NotificationDispatcher.from_settings()

        with patch('contact.notifications.EmailMessage.send', side_effect=[1, OSError('rejected')]) as send:
            result = dispatcher.notify(submission)

        assert result['email_sent'] is False
        assert send.call_count == 2

    def test_chat_timeout_is_reported_not_raised(self, submission, chat_configured):
        dispatcher = NotificationDispatcher.from_settings()

        with patch('core.whatsapp_service.requests.post', side_effect=requests.exceptions.Timeout()):
            result = dispatcher.notify(submission)

        assert result == {'email_sent': False, 'chat_sent': False}

    def test_chat_network_error_is_reported_not_raised(self, submission, chat_configured):
        dispatcher = NotificationDispatcher.from_settings()

        with patch('core.whatsapp_service.requests.post',
                   side_effect=requests.exceptions.ConnectionError('unreachable')):
            result = dispatcher.notify(submission)

        assert result['chat_sent'] is False

    def test_chat_request_uses_timeout_and_basic_auth(self, submission, chat_configured):
        dispatcher = NotificationDispatcher.from_settings()

        with patch('core.whatsapp_service.requests.post', return_value=twilio_response()) as post:
            dispatcher.notify(submission)

        assert post.call_args.kwargs['auth'] == ('AC0123456789abcdef', 'token')
        assert post.call_args.kwargs['timeout'] == 10
        assert post.call_args.args[0].endswith('/Accounts/AC0123456789abcdef/Messages.json')

    def test_phone_without_digits_is_not_sent(self, submission, chat_configured):
        submission['phone'] = 'n/a'
        dispatcher = NotificationDispatcher.from_settings()

        with patch('core.whatsapp_service.requests.post') as post:
            result = dispatcher.notify(submission)

        assert result['chat_sent'] is False
        post.assert_not_called()


class TestChannelConfig:
    """Optional channel configuration."""

    @pytest.mark.parametrize('setting', ['SMTP_HOST', 'SMTP_PORT', 'SMTP_USER', 'SMTP_PASSWORD', 'CONTACT_EMAIL_TO'])
    def test_email_requires_every_setting(self, email_configured, setting):
        setattr(email_configured, setting, '')
        assert EmailChannelConfig.from_settings() is None

    def test_email_from_address_defaults_to_user(self, email_configured):
        config = EmailChannelConfig.from_settings()
        assert config.from_address == 'mailer@example.com'

    def test_email_from_address_override(self, email_configured):
        email_configured.CONTACT_EMAIL_FROM = 'hello@example.com'
        assert EmailChannelConfig.from_settings().from_address == 'hello@example.com'

    def test_port_465_uses_ssl(self, email_configured):
        email_configured.SMTP_PORT = '465'
        config = EmailChannelConfig.from_settings()
        assert config.use_ssl is True

    def test_port_587_uses_starttls(self, email_configured):
        config = EmailChannelConfig.from_settings()
        assert config.port == 587
        assert config.use_ssl is False

    @pytest.mark.parametrize('setting', ['TWILIO_ACCOUNT_SID', 'TWILIO_AUTH_TOKEN', 'TWILIO_WHATSAPP_FROM'])
    def test_chat_requires_every_setting(self, chat_configured, setting):
        setattr(chat_configured, setting, '')
        assert ChatChannelConfig.from_settings() is None

    def test_chat_default_country_code(self, chat_configured):
        chat_configured.TWILIO_DEFAULT_COUNTRY_CODE = ''
        assert ChatChannelConfig.from_settings().default_country_code == '+91'


class TestPhoneNormalization:

    @pytest.mark.parametrize('raw, expected', [
        ('9999999999', '+919999999999'),
        ('99999 99999', '+919999999999'),
        ('(999) 999-9999', '+919999999999'),
        ('+1 (555) 010-2000', '+15550102000'),
        ('+44 7700 900123', '+447700900123'),
        ('  +91-98765-43210 ', '+919876543210'),
        ('98+76', '+919876'),
        ('(+44) 7700 900123', '+447700900123'),
        (' - +1 555 0100', '+15550100'),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_phone_number(raw, '+91') == expected

    def test_custom_country_code(self):
        assert normalize_phone_number('0244123456', '+233') == '+2330244123456'
