"""
Twilio WhatsApp Service.
Sends WhatsApp messages through the Twilio Messages API.

Official Twilio API Documentation:
https://www.twilio.com/docs/whatsapp/api
"""
import re
import requests
import logging
from typing import Dict, Optional
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)


class ChatChannelConfig:
    """
    Credentials for the WhatsApp channel.

    Built with from_settings(), which returns None unless the account SID,
    auth token and sender address are all set.
    """

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_address: str,
        default_country_code: str = '+91',
        api_base_url: str = 'https://api.twilio.com/2010-04-01',
        timeout: int = 10
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_address = from_address
        self.default_country_code = default_country_code
        self.api_base_url = api_base_url.rstrip('/')
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> Optional['ChatChannelConfig']:
        account_sid = getattr(settings, 'TWILIO_ACCOUNT_SID', '')
        auth_token = getattr(settings, 'TWILIO_AUTH_TOKEN', '')
        from_address = getattr(settings, 'TWILIO_WHATSAPP_FROM', '')

        if not (account_sid and auth_token and from_address):
            return None

        return cls(
            account_sid=account_sid,
            auth_token=auth_token,
            from_address=from_address,
            default_country_code=getattr(settings, 'TWILIO_DEFAULT_COUNTRY_CODE', '+91') or '+91',
            api_base_url=getattr(settings, 'TWILIO_API_BASE_URL', 'https://api.twilio.com/2010-04-01'),
            timeout=getattr(settings, 'TWILIO_TIMEOUT', 10),
        )

    @property
    def messages_url(self) -> str:
        return f"{self.api_base_url}/Accounts/{self.account_sid}/Messages.json"


def normalize_phone_number(phone: str, default_country_code: str = '+91') -> str:
    """
    Normalize a phone number to E.164-style digits.

    Drops everything but digits and '+'. A '+' left in front means the
    number already carries its country code; otherwise the default
    country code is prefixed.

    Examples:
        '+91 98765-43210'   -> '+919876543210'
        '(+44) 7700 900123' -> '+447700900123'
        '(999) 999 9999'    -> '+919999999999'
    """
    cleaned = re.sub(r'[^\d+]', '', phone or '')
    digits = re.sub(r'\D', '', cleaned)

    if cleaned.startswith('+'):
        return f'+{digits}'

    return f'{default_country_code}{digits}'


class WhatsAppService:
    """
    Service for sending WhatsApp messages via the Twilio API.

    Every call makes exactly one request with a bounded timeout; failures
    are returned in the result dict, never raised.
    """

    def __init__(self, config: ChatChannelConfig):
        self.config = config

    def send_message(self, phone_number: str, message: str) -> Dict:
        """
        Send one WhatsApp message.

        Args:
            phone_number: Recipient phone number in any common format
            message: Message body

        Returns:
            dict: Response with success flag, message sid and error info
        """
        to_number = normalize_phone_number(phone_number, self.config.default_country_code)

        if not re.search(r'\d', phone_number or ''):
            logger.error(f"Cannot send WhatsApp message: no digits in phone number {phone_number!r}")
            return {
                'success': False,
                'error': 'Phone number has no digits',
                'phone_number': to_number,
                'timestamp': timezone.now().isoformat(),
            }

        payload = {
            'From': self.config.from_address,
            'To': f'whatsapp:{to_number}',
            'Body': message,
        }

        try:
            # Twilio takes form-encoded bodies with Basic Auth
            response = requests.post(
                self.config.messages_url,
                data=payload,
                auth=(self.config.account_sid, self.config.auth_token),
                timeout=self.config.timeout
            )

            if response.status_code in (200, 201):
                data = response.json()

                logger.info(
                    f"WhatsApp message sent to {to_number}. "
                    f"Sid: {data.get('sid')}, Status: {data.get('status')}"
                )

                return {
                    'success': True,
                    'message_sid': data.get('sid'),
                    'status': data.get('status'),
                    'phone_number': to_number,
                    'timestamp': timezone.now().isoformat(),
                }

            error_data = response.json() if response.content else {}
            error_message = error_data.get('message', 'Unknown error')

            logger.error(
                f"Failed to send WhatsApp message to {to_number}. "
                f"Status: {response.status_code}, Error: {error_message}"
            )

            return {
                'success': False,
                'error': error_message,
                'status_code': response.status_code,
                'phone_number': to_number,
                'timestamp': timezone.now().isoformat(),
            }

        except requests.exceptions.Timeout:
            logger.error(f"Timeout sending WhatsApp message to {to_number}")
            return {
                'success': False,
                'error': 'Request timeout',
                'phone_number': to_number,
                'timestamp': timezone.now().isoformat(),
            }

        except requests.exceptions.RequestException as e:
            logger.error(f"Network error sending WhatsApp message to {to_number}: {str(e)}")
            return {
                'success': False,
                'error': f'Network error: {str(e)}',
                'phone_number': to_number,
                'timestamp': timezone.now().isoformat(),
            }

        except ValueError as e:
            # Unparseable JSON in the response body
            logger.error(f"Invalid response from Twilio for {to_number}: {str(e)}")
            return {
                'success': False,
                'error': f'Invalid response: {str(e)}',
                'phone_number': to_number,
                'timestamp': timezone.now().isoformat(),
            }
