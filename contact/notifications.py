"""
Contact Notification Dispatcher

Delivers a contact submission over two independent channels:

- Email: an alert to the site owner (reply-to the submitter) followed by a
  confirmation to the submitter
- WhatsApp: a thank-you message to the submitter's phone

Each channel is skipped when its configuration is incomplete. Failures are
logged and reported in the result, never raised.
"""
import logging
from typing import Dict, Optional

from django.conf import settings
from django.core.mail import EmailMessage, get_connection

from core.whatsapp_service import ChatChannelConfig, WhatsAppService

logger = logging.getLogger(__name__)


class EmailChannelConfig:
    """
    SMTP settings for the email channel.

    from_settings() returns None unless host, port, user, password and the
    recipient address are all set.
    """

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        recipient: str,
        from_address: Optional[str] = None,
        use_tls: bool = True,
        timeout: int = 10,
        backend: str = 'django.core.mail.backends.smtp.EmailBackend'
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.recipient = recipient
        self.from_address = from_address or user
        self.use_tls = use_tls
        self.timeout = timeout
        self.backend = backend

    @classmethod
    def from_settings(cls) -> Optional['EmailChannelConfig']:
        host = getattr(settings, 'SMTP_HOST', '')
        port = getattr(settings, 'SMTP_PORT', '')
        user = getattr(settings, 'SMTP_USER', '')
        password = getattr(settings, 'SMTP_PASSWORD', '')
        recipient = getattr(settings, 'CONTACT_EMAIL_TO', '')

        if not (host and port and user and password and recipient):
            return None

        try:
            port = int(port)
        except (TypeError, ValueError):
            port = 587

        return cls(
            host=host,
            port=port,
            user=user,
            password=password,
            recipient=recipient,
            from_address=getattr(settings, 'CONTACT_EMAIL_FROM', '') or None,
            use_tls=getattr(settings, 'SMTP_USE_TLS', True),
            timeout=getattr(settings, 'SMTP_TIMEOUT', 10),
            backend=getattr(settings, 'EMAIL_BACKEND', 'django.core.mail.backends.smtp.EmailBackend'),
        )

    @property
    def use_ssl(self) -> bool:
        # Port 465 speaks implicit TLS; everything else upgrades with STARTTLS
        return self.port == 465

    def get_connection(self):
        return get_connection(
            backend=self.backend,
            host=self.host,
            port=self.port,
            username=self.user,
            password=self.password,
            use_ssl=self.use_ssl,
            use_tls=self.use_tls and not self.use_ssl,
            timeout=self.timeout,
            fail_silently=False,
        )


class ContactEmailService:
    """Sends the two contact emails over one SMTP connection."""

    def __init__(self, config: EmailChannelConfig, owner_name: str):
        self.config = config
        self.owner_name = owner_name

    def build_messages(self, submission: Dict):
        name = submission['name']
        email = submission['email']

        # Email to the site owner
        admin_message = EmailMessage(
            subject=f"New contact from {name}",
            body=(
                f"Name: {name}\n"
                f"Email: {email}\n"
                f"Phone: {submission['phone']}\n"
                f"\n"
                f"{submission['message']}"
            ),
            from_email=self.config.from_address,
            to=[self.config.recipient],
            reply_to=[email],
        )

        # Confirmation email to the visitor
        confirmation = EmailMessage(
            subject=f"Thanks for contacting {self.owner_name}",
            body=(
                f"Hello {name},\n"
                f"\n"
                f"Thank you for reaching out! {self.owner_name} will contact you soon.\n"
                f"\n"
                f"Your message:\n"
                f"{submission['message']}\n"
                f"\n"
                f"Regards,\n"
                f"{self.owner_name}"
            ),
            from_email=self.config.from_address,
            to=[email],
        )

        return [admin_message, confirmation]

    def send(self, submission: Dict) -> Dict:
        """
        Send the admin alert, then the confirmation.

        Returns:
            dict: success flag, plus the error when either send failed
        """
        try:
            connection = self.config.get_connection()
            with connection:
                for message in self.build_messages(submission):
                    message.connection = connection
                    message.send(fail_silently=False)
        except Exception as e:
            logger.error(f"Email error for contact from {submission.get('email')}: {e}")
            return {'success': False, 'error': str(e)}

        logger.info(f"Contact emails sent for {submission.get('email')}")
        return {'success': True}


class NotificationDispatcher:
    """
    Runs every configured channel for a submission.

    Usage:
        dispatcher = NotificationDispatcher.from_settings()
        result = dispatcher.notify(submission)
        result['email_sent'], result['chat_sent']
    """

    def __init__(
        self,
        email_config: Optional[EmailChannelConfig] = None,
        chat_config: Optional[ChatChannelConfig] = None,
        owner_name: str = 'the site owner'
    ):
        self.email_config = email_config
        self.chat_config = chat_config
        self.owner_name = owner_name

    @classmethod
    def from_settings(cls) -> 'NotificationDispatcher':
        return cls(
            email_config=EmailChannelConfig.from_settings(),
            chat_config=ChatChannelConfig.from_settings(),
            owner_name=getattr(settings, 'PORTFOLIO_OWNER_NAME', 'the site owner'),
        )

    def send_email(self, submission: Dict) -> bool:
        if self.email_config is None:
            return False
        result = ContactEmailService(self.email_config, self.owner_name).send(submission)
        return result['success']

    def send_chat(self, submission: Dict) -> bool:
        if self.chat_config is None:
            return False

        message = (
            f"Hello {submission['name']}, thank you for contacting {self.owner_name}! "
            f"You will hear back soon."
        )
        try:
            result = WhatsAppService(self.chat_config).send_message(submission['phone'], message)
        except Exception as e:
            logger.error(f"WhatsApp error for contact from {submission.get('email')}: {e}")
            return False

        if not result.get('success'):
            logger.error(f"WhatsApp error for contact from {submission.get('email')}: {result.get('error')}")
            return False
        return True

    def notify(self, submission: Dict) -> Dict[str, bool]:
        """
        Attempt email then WhatsApp; neither outcome stops the other.

        Returns:
            dict: {'email_sent': bool, 'chat_sent': bool}
        """
        email_sent = self.send_email(submission)
        chat_sent = self.send_chat(submission)
        return {'email_sent': email_sent, 'chat_sent': chat_sent}
