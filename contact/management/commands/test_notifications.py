"""
Management command to check contact notification channels.
"""
from django.core.management.base import BaseCommand

from contact.notifications import NotificationDispatcher
from core.documents import now_iso


class Command(BaseCommand):
    help = 'Show contact notification configuration and optionally send a test submission'

    def add_arguments(self, parser):
        parser.add_argument(
            '--send',
            action='store_true',
            help='Send a test submission through every configured channel',
        )
        parser.add_argument('--name', type=str, default='Test Visitor', help='Submitter name')
        parser.add_argument('--email', type=str, help='Submitter email (receives the confirmation)')
        parser.add_argument('--phone', type=str, help='Submitter phone (receives the WhatsApp message)')

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS('\n=== CONTACT NOTIFICATION TEST ===\n'))

        dispatcher = NotificationDispatcher.from_settings()
        self.show_configuration(dispatcher)

        if options['send']:
            self.send_test(dispatcher, options)

        self.stdout.write(self.style.SUCCESS('\n=== TEST COMPLETED ===\n'))

    def show_configuration(self, dispatcher):
        """Display current channel configuration."""
        self.stdout.write(self.style.NOTICE('Configuration:'))

        email = dispatcher.email_config
        if email:
            self.stdout.write(f'  SMTP: {email.host}:{email.port} (ssl={email.use_ssl}, tls={email.use_tls})')
            self.stdout.write(f'  SMTP User: {email.user}')
            self.stdout.write(f'  Recipient: {email.recipient}')
            self.stdout.write(f'  From: {email.from_address}')
        else:
            self.stdout.write(self.style.WARNING('  Email: Not configured'))

        chat = dispatcher.chat_config
        if chat:
            self.stdout.write(f'  Twilio Account SID: {chat.account_sid[:8]}...')
            self.stdout.write(f'  WhatsApp From: {chat.from_address}')
            self.stdout.write(f'  Default Country Code: {chat.default_country_code}')
        else:
            self.stdout.write(self.style.WARNING('  WhatsApp: Not configured'))

        if not email and not chat:
            self.stdout.write(self.style.WARNING('\nNo channel configured. Submissions will only be saved.\n'))

    def send_test(self, dispatcher, options):
        if not options.get('email') or not options.get('phone'):
            self.stdout.write(self.style.ERROR('Error: --email and --phone required for --send'))
            return

        submission = {
            'name': options['name'],
            'email': options['email'],
            'phone': options['phone'],
            'message': 'This is a test message from the contact notification check.',
            'createdAt': now_iso(),
        }

        result = dispatcher.notify(submission)
        for channel, sent in (('Email', result['email_sent']), ('WhatsApp', result['chat_sent'])):
            if sent:
                self.stdout.write(self.style.SUCCESS(f'  {channel}: sent'))
            else:
                self.stdout.write(self.style.ERROR(f'  {channel}: not sent'))
