"""
Contact Views

API endpoint for contact form submission.
"""
import logging

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny

from core.storage import StoreError, get_store
from .notifications import NotificationDispatcher
from .serializers import ContactSubmissionSerializer

logger = logging.getLogger(__name__)

NOT_CONFIGURED_NOTE = 'Saved. Email/WhatsApp not configured.'


class ContactSubmitView(APIView):
    """
    Public endpoint for contact form submissions.

    POST /api/contact

    Accepts the submission unless a field is missing. Persistence and
    delivery are best-effort and never turn the response into an error.
    """

    permission_classes = [AllowAny]

    def get_store(self):
        return get_store()

    def get_dispatcher(self):
        return NotificationDispatcher.from_settings()

    def post(self, request):
        """Submit a contact form."""
        serializer = ContactSubmissionSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(
                {'ok': False, 'error': 'Missing fields'},
                status=status.HTTP_400_BAD_REQUEST
            )

        submission = serializer.to_document()

        # Persist submission
        try:
            self.get_store().append('contacts', submission)
        except StoreError as e:
            logger.warning(f"Failed to save contact from {submission['email']}, continuing: {e}")

        result = self.get_dispatcher().notify(submission)

        if not result['email_sent'] and not result['chat_sent']:
            return Response({'ok': True, 'note': NOT_CONFIGURED_NOTE})

        return Response({'ok': True})
