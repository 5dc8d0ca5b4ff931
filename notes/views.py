"""
Notes Views
"""
import logging

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny

from core.storage import StoreError, get_store

logger = logging.getLogger(__name__)


class NoteListView(APIView):
    """
    List all notes, newest first.

    GET /api/notes
    """

    permission_classes = [AllowAny]

    def get(self, request):
        try:
            notes = get_store().list('notes', sort_key='createdAt', descending=True)
        except StoreError as e:
            logger.error(f"Failed to fetch notes: {e}")
            return Response(
                {'error': 'Failed to fetch notes'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response({'notes': notes})
