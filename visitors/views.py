"""
Visitor Counter Views
"""
import logging

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny

from core.storage import StoreError, get_store
from .services import VisitorCounterService

logger = logging.getLogger(__name__)


class VisitorCountView(APIView):
    """
    Increment and return the visit counter.

    GET /api/visitors
    """

    permission_classes = [AllowAny]

    def get(self, request):
        try:
            count = VisitorCounterService(get_store()).bump()
        except StoreError as e:
            logger.error(f"Visitor counter update failed: {e}")
            return Response(
                {'error': 'Failed to update counter'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response({'count': count})
