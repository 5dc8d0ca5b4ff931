"""
Contact Serializers

Validation for the public contact form.
"""
from rest_framework import serializers

from core.documents import now_iso


class ContactSubmissionSerializer(serializers.Serializer):
    """
    Public contact form serializer.

    All four fields are required and must not be blank. Values are trimmed
    of surrounding whitespace and otherwise stored as submitted.
    """

    name = serializers.CharField(required=True)
    email = serializers.CharField(required=True)
    phone = serializers.CharField(required=True)
    message = serializers.CharField(required=True)

    def to_document(self):
        """Build the stored record, stamped with its creation time."""
        data = self.validated_data
        return {
            'name': data['name'],
            'email': data['email'],
            'phone': data['phone'],
            'message': data['message'],
            'createdAt': now_iso(),
        }
