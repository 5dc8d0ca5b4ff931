"""
Notes Serializers
"""
from rest_framework import serializers

from core.documents import now_iso


class NoteInputSerializer(serializers.Serializer):
    """Validates a note before it is added to the store."""

    subject = serializers.CharField(max_length=100)
    title = serializers.CharField(max_length=255)
    link = serializers.URLField(max_length=500)
    sizeMB = serializers.FloatField(required=False, allow_null=True, min_value=0)

    def to_document(self):
        data = self.validated_data
        return {
            'subject': data['subject'],
            'title': data['title'],
            'link': data['link'],
            'sizeMB': data.get('sizeMB'),
            'createdAt': now_iso(),
        }
