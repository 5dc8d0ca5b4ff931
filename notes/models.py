"""
Notes Models
"""
from django.db import models
from django.utils import timezone

from core.documents import DocumentModelMixin


class Note(DocumentModelMixin, models.Model):
    """
    Downloadable study note shown on the portfolio.

    Reference data: the API only lists notes, newest first.
    """

    DOCUMENT_FIELDS = {
        'subject': 'subject',
        'title': 'title',
        'link': 'link',
        'sizeMB': 'size_mb',
        'createdAt': 'created_at',
    }

    subject = models.CharField(
        max_length=100,
        help_text="Subject the note belongs to (e.g., 'Electronics')"
    )

    title = models.CharField(
        max_length=255,
        help_text="Display title"
    )

    link = models.URLField(
        max_length=500,
        help_text="Download or view URL"
    )

    size_mb = models.FloatField(
        null=True,
        blank=True,
        help_text="File size in megabytes"
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True
    )

    class Meta:
        db_table = 'notes'
        ordering = ['-created_at']
        verbose_name = 'Note'
        verbose_name_plural = 'Notes'

    def __str__(self):
        return f"{self.subject}: {self.title}"
