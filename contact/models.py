"""
Contact Models

Database schema for contact form submissions, used when the store runs in
database mode.
"""
from django.db import models
from django.utils import timezone

from core.documents import DocumentModelMixin


class ContactSubmission(DocumentModelMixin, models.Model):
    """
    Contact form submission from the portfolio site.

    Immutable once stored; never deleted by the application.
    """

    DOCUMENT_FIELDS = {
        'name': 'name',
        'email': 'email',
        'phone': 'phone',
        'message': 'message',
        'createdAt': 'created_at',
    }

    name = models.TextField(
        help_text="Name of the person making contact"
    )

    email = models.TextField(
        help_text="Email address for follow-up"
    )

    phone = models.TextField(
        help_text="Phone number as entered (normalized only for WhatsApp)"
    )

    message = models.TextField(
        help_text="The message content"
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="When the message was submitted"
    )

    class Meta:
        db_table = 'contact_submissions'
        ordering = ['-created_at']
        verbose_name = 'Contact Submission'
        verbose_name_plural = 'Contact Submissions'

    def __str__(self):
        return f"{self.name} <{self.email}>"
