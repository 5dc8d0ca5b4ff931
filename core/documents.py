"""
Document conversion for models stored through core.storage.

Records travel as plain dicts keyed by their wire names (e.g. ``sizeMB``,
``createdAt``). Models list the mapping in DOCUMENT_FIELDS.
"""
import logging
from datetime import datetime
from typing import Dict

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from core.storage import StoreError

logger = logging.getLogger(__name__)


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string, the timestamp format of documents."""
    return timezone.now().isoformat()


class DocumentModelMixin:
    """
    Mixin for models that double as store collections.

    DOCUMENT_FIELDS maps document key -> model field name.
    """

    DOCUMENT_FIELDS: Dict[str, str] = {}

    def to_document(self) -> Dict:
        document = {}
        for key, field in self.DOCUMENT_FIELDS.items():
            value = getattr(self, field)
            if isinstance(value, datetime):
                value = value.isoformat()
            document[key] = value
        return document

    @classmethod
    def fields_from_document(cls, document: Dict) -> Dict:
        fields = {}
        for key, field in cls.DOCUMENT_FIELDS.items():
            if key not in document:
                continue
            value = document[key]
            if field == 'created_at' and isinstance(value, str):
                value = cls._parse_timestamp(key, value)
            fields[field] = value
        return fields

    @staticmethod
    def _parse_timestamp(key: str, value: str) -> datetime:
        try:
            parsed = parse_datetime(value)
        except ValueError:
            parsed = None
        if parsed is None:
            logger.error(f"Unreadable timestamp in document field '{key}': {value!r}")
            raise StoreError(f"Invalid {key}: {value!r}")
        return parsed
