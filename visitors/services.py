"""
Visitor counter service.
"""
from core.storage import COUNTER_ID, BaseStore


class VisitorCounterService:
    """Counts page loads. Every call increments; visitors are not deduplicated."""

    def __init__(self, store: BaseStore):
        self.store = store

    def bump(self) -> int:
        """Increment the global counter and return the new value."""
        return self.store.increment(COUNTER_ID)
