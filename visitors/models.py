"""
Visitor Counter Models
"""
from django.db import models


class VisitorCounter(models.Model):
    """
    Named counter row. The site uses a single row with id 'global'.

    Only ever changed through an atomic increment in core.storage.
    """

    id = models.CharField(
        primary_key=True,
        max_length=50,
        default='global'
    )

    count = models.PositiveBigIntegerField(default=0)

    class Meta:
        db_table = 'visitor_counters'
        verbose_name = 'Visitor Counter'
        verbose_name_plural = 'Visitor Counters'

    def __str__(self):
        return f"{self.id}: {self.count}"
