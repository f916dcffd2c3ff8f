# apps/buyers/models.py
"""Buyer model: the party a ledger entry sells birds to."""
from django.db import models
from shared.models import TimestampMixin


class Buyer(TimestampMixin):
    name = models.CharField(max_length=255)
    contact_number = models.CharField(
        max_length=20,
        unique=True,
        help_text="Phone number (unique per buyer)"
    )
    address = models.CharField(max_length=500, blank=True)

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['name'], name='buyer_name_idx'),
        ]

    def __str__(self):
        return self.name
