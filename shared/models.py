# shared/models.py
"""
Abstract base models.

TimestampMixin: row creation / last-modification times, used by every
farm, flock, shed, buyer and ledger row (and exposed as createdAt/updatedAt).
"""
from django.db import models


class TimestampMixin(models.Model):
    """
    created_at is set once on insert; updated_at on every save().

    QuerySet.update() bypasses save() and leaves updated_at untouched.
    """
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
