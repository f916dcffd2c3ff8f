# apps/farms/models.py
"""
Farm hierarchy models.

Models:
- Farm: A physical farm site run by a supervisor
- Flock: A batch of birds raised on a farm
- Shed: A house inside a flock's placement, holding a number of chicks

The hierarchy is Farm -> Flock -> Shed. Deleting a parent cascades to its
children and to every ledger entry that references any of them.
"""
from django.db import models
from shared.models import TimestampMixin


class Farm(TimestampMixin):
    """A farm site."""
    name = models.CharField(
        max_length=255,
        unique=True,
        help_text="Farm name (unique)"
    )
    supervisor = models.CharField(max_length=255)
    total_sheds = models.PositiveIntegerField(
        default=0,
        help_text="Number of sheds the farm can house"
    )

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['created_at'], name='farm_created_at_idx'),
        ]

    def __str__(self):
        return self.name


class Flock(TimestampMixin):
    """
    A batch of birds placed on a farm.

    The batch number is stored as ``name``.
    """
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('completed', 'Completed'),
    ]

    farm = models.ForeignKey(
        Farm,
        on_delete=models.CASCADE,
        related_name='flocks'
    )
    name = models.CharField(max_length=255, help_text="Batch number")
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default='active'
    )
    start_date = models.DateField()
    end_date = models.DateField(null=True, blank=True)

    class Meta:
        ordering = ['-start_date', 'name']
        indexes = [
            models.Index(fields=['farm'], name='flock_farm_idx'),
            models.Index(fields=['status'], name='flock_status_idx'),
            models.Index(fields=['start_date'], name='flock_start_date_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.farm.name})"


class Shed(TimestampMixin):
    """A shed holding part of a flock."""
    flock = models.ForeignKey(
        Flock,
        on_delete=models.CASCADE,
        related_name='sheds'
    )
    name = models.CharField(max_length=100, help_text="e.g. Shed-1")
    total_chicks = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['name']
        unique_together = [('flock', 'name')]

    def __str__(self):
        return f"{self.name} / {self.flock.name}"
