# apps/ledger/models.py
"""
Ledger model: one weighing/sale transaction.

A Ledger row links a Buyer to a specific Farm -> Flock -> Shed and records the
vehicle weighing (empty, gross, net), the bird count, the rate and the money
owed and paid.

Write-time invariants (enforced by LedgerValidator, assumed afterwards):
- gross_weight > empty_vehicle_weight
- net_weight == gross_weight - empty_vehicle_weight
- |total_amount - net_weight * rate| <= 0.01
- flock.farm == farm and shed.flock == flock

``balance`` (total_amount - amount_paid) is never stored. Use
``Ledger.objects.with_balance()`` to get it as a query annotation, or the
``outstanding`` property on a single instance.
"""
from decimal import Decimal
from django.db import models
from django.db.models import F
from shared.models import TimestampMixin

MONEY_FIELD_KWARGS = {'max_digits': 14, 'decimal_places': 2}


class LedgerQuerySet(models.QuerySet):

    def with_balance(self):
        """Annotate ``balance`` = total_amount - amount_paid."""
        return self.annotate(
            balance=models.ExpressionWrapper(
                F('total_amount') - F('amount_paid'),
                output_field=models.DecimalField(**MONEY_FIELD_KWARGS),
            )
        )

    def with_references(self):
        """Join farm, flock, shed and buyer in the same query."""
        return self.select_related('farm', 'flock', 'shed', 'buyer')

    def for_report(self):
        return self.with_references().with_balance()


class Ledger(TimestampMixin):
    farm = models.ForeignKey(
        'farms.Farm',
        on_delete=models.CASCADE,
        related_name='ledgers'
    )
    flock = models.ForeignKey(
        'farms.Flock',
        on_delete=models.CASCADE,
        related_name='ledgers'
    )
    shed = models.ForeignKey(
        'farms.Shed',
        on_delete=models.CASCADE,
        related_name='ledgers'
    )
    buyer = models.ForeignKey(
        'buyers.Buyer',
        on_delete=models.CASCADE,
        related_name='ledgers'
    )

    vehicle_number = models.CharField(max_length=20)
    driver_name = models.CharField(max_length=100)
    driver_contact = models.CharField(max_length=20)
    accountant_name = models.CharField(max_length=100)

    empty_vehicle_weight = models.DecimalField(**MONEY_FIELD_KWARGS)
    gross_weight = models.DecimalField(**MONEY_FIELD_KWARGS)
    net_weight = models.DecimalField(**MONEY_FIELD_KWARGS)
    number_of_birds = models.PositiveIntegerField()
    rate = models.DecimalField(
        help_text="Price per unit of net weight",
        **MONEY_FIELD_KWARGS
    )
    total_amount = models.DecimalField(**MONEY_FIELD_KWARGS)
    amount_paid = models.DecimalField(default=Decimal('0'), **MONEY_FIELD_KWARGS)
    date = models.DateTimeField(help_text="When the weighing/sale took place")

    objects = LedgerQuerySet.as_manager()

    class Meta:
        ordering = ['-date', '-id']
        indexes = [
            models.Index(fields=['date'], name='ledger_date_idx'),
            models.Index(fields=['buyer', '-date'], name='ledger_buyer_date_idx'),
        ]

    def __str__(self):
        return f"{self.vehicle_number} {self.date:%Y-%m-%d} ({self.buyer_id})"

    @property
    def outstanding(self):
        """Amount still owed on this transaction."""
        return self.total_amount - self.amount_paid
