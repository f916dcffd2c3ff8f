# apps/reporting/grouping.py
"""
Ledger grouping and per-group statistics.

GroupingEngine sends the composed filter to the database twice at most:

1. one GROUP BY query returning a row of sums, counts and first/last dates
   per group (references joined for the group descriptors)
2. when details are requested, one query for the transaction rows of the
   requested page (every row when exporting), paginated per group with a
   ROW_NUMBER() window

Dimensions are a closed set, dispatched through GROUPING_STRATEGIES. Unknown
tags fall back to 'none', which puts every row in one implicit group.

Summaries keep unrounded Decimal sums so they can be merged exactly;
rounding happens only in GroupSummary.as_dict().
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, List, Optional

from django.db import models
from django.db.models import Count, F, Max, Min, Sum, Window
from django.db.models.functions import RowNumber, TruncDate
from django.utils import timezone

from apps.ledger.models import Ledger

ZERO = Decimal('0')
CENT = Decimal('0.01')

DEFAULT_SORT_FIELD = 'date'

# Allowed sortBy values -> Ledger attribute
SORT_FIELDS = {
    'date': 'date',
    'totalAmount': 'total_amount',
    'amountPaid': 'amount_paid',
    'netWeight': 'net_weight',
    'numberOfBirds': 'number_of_birds',
    'rate': 'rate',
    'vehicleNumber': 'vehicle_number',
    'driverName': 'driver_name',
    'createdAt': 'created_at',
    'updatedAt': 'updated_at',
}


def round_amount(value):
    """Round a money/weight figure to 2 places for display."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def local_day(moment):
    """Calendar day of a timestamp in the active timezone."""
    return timezone.localtime(moment).date()


def summed(field_name, **extra):
    # Wider than the column so totals over many rows still fit.
    return Sum(field_name, output_field=models.DecimalField(max_digits=24, decimal_places=2), **extra)


def summary_aggregates():
    return {
        'transaction_count': Count('id'),
        'sum_empty_weight': summed('empty_vehicle_weight'),
        'sum_gross_weight': summed('gross_weight'),
        'sum_net_weight': summed('net_weight'),
        'sum_birds': Sum('number_of_birds'),
        'sum_rate': summed('rate'),
        'sum_amount': summed('total_amount'),
        'sum_paid': summed('amount_paid'),
        'earliest': Min('date'),
        'latest': Max('date'),
        'newest_id': Max('id'),
    }


# ===== REFERENCE DESCRIPTORS =====

def buyer_info(buyer):
    return {'id': buyer.pk, 'name': buyer.name, 'contactNumber': buyer.contact_number, 'address': buyer.address}


def farm_info(farm):
    return {'id': farm.pk, 'name': farm.name, 'supervisor': farm.supervisor}


def flock_info(flock):
    return {'id': flock.pk, 'name': flock.name, 'status': flock.status}


def shed_info(shed):
    return {'id': shed.pk, 'name': shed.name, 'totalChicks': shed.total_chicks}


def serialize_transaction(ledger):
    """Joined, display-ready dict for one ledger row (requires ``balance`` annotation)."""
    return {
        'id': ledger.pk,
        'date': ledger.date,
        'vehicleNumber': ledger.vehicle_number,
        'driverName': ledger.driver_name,
        'driverContact': ledger.driver_contact,
        'accountantName': ledger.accountant_name,
        'emptyVehicleWeight': ledger.empty_vehicle_weight,
        'grossWeight': ledger.gross_weight,
        'netWeight': ledger.net_weight,
        'numberOfBirds': ledger.number_of_birds,
        'rate': ledger.rate,
        'totalAmount': ledger.total_amount,
        'amountPaid': ledger.amount_paid,
        'balance': ledger.balance,
        'buyerInfo': buyer_info(ledger.buyer),
        'farmInfo': farm_info(ledger.farm),
        'flockInfo': flock_info(ledger.flock),
        'shedInfo': shed_info(ledger.shed),
        'createdAt': ledger.created_at,
        'updatedAt': ledger.updated_at,
    }


# ===== GROUPING STRATEGIES =====

@dataclass(frozen=True)
class GroupingStrategy:
    """
    expression: group key as a query expression; None means one implicit group
    key:        the same key read off a fetched Ledger row
    describe:   aggregate row -> groupInfo
    columns:    extra grouped columns read by ``describe``
    extra:      extra aggregates read by ``describe``
    group_id:   group key -> groupId in the response
    """
    expression: Any
    key: Callable[[Ledger], Any]
    describe: Callable[[dict], Optional[dict]]
    columns: tuple = ()
    extra: dict = field(default_factory=dict)
    group_id: Callable[[Any], Any] = lambda value: value


GROUPING_STRATEGIES = {
    'buyer': GroupingStrategy(
        expression=F('buyer_id'),
        key=lambda ledger: ledger.buyer_id,
        columns=('buyer__name', 'buyer__contact_number', 'buyer__address'),
        describe=lambda row: {
            'id': row['group_key'],
            'name': row['buyer__name'],
            'contactNumber': row['buyer__contact_number'],
            'address': row['buyer__address'],
        },
    ),
    'farm': GroupingStrategy(
        expression=F('farm_id'),
        key=lambda ledger: ledger.farm_id,
        columns=('farm__name', 'farm__supervisor'),
        describe=lambda row: {'id': row['group_key'], 'name': row['farm__name'], 'supervisor': row['farm__supervisor']},
    ),
    'flock': GroupingStrategy(
        expression=F('flock_id'),
        key=lambda ledger: ledger.flock_id,
        columns=('flock__name', 'flock__status'),
        describe=lambda row: {'id': row['group_key'], 'name': row['flock__name'], 'status': row['flock__status']},
    ),
    'shed': GroupingStrategy(
        expression=F('shed_id'),
        key=lambda ledger: ledger.shed_id,
        columns=('shed__name', 'shed__total_chicks'),
        describe=lambda row: {
            'id': row['group_key'],
            'name': row['shed__name'],
            'totalChicks': row['shed__total_chicks'],
        },
    ),
    'driver': GroupingStrategy(
        expression=F('driver_name'),
        key=lambda ledger: ledger.driver_name,
        extra={'driver_contact': Max('driver_contact')},
        describe=lambda row: {'driverName': row['group_key'], 'driverContact': row['driver_contact']},
    ),
    'accountant': GroupingStrategy(
        expression=F('accountant_name'),
        key=lambda ledger: ledger.accountant_name,
        describe=lambda row: {'accountantName': row['group_key']},
    ),
    'date': GroupingStrategy(
        expression=TruncDate('date'),
        key=lambda ledger: local_day(ledger.date),
        describe=lambda row: {'date': row['group_key'].isoformat()},
        group_id=lambda value: value.isoformat(),
    ),
    'none': GroupingStrategy(expression=None, key=lambda ledger: None, describe=lambda row: None),
}

GROUP_BY_CHOICES = tuple(GROUPING_STRATEGIES)


def normalize_group_by(value):
    """Return ``value`` if it is a known dimension, else 'none'."""
    return value if value in GROUPING_STRATEGIES else 'none'


# ===== SUMMARIES =====

@dataclass
class GroupSummary:
    """
    Aggregate statistics for a set of ledger rows.

    Sums are exact; averages are always derived as sum / count, so merging
    summaries and then averaging gives the same answer as averaging the
    underlying rows directly.
    """
    total_transactions: int = 0
    total_empty_vehicle_weight: Decimal = ZERO
    total_gross_weight: Decimal = ZERO
    total_net_weight: Decimal = ZERO
    total_birds: int = 0
    total_rate: Decimal = ZERO
    total_amount: Decimal = ZERO
    total_paid: Decimal = ZERO
    total_balance: Decimal = ZERO
    earliest: Optional[date] = None
    latest: Optional[date] = None

    @classmethod
    def from_row(cls, row):
        """Build a summary from one row of summary_aggregates()."""
        if not row['transaction_count']:
            return cls()
        amount = row['sum_amount'] or ZERO
        paid = row['sum_paid'] or ZERO
        return cls(
            total_transactions=row['transaction_count'],
            total_empty_vehicle_weight=row['sum_empty_weight'] or ZERO,
            total_gross_weight=row['sum_gross_weight'] or ZERO,
            total_net_weight=row['sum_net_weight'] or ZERO,
            total_birds=row['sum_birds'] or 0,
            total_rate=row['sum_rate'] or ZERO,
            total_amount=amount,
            total_paid=paid,
            total_balance=amount - paid,
            earliest=local_day(row['earliest']),
            latest=local_day(row['latest']),
        )

    @classmethod
    def of(cls, queryset):
        """Summarise a ledger queryset in one aggregate query."""
        return cls.from_row(queryset.aggregate(**summary_aggregates()))

    @classmethod
    def combine(cls, summaries):
        """Merge several summaries into one (sum first, average later)."""
        combined = cls()
        for summary in summaries:
            combined.merge(summary)
        return combined

    def merge(self, other):
        self.total_transactions += other.total_transactions
        self.total_empty_vehicle_weight += other.total_empty_vehicle_weight
        self.total_gross_weight += other.total_gross_weight
        self.total_net_weight += other.total_net_weight
        self.total_birds += other.total_birds
        self.total_rate += other.total_rate
        self.total_amount += other.total_amount
        self.total_paid += other.total_paid
        self.total_balance += other.total_balance
        if other.earliest is not None:
            if self.earliest is None or other.earliest < self.earliest:
                self.earliest = other.earliest
            if self.latest is None or other.latest > self.latest:
                self.latest = other.latest

    def average(self, total):
        if not self.total_transactions:
            return ZERO
        return Decimal(total) / self.total_transactions

    def date_range(self):
        return {
            'from': self.earliest.isoformat() if self.earliest else None,
            'to': self.latest.isoformat() if self.latest else None,
        }

    def as_dict(self):
        return {
            'totalTransactions': self.total_transactions,
            'totalEmptyVehicleWeight': round_amount(self.total_empty_vehicle_weight),
            'totalGrossWeight': round_amount(self.total_gross_weight),
            'totalNetWeight': round_amount(self.total_net_weight),
            'totalBirds': self.total_birds,
            'totalRate': round_amount(self.total_rate),
            'totalAmount': round_amount(self.total_amount),
            'totalPaid': round_amount(self.total_paid),
            'totalBalance': round_amount(self.total_balance),
            'averageRate': round_amount(self.average(self.total_rate)),
            'averageNetWeight': round_amount(self.average(self.total_net_weight)),
            'averageBirdsPerTransaction': round_amount(self.average(self.total_birds)),
            'dateRange': self.date_range(),
        }


@dataclass
class GroupResult:
    group_id: Any
    group_info: Optional[dict]
    summary: GroupSummary
    transactions: List[Ledger] = field(default_factory=list)

    def as_dict(self):
        return {
            'groupId': self.group_id,
            'groupInfo': self.group_info,
            'summary': self.summary.as_dict(),
            'transactions': [serialize_transaction(ledger) for ledger in self.transactions],
        }


# ===== ENGINE =====

class GroupingEngine:
    """
    Summarise ledger rows per group and fetch the rows to display.

    Usage:
        engine = GroupingEngine(group_by='buyer', sort_by='totalAmount', sort_order='asc',
                                offset=0, limit=10)
        groups = engine.run(predicate)  # list[GroupResult]
    """

    def __init__(self, group_by='none', sort_by=DEFAULT_SORT_FIELD, sort_order='desc',
                 offset=0, limit=10, include_details=True, for_export=False):
        self.group_by = normalize_group_by(group_by)
        self.strategy = GROUPING_STRATEGIES[self.group_by]
        self.sort_attr = SORT_FIELDS.get(sort_by, SORT_FIELDS[DEFAULT_SORT_FIELD])
        self.descending = sort_order != 'asc'
        self.offset = offset
        self.limit = limit
        self.include_details = include_details
        self.for_export = for_export

    def ordering(self):
        """Transaction ordering; ties are broken by id in the same direction."""
        prefix = '-' if self.descending else ''
        return [f'{prefix}{self.sort_attr}', f'{prefix}id']

    def aggregate(self, predicate):
        """
        One aggregate row per group, newest group first.

        A group's position is that of its newest entry, matching the order
        in which groups first appear among rows sorted by -date, -id.
        """
        queryset = Ledger.objects.filter(predicate)
        if self.strategy.expression is None:
            row = queryset.aggregate(**summary_aggregates())
            if not row['transaction_count']:
                return []
            return [dict(row, group_key=None)]
        return list(
            queryset
            .annotate(group_key=self.strategy.expression)
            .values('group_key', *self.strategy.columns)
            .annotate(**summary_aggregates(), **self.strategy.extra)
            .order_by('-latest', '-newest_id')
        )

    def fetch_transactions(self, predicate):
        """Rows returned with the groups: none, all (export) or the requested page of each group."""
        if not self.include_details:
            return []
        queryset = Ledger.objects.for_report().filter(predicate)
        if self.for_export:
            return list(queryset.order_by(*self.ordering()))
        if self.strategy.expression is None:
            return list(queryset.order_by(*self.ordering())[self.offset:self.offset + self.limit])
        return list(
            queryset
            .annotate(position=Window(
                RowNumber(),
                partition_by=[self.strategy.expression],
                order_by=self.ordering(),
            ))
            .filter(position__gt=self.offset, position__lte=self.offset + self.limit)
            .order_by(*self.ordering())
        )

    def run(self, predicate):
        rows = self.aggregate(predicate)
        if not rows:
            return []
        buckets = {}
        for ledger in self.fetch_transactions(predicate):
            buckets.setdefault(self.strategy.key(ledger), []).append(ledger)
        return [
            GroupResult(
                group_id=self.strategy.group_id(row['group_key']),
                group_info=self.strategy.describe(row),
                summary=GroupSummary.from_row(row),
                transactions=buckets.get(row['group_key'], []),
            )
            for row in rows
        ]
