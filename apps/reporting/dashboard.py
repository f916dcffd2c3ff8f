# apps/reporting/dashboard.py
"""
Dashboard aggregation.

Single-call payloads for the operations dashboard: entity counts, money
totals, this month against last month, payment status split, top buyers
and a recent activity feed. Every figure comes from an ORM aggregate.
"""
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP

from django.contrib.auth import get_user_model
from django.db.models import Count, Q, Sum
from django.utils import timezone

from apps.buyers.models import Buyer
from apps.farms.models import Farm, Flock, Shed
from apps.ledger.models import Ledger

from .dates import resolve_date_range
from .filters import PAYMENT_STATUS_FILTERS, date_range_filter
from .grouping import round_amount, summed

ZERO = Decimal('0.00')

ACTIVITY_DEFAULT_LIMIT = 10
ACTIVITY_MAX_LIMIT = 50
RECENT_ENTITY_LIMIT = 5
TOP_BUYER_LIMIT = 3


def _month_windows(today):
    """(this month, previous calendar month) as DateRanges."""
    this_month = resolve_date_range('monthly', today=today)
    last_day_of_previous = timezone.localtime(this_month.start).date() - timedelta(days=1)
    last_month = resolve_date_range('monthly', today=last_day_of_previous)
    return this_month, last_month


def _month_totals(window):
    totals = Ledger.objects.filter(date_range_filter(window)).aggregate(
        revenue=summed('total_amount'),
        transactions=Count('id'),
        birds=Sum('number_of_birds'),
        net_weight=summed('net_weight'),
    )
    return {
        'revenue': totals['revenue'] or ZERO,
        'transactions': totals['transactions'],
        'birds': totals['birds'] or 0,
        'net_weight': totals['net_weight'] or ZERO,
    }


def _average(total, count):
    return round_amount(Decimal(total) / count) if count else ZERO


def percent_change(current, previous):
    """Whole-number percentage change; 100 when growing from zero."""
    if not previous:
        return 100 if current > 0 else 0
    change = (Decimal(current) - Decimal(previous)) / Decimal(previous) * 100
    return int(change.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def get_dashboard_summary(today=None):
    """
    Returns dict with entityCounts, financialSummary, thisMonth, lastMonth,
    averages, paymentStatus and topBuyers.
    """
    today = today or timezone.localdate()
    this_month_window, last_month_window = _month_windows(today)

    # ─── ENTITY COUNTS ──────────────────────────────────────────────────────

    flocks = Flock.objects.aggregate(
        active=Count('id', filter=Q(status='active')),
        completed=Count('id', filter=Q(status='completed')),
    )
    entity_counts = {
        'totalFarms': Farm.objects.count(),
        'totalBuyers': Buyer.objects.count(),
        'totalSheds': Shed.objects.count(),
        'totalUsers': get_user_model().objects.count(),
        'activeFlocks': flocks['active'],
        'completedFlocks': flocks['completed'],
    }

    # ─── MONEY ──────────────────────────────────────────────────────────────

    overall = Ledger.objects.aggregate(
        revenue=summed('total_amount'),
        paid=summed('amount_paid'),
        transactions=Count('id'),
    )
    total_revenue = overall['revenue'] or ZERO
    total_paid = overall['paid'] or ZERO

    this_month = _month_totals(this_month_window)
    last_month = _month_totals(last_month_window)

    # ─── PAYMENT STATUS ─────────────────────────────────────────────────────

    status_totals = Ledger.objects.aggregate(**{
        name: aggregate
        for status, factory in PAYMENT_STATUS_FILTERS.items()
        for name, aggregate in (
            (f'{status}_count', Count('id', filter=factory())),
            (f'{status}_amount', summed('total_amount', filter=factory())),
        )
    })
    payment_status = {
        status: {
            'count': status_totals[f'{status}_count'],
            'totalAmount': round_amount(status_totals[f'{status}_amount'] or ZERO),
        }
        for status in PAYMENT_STATUS_FILTERS
    }

    # ─── TOP BUYERS ─────────────────────────────────────────────────────────

    top_buyers = (
        Ledger.objects
        .values('buyer_id', 'buyer__name')
        .annotate(
            transaction_count=Count('id'),
            total_amount_sum=summed('total_amount'),
            total_birds=Sum('number_of_birds'),
        )
        .order_by('-total_amount_sum', 'buyer_id')[:TOP_BUYER_LIMIT]
    )

    return {
        'entityCounts': entity_counts,
        'financialSummary': {
            'totalRevenue': round_amount(total_revenue),
            'totalPaid': round_amount(total_paid),
            'outstandingBalance': round_amount(total_revenue - total_paid),
            'totalTransactions': overall['transactions'],
        },
        'thisMonth': {
            'revenue': round_amount(this_month['revenue']),
            'transactions': this_month['transactions'],
            'birdsSold': this_month['birds'],
            'netWeight': round_amount(this_month['net_weight']),
        },
        'lastMonth': {
            'revenue': round_amount(last_month['revenue']),
            'transactions': last_month['transactions'],
        },
        'averages': {
            'transactionValue': _average(total_revenue, overall['transactions']),
            'birdsPerTransaction': _average(this_month['birds'], this_month['transactions']),
            'netWeightPerTransaction': _average(this_month['net_weight'], this_month['transactions']),
        },
        'paymentStatus': payment_status,
        'topBuyers': [
            {
                'id': row['buyer_id'],
                'name': row['buyer__name'],
                'transactionCount': row['transaction_count'],
                'totalAmount': round_amount(row['total_amount_sum']),
                'totalBirds': row['total_birds'],
            }
            for row in top_buyers
        ],
    }


def get_recent_activity(limit=None):
    """
    Newest ledger entries, flocks and farms as display-ready feed items.

    limit applies to transactions only: default 10, at most 50.
    """
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        limit = ACTIVITY_DEFAULT_LIMIT
    if limit < 1:
        limit = ACTIVITY_DEFAULT_LIMIT
    limit = min(limit, ACTIVITY_MAX_LIMIT)

    ledgers = Ledger.objects.select_related('buyer', 'farm').order_by('-created_at', '-id')[:limit]
    flocks = (
        Flock.objects.select_related('farm')
        .annotate(chick_count=Sum('sheds__total_chicks'))
        .order_by('-created_at', '-id')[:RECENT_ENTITY_LIMIT]
    )
    farms = Farm.objects.order_by('-created_at', '-id')[:RECENT_ENTITY_LIMIT]

    return {
        'recentTransactions': [
            {
                'id': ledger.pk,
                'type': 'transaction',
                'title': f'Transaction with {ledger.buyer.name}',
                'description': f'{ledger.number_of_birds} birds, {ledger.net_weight}kg, {ledger.farm.name}',
                'amount': ledger.total_amount,
                'date': ledger.date,
                'createdAt': ledger.created_at,
                'vehicleNumber': ledger.vehicle_number,
                'driverName': ledger.driver_name,
            }
            for ledger in ledgers
        ],
        'recentFlocks': [
            {
                'id': flock.pk,
                'type': 'flock',
                'title': f'Flock {flock.name} started',
                'description': f'{flock.chick_count or 0} chicks at {flock.farm.name}',
                'status': flock.status,
                'startDate': flock.start_date,
                'createdAt': flock.created_at,
            }
            for flock in flocks
        ],
        'recentFarms': [
            {
                'id': farm.pk,
                'type': 'farm',
                'title': f'Farm {farm.name} added',
                'description': f'Supervisor: {farm.supervisor}',
                'createdAt': farm.created_at,
            }
            for farm in farms
        ],
    }


def get_dashboard_stats(today=None):
    """This month against the previous calendar month, with percentage changes."""
    today = today or timezone.localdate()
    this_month_window, last_month_window = _month_windows(today)
    this_month = _month_totals(this_month_window)
    last_month = _month_totals(last_month_window)

    def shaped(totals):
        return {
            'revenue': round_amount(totals['revenue']),
            'transactions': totals['transactions'],
            'birds': totals['birds'],
            'netWeight': round_amount(totals['net_weight']),
        }

    return {
        'thisMonth': shaped(this_month),
        'lastMonth': shaped(last_month),
        'changes': {
            'revenue': percent_change(this_month['revenue'], last_month['revenue']),
            'transactions': percent_change(this_month['transactions'], last_month['transactions']),
            'birds': percent_change(this_month['birds'], last_month['birds']),
            'netWeight': percent_change(this_month['net_weight'], last_month['net_weight']),
        },
    }
