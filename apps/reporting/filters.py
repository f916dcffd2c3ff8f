# apps/reporting/filters.py
"""
Ledger report filters.

build_ledger_filter() turns raw query parameters into one Django Q object.
It never raises: malformed pieces (bad ids, non-numeric bounds, unknown
payment status) are dropped so a typo narrows nothing instead of failing the
report.

All predicates are ANDed. The free-text search is an OR-group across the
ledger's identity fields and the joined buyer/farm/flock/shed names, ANDed
with the rest.
"""
from decimal import Decimal, InvalidOperation

from django.db.models import F, Q

# query param -> ledger lookup for comma-separated id lists
ID_LIST_FILTERS = {
    'buyerIds': 'buyer_id',
    'farmIds': 'farm_id',
    'flockIds': 'flock_id',
    'shedIds': 'shed_id',
}

# query param -> ledger field for comma-separated exact-match string lists
STRING_LIST_FILTERS = {
    'vehicleNumbers': 'vehicle_number',
    'driverNames': 'driver_name',
    'accountantNames': 'accountant_name',
}

# (min param, max param, ledger field)
RANGE_FILTERS = [
    ('minAmount', 'maxAmount', 'total_amount'),
    ('minNetWeight', 'maxNetWeight', 'net_weight'),
    ('minBirds', 'maxBirds', 'number_of_birds'),
    ('minRate', 'maxRate', 'rate'),
]

SEARCH_FIELDS = [
    'vehicle_number',
    'driver_name',
    'driver_contact',
    'accountant_name',
    'buyer__name',
    'buyer__contact_number',
    'farm__name',
    'farm__supervisor',
    'flock__name',
    'shed__name',
]

PAYMENT_STATUS_FILTERS = {
    'paid': lambda: Q(amount_paid=F('total_amount')),
    'partial': lambda: Q(amount_paid__gt=0, amount_paid__lt=F('total_amount')),
    'unpaid': lambda: Q(amount_paid=0),
}


def _split(raw):
    if raw is None:
        return []
    return [part.strip() for part in str(raw).split(',')]


def parse_id_list(raw):
    """'3, 7,abc,,-1' -> [3, 7]. Only positive integers are valid ids."""
    ids = []
    for part in _split(raw):
        if part.isdecimal() and int(part) > 0:
            ids.append(int(part))
    return ids


def parse_string_list(raw):
    """'ABC-1, ,XYZ-2' -> ['ABC-1', 'XYZ-2']."""
    return [part for part in _split(raw) if part]


def parse_number(raw):
    """Return a finite Decimal, or None when ``raw`` is absent or not a number."""
    if raw is None or not str(raw).strip():
        return None
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite():
        return None
    return value


def payment_status_filter(status):
    """Q for paid / partial / unpaid, or None for anything else."""
    factory = PAYMENT_STATUS_FILTERS.get(status)
    return factory() if factory else None


def search_filter(term):
    """Case-insensitive substring OR-group, or None for a blank term."""
    if term is None or not str(term).strip():
        return None
    term = str(term).strip()
    query = Q()
    for field in SEARCH_FIELDS:
        query |= Q(**{f'{field}__icontains': term})
    return query


def date_range_filter(date_range):
    """Q restricting ledger ``date`` to an inclusive DateRange."""
    return Q(date__gte=date_range.start, date__lte=date_range.end)


def build_ledger_filter(params):
    """
    Compose the filter predicate for a ledger report.

    Args:
        params: Mapping of raw query parameters (QueryDict or dict).

    Returns:
        Q (empty Q when nothing applies)
    """
    conditions = []

    for param, lookup in ID_LIST_FILTERS.items():
        ids = parse_id_list(params.get(param))
        if ids:
            conditions.append(Q(**{f'{lookup}__in': ids}))

    for param, field in STRING_LIST_FILTERS.items():
        values = parse_string_list(params.get(param))
        if values:
            conditions.append(Q(**{f'{field}__in': values}))

    for min_param, max_param, field in RANGE_FILTERS:
        lower = parse_number(params.get(min_param))
        upper = parse_number(params.get(max_param))
        if lower is not None:
            conditions.append(Q(**{f'{field}__gte': lower}))
        if upper is not None:
            conditions.append(Q(**{f'{field}__lte': upper}))

    status_q = payment_status_filter(params.get('paymentStatus'))
    if status_q is not None:
        conditions.append(status_q)

    search_q = search_filter(params.get('search'))
    if search_q is not None:
        conditions.append(search_q)

    combined = Q()
    for condition in conditions:
        combined &= condition
    return combined
