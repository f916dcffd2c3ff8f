# apps/reporting/services.py
"""
Ledger reports.

UniversalReportService handles:
- Normalising raw query parameters (ReportQuery)
- Resolving the date window (dates.resolve_date_range)
- Composing the filter predicate (filters.build_ledger_filter)
- Grouping and summarising (grouping.GroupingEngine)
- Shaping the response (ResultAssembler)

The report is read-only and deterministic: two calls with the same
parameters against the same data return identical output.

EntityReportService builds the per-buyer, per-farm, per-flock and per-shed
reports (one day, all time, or a buyer scoped universal report) on the same
GroupingEngine.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from django.conf import settings
from django.db.models import Q

from apps.buyers.models import Buyer
from apps.farms.models import Farm, Flock, Shed
from shared.exceptions import EntityNotFound, InvalidRequest

from .dates import DateRange, end_of_day, parse_flexible_date, resolve_date_range, start_of_day
from .filters import build_ledger_filter, date_range_filter
from .grouping import (
    DEFAULT_SORT_FIELD, GroupSummary, GroupingEngine, buyer_info, farm_info, flock_info,
    normalize_group_by, serialize_transaction, shed_info,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
DEFAULT_MAX_PAGE_SIZE = 1000


def _parse_int(raw, default):
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return default


def _parse_flag(raw, default):
    """Accept true/'true'; anything else present is false."""
    if raw is None or raw == '':
        return default
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() == 'true'


@dataclass
class ReportQuery:
    """Normalised report request."""
    duration: str = 'daily'
    date: str = None
    start_date: str = None
    end_date: str = None
    period: str = None
    sort_by: str = DEFAULT_SORT_FIELD
    sort_order: str = 'desc'
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    include_details: bool = True
    group_by: str = 'none'
    for_export: bool = False
    filters: dict = field(default_factory=dict)

    @classmethod
    def from_params(cls, params):
        """
        Build a ReportQuery from raw query parameters.

        page is clamped to >= 1; limit defaults to REPORT_DEFAULT_LIMIT and is
        clamped to 1..REPORT_MAX_LIMIT; unknown groupBy becomes 'none'.
        """
        default_limit = getattr(settings, 'REPORT_DEFAULT_LIMIT', DEFAULT_PAGE_SIZE)
        max_limit = getattr(settings, 'REPORT_MAX_LIMIT', DEFAULT_MAX_PAGE_SIZE)

        page = max(_parse_int(params.get('page'), 1), 1)
        limit = _parse_int(params.get('limit'), default_limit)
        if limit < 1:
            limit = default_limit
        limit = min(limit, max_limit)

        return cls(
            duration=params.get('duration') or 'daily',
            date=params.get('date'),
            start_date=params.get('startDate'),
            end_date=params.get('endDate'),
            period=params.get('period'),
            sort_by=params.get('sortBy') or DEFAULT_SORT_FIELD,
            sort_order='asc' if params.get('sortOrder') == 'asc' else 'desc',
            page=page,
            limit=limit,
            include_details=_parse_flag(params.get('includeDetails'), True),
            group_by=normalize_group_by(params.get('groupBy') or 'none'),
            for_export=_parse_flag(params.get('forExport'), False),
            filters=params,
        )

    @property
    def offset(self):
        return (self.page - 1) * self.limit

    @property
    def is_grouped(self):
        return self.group_by != 'none'


class ResultAssembler:
    """
    Shape grouped results into the report response.

    Ungrouped:
        {reportTitle, dateRange, summary, transactions, pagination}
    Grouped:
        {reportTitle, dateRange, summary, groupedResults, groupBy}

    The overall summary is built by merging the raw group sums, so the
    ungrouped and grouped forms of the same query agree on every total and
    average.
    """

    def __init__(self, query, date_range):
        self.query = query
        self.date_range = date_range

    def assemble(self, groups):
        overall = GroupSummary.combine(group.summary for group in groups)
        response = {
            'reportTitle': self.date_range.title,
            'dateRange': overall.date_range(),
            'summary': overall.as_dict(),
        }
        if self.query.is_grouped:
            response['groupedResults'] = [group.as_dict() for group in groups]
            response['groupBy'] = self.query.group_by
        else:
            response['transactions'] = self._flat_transactions(groups)
            response['pagination'] = self._pagination(overall.total_transactions)
        return response

    def _flat_transactions(self, groups):
        if not groups:
            return []
        return groups[0].as_dict()['transactions']

    def _pagination(self, total_count):
        query = self.query
        return {
            'page': query.page,
            'limit': query.limit,
            'totalCount': total_count,
            'hasMore': total_count > query.offset + query.limit,
        }


class UniversalReportService:
    """
    Generate the universal ledger report.

    Usage:
        service = UniversalReportService(user)
        data = service.generate(request.query_params)
    """

    def __init__(self, user=None):
        self.user = user

    def generate(self, params):
        """
        Run a report.

        Args:
            params: Mapping of raw query parameters

        Raises:
            MalformedQuery: bad duration or date inputs

        Returns:
            dict (see ResultAssembler)
        """
        query = ReportQuery.from_params(params)
        date_range = resolve_date_range(
            query.duration,
            date=query.date,
            start_date=query.start_date,
            end_date=query.end_date,
            period=query.period,
        )
        predicate = date_range_filter(date_range) & build_ledger_filter(query.filters)

        engine = GroupingEngine(
            group_by=query.group_by,
            sort_by=query.sort_by,
            sort_order=query.sort_order,
            offset=query.offset,
            limit=query.limit,
            include_details=query.include_details,
            for_export=query.for_export,
        )
        groups = engine.run(predicate)
        data = ResultAssembler(query, date_range).assemble(groups)

        logger.info(
            f"Report '{date_range.title}' groupBy={query.group_by} "
            f"rows={data['summary']['totalTransactions']} groups={len(groups)} "
            f"user={getattr(self.user, 'pk', None)}"
        )
        return data


# ===== ENTITY REPORTS =====

@dataclass(frozen=True)
class ReportEntity:
    model: type
    ledger_field: str
    label: str
    describe: Callable[[Any], dict]


REPORT_ENTITIES = {
    'buyer': ReportEntity(Buyer, 'buyer_id', 'Buyer', buyer_info),
    'farm': ReportEntity(Farm, 'farm_id', 'Farm', farm_info),
    'flock': ReportEntity(Flock, 'flock_id', 'Flock', flock_info),
    'shed': ReportEntity(Shed, 'shed_id', 'Shed', shed_info),
}

# Duration of a buyer's unified report when none is given.
UNIFIED_DEFAULT_DURATION = 'monthly'


class EntityReportService:
    """
    Reports scoped to one buyer, farm, flock or shed.

    Usage:
        service = EntityReportService(user)
        service.daily('farm', farm_id, '2024-01-15')
        service.overall('buyer', buyer_id)
        service.buyer_unified(buyer_id, request.query_params)

    Daily and overall reports return every matching transaction, newest
    first, with a summary computed the same way as the universal report.
    """

    def __init__(self, user=None):
        self.user = user

    def _get_entity(self, entity, entity_id):
        """
        Raises:
            InvalidRequest: INVALID_<ENTITY>_ID when the id is not a positive integer
            EntityNotFound: <ENTITY>_NOT_FOUND
        """
        target = REPORT_ENTITIES[entity]
        try:
            pk = int(str(entity_id).strip())
        except (TypeError, ValueError):
            pk = 0
        if pk < 1:
            raise InvalidRequest(f"Invalid {entity} ID format", code=f'INVALID_{entity.upper()}_ID')
        instance = target.model.objects.filter(pk=pk).first()
        if instance is None:
            raise EntityNotFound(f"{target.label} not found", code=f'{entity.upper()}_NOT_FOUND')
        return target, instance

    def _report(self, target, instance, predicate):
        engine = GroupingEngine(for_export=True)
        groups = engine.run(Q(**{target.ledger_field: instance.pk}) & predicate)
        summary = GroupSummary.combine(group.summary for group in groups)
        transactions = groups[0].transactions if groups else []
        return summary, [serialize_transaction(ledger) for ledger in transactions]

    def daily(self, entity, entity_id, day):
        """One entity's transactions on one calendar day."""
        target, instance = self._get_entity(entity, entity_id)
        parsed = parse_flexible_date(day)
        window = DateRange(start_of_day(parsed), end_of_day(parsed), f"Daily Report for {parsed:%Y-%m-%d}")
        summary, transactions = self._report(target, instance, date_range_filter(window))

        logger.info(f"{target.label} {instance.pk} daily report for {parsed} rows={summary.total_transactions}")
        return {
            entity: target.describe(instance),
            'date': parsed.isoformat(),
            'summary': summary.as_dict(),
            'transactions': transactions,
        }

    def overall(self, entity, entity_id):
        """Every transaction an entity has, all time."""
        target, instance = self._get_entity(entity, entity_id)
        summary, transactions = self._report(target, instance, Q())

        logger.info(f"{target.label} {instance.pk} overall report rows={summary.total_transactions}")
        return {
            entity: target.describe(instance),
            'summary': summary.as_dict(),
            'transactions': transactions,
        }

    def buyer_unified(self, buyer_id, params):
        """
        The universal report restricted to one buyer.

        Every universal report parameter applies; buyerIds is replaced by
        this buyer and duration defaults to UNIFIED_DEFAULT_DURATION.
        """
        target, buyer = self._get_entity('buyer', buyer_id)
        scoped = {key: params.get(key) for key in params}
        scoped['buyerIds'] = str(buyer.pk)
        scoped['duration'] = scoped.get('duration') or UNIFIED_DEFAULT_DURATION

        data = UniversalReportService(self.user).generate(scoped)
        return {'buyer': target.describe(buyer), **data}
