# apps/api/v1/views/reporting.py
"""
Report endpoints: the universal report and the per-entity reports.
"""
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import OpenApiParameter, extend_schema

from apps.reporting.dates import DURATIONS
from apps.reporting.grouping import GROUP_BY_CHOICES, SORT_FIELDS
from apps.reporting.services import EntityReportService, UniversalReportService

# (name, type, description)
REPORT_PARAMETERS = [
    ('duration', str, f"One of: {', '.join(DURATIONS)} (default daily)"),
    ('date', str, 'Anchor date; required for daily'),
    ('startDate', str, 'Custom range start'),
    ('endDate', str, 'Custom range end'),
    ('period', int, 'Number of days for duration=period'),
    ('buyerIds', str, 'Comma-separated buyer ids'),
    ('farmIds', str, 'Comma-separated farm ids'),
    ('flockIds', str, 'Comma-separated flock ids'),
    ('shedIds', str, 'Comma-separated shed ids'),
    ('paymentStatus', str, 'paid, partial or unpaid'),
    ('minAmount', float, 'Minimum total amount'),
    ('maxAmount', float, 'Maximum total amount'),
    ('minNetWeight', float, 'Minimum net weight'),
    ('maxNetWeight', float, 'Maximum net weight'),
    ('minBirds', int, 'Minimum number of birds'),
    ('maxBirds', int, 'Maximum number of birds'),
    ('minRate', float, 'Minimum rate'),
    ('maxRate', float, 'Maximum rate'),
    ('vehicleNumbers', str, 'Comma-separated vehicle numbers'),
    ('driverNames', str, 'Comma-separated driver names'),
    ('accountantNames', str, 'Comma-separated accountant names'),
    ('search', str, 'Case-insensitive text search'),
    ('sortBy', str, f"One of: {', '.join(SORT_FIELDS)}"),
    ('sortOrder', str, 'asc or desc (default desc)'),
    ('page', int, 'Page number (default 1)'),
    ('limit', int, 'Page size (default 10)'),
    ('includeDetails', bool, 'Include transactions (default true)'),
    ('groupBy', str, f"One of: {', '.join(GROUP_BY_CHOICES)}"),
    ('forExport', bool, 'Return every transaction, unpaginated'),
]


class UniversalReportView(APIView):
    """GET /api/v1/reports/universal/?duration=monthly&date=2024-01-15&groupBy=buyer"""

    @extend_schema(
        tags=['reports'],
        summary='Generate the universal ledger report',
        parameters=[
            OpenApiParameter(name, param_type, OpenApiParameter.QUERY, required=False, description=description)
            for name, param_type, description in REPORT_PARAMETERS
        ],
    )
    def get(self, request):
        data = UniversalReportService(request.user).generate(request.query_params)
        return Response({
            'status': 'success',
            'message': 'Report generated successfully',
            'data': data,
        })


def report_response(message, data):
    return Response({'status': 'success', 'message': message, 'data': data})


class EntityDailyReportView(APIView):
    """GET /api/v1/reports/<entity>/<id>/daily/<date>/"""
    entity = None

    @extend_schema(tags=['reports'], summary="One buyer, farm, flock or shed on one day")
    def get(self, request, entity_id, day):
        data = EntityReportService(request.user).daily(self.entity, entity_id, day)
        return report_response(f'{self.entity.title()} daily report fetched successfully', data)


class EntityOverallReportView(APIView):
    """GET /api/v1/reports/<entity>/<id>/overall/"""
    entity = None

    @extend_schema(tags=['reports'], summary="Every transaction of one buyer, farm, flock or shed")
    def get(self, request, entity_id):
        data = EntityReportService(request.user).overall(self.entity, entity_id)
        return report_response(f'{self.entity.title()} overall report fetched successfully', data)


class BuyerUnifiedReportView(APIView):
    """GET /api/v1/reports/buyer/<id>/unified/?duration=monthly&date=2024-01-15"""

    @extend_schema(
        tags=['reports'],
        summary='Universal report for one buyer',
        parameters=[
            OpenApiParameter(name, param_type, OpenApiParameter.QUERY, required=False, description=description)
            for name, param_type, description in REPORT_PARAMETERS
            if name != 'buyerIds'
        ],
    )
    def get(self, request, entity_id):
        data = EntityReportService(request.user).buyer_unified(entity_id, request.query_params)
        return report_response('Buyer unified report fetched successfully', data)
