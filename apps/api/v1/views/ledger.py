# apps/api/v1/views/ledger.py
"""
ViewSet for ledger entries.

Writes go through LedgerService so the single, bulk and update paths share
LedgerValidator. Reads return joined references and the derived balance.
"""
from django.db.models import Q
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view

from apps.ledger.models import Ledger
from apps.ledger.services import LedgerService
from apps.reporting.dates import end_of_day, parse_flexible_date, start_of_day
from apps.reporting.filters import build_ledger_filter, parse_id_list
from apps.api.v1.serializers.ledger import LedgerSerializer, LedgerWriteSerializer

# single-id list params -> ledger lookup
OWNER_PARAMS = {
    'farmId': 'farm_id',
    'flockId': 'flock_id',
    'shedId': 'shed_id',
    'buyerId': 'buyer_id',
}


def ledger_list_filter(params):
    """Report filters plus ?farmId=&flockId=&shedId=&buyerId= and ?dateFrom=&dateTo=."""
    query = build_ledger_filter(params)
    for param, lookup in OWNER_PARAMS.items():
        ids = parse_id_list(params.get(param))
        if ids:
            query &= Q(**{f'{lookup}__in': ids})
    if params.get('dateFrom'):
        query &= Q(date__gte=start_of_day(parse_flexible_date(params['dateFrom'])))
    if params.get('dateTo'):
        query &= Q(date__lte=end_of_day(parse_flexible_date(params['dateTo'])))
    return query


def envelope(message, data=None):
    return {'status': 'success', 'message': message, 'data': data}


@extend_schema_view(
    list=extend_schema(tags=['ledgers'], summary='List ledger entries'),
    retrieve=extend_schema(tags=['ledgers'], summary='Get ledger entry details'),
    create=extend_schema(
        tags=['ledgers'], summary='Create a ledger entry',
        request=LedgerWriteSerializer, responses={201: LedgerSerializer},
    ),
    update=extend_schema(
        tags=['ledgers'], summary='Update a ledger entry',
        request=LedgerWriteSerializer, responses={200: LedgerSerializer},
    ),
    partial_update=extend_schema(
        tags=['ledgers'], summary='Partially update a ledger entry',
        request=LedgerWriteSerializer, responses={200: LedgerSerializer},
    ),
    destroy=extend_schema(tags=['ledgers'], summary='Delete a ledger entry'),
)
class LedgerViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Ledger model.

    PUT and PATCH are both partial: the payload is merged onto the stored
    entry and the merged entry is validated.
    """
    serializer_class = LedgerSerializer
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['vehicle_number', 'driver_name', 'accountant_name']
    ordering_fields = ['date', 'total_amount', 'amount_paid', 'net_weight', 'number_of_birds', 'created_at']
    ordering = ['-date', '-id']

    def get_queryset(self):
        queryset = Ledger.objects.for_report()
        if self.action == 'list':
            queryset = queryset.filter(ledger_list_filter(self.request.query_params))
        return queryset

    def get_serializer_class(self):
        if self.action in ('create', 'update', 'partial_update', 'bulk'):
            return LedgerWriteSerializer
        return LedgerSerializer

    def get_service(self):
        return LedgerService(self.request.user)

    def retrieve(self, request, *args, **kwargs):
        ledger = self.get_object()
        return Response(envelope('Ledger fetched successfully', LedgerSerializer(ledger).data))

    def create(self, request, *args, **kwargs):
        serializer = LedgerWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ledger = self.get_service().create_entry(dict(serializer.validated_data))
        return Response(
            envelope('Ledger created successfully', LedgerSerializer(ledger).data),
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        ledger = self.get_object()
        serializer = LedgerWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        ledger = self.get_service().update_entry(ledger, dict(serializer.validated_data))
        return Response(envelope('Ledger updated successfully', LedgerSerializer(ledger).data))

    def destroy(self, request, *args, **kwargs):
        pk = self.get_service().delete_entry(self.get_object())
        return Response(envelope(f'Ledger with id {pk} deleted successfully'))

    @extend_schema(
        tags=['ledgers'],
        summary='Create ledger entries in bulk',
        description='All-or-nothing: the first invalid entry rejects the whole batch.',
        request=LedgerWriteSerializer(many=True),
        responses={201: LedgerSerializer(many=True)},
    )
    @action(detail=False, methods=['post'])
    def bulk(self, request):
        """Body: a JSON array of entries, or {"ledgers": [...]}."""
        entries = request.data.get('ledgers') if isinstance(request.data, dict) else request.data
        if isinstance(entries, list) and entries:
            serializer = LedgerWriteSerializer(data=entries, many=True)
            serializer.is_valid(raise_exception=True)
            entries = [dict(entry) for entry in serializer.validated_data]
        ledgers = self.get_service().create_bulk(entries)
        return Response(
            envelope(
                f'{len(ledgers)} ledgers created successfully',
                LedgerSerializer(ledgers, many=True).data,
            ),
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        tags=['ledgers'],
        summary='Delete ledger entries by id',
        description='Body: a JSON array of ledger ids, or {"ledgerIds": [...]}.',
    )
    @action(detail=False, methods=['post'], url_path='bulk-delete')
    def bulk_delete(self, request):
        ids = request.data.get('ledgerIds') if isinstance(request.data, dict) else request.data
        deleted = self.get_service().delete_bulk(ids)
        return Response(envelope(f'Successfully deleted {deleted} ledgers', {'deletedLedgers': deleted}))

    @extend_schema(
        tags=['ledgers'],
        summary='Delete all ledger entries of a farm, flock, shed and/or buyer',
        parameters=[
            OpenApiParameter(param, int, OpenApiParameter.QUERY, required=False)
            for param in OWNER_PARAMS
        ],
    )
    @action(detail=False, methods=['delete'], url_path='all', permission_classes=[IsAdminUser])
    def delete_all(self, request):
        params = request.query_params
        deleted, scope = self.get_service().delete_matching(
            farm_id=params.get('farmId'),
            flock_id=params.get('flockId'),
            shed_id=params.get('shedId'),
            buyer_id=params.get('buyerId'),
        )
        message = f'{deleted} ledgers deleted successfully'
        if scope:
            message = f"{message} for {', '.join(scope)}"
        return Response(envelope(message, {
            'deletedCount': deleted,
            'queryParams': scope or 'All ledgers',
        }))
