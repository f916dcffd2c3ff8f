# apps/api/v1/views/farms.py
"""
ViewSets for Farm, Flock and Shed.
"""
from rest_framework import viewsets, filters
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view

from apps.farms.models import Farm, Flock, Shed
from apps.api.v1.serializers.farms import FarmSerializer, FlockSerializer, ShedSerializer


@extend_schema_view(
    list=extend_schema(tags=['farms'], summary='List all farms'),
    retrieve=extend_schema(tags=['farms'], summary='Get farm details'),
    create=extend_schema(tags=['farms'], summary='Create a new farm'),
    update=extend_schema(tags=['farms'], summary='Update a farm'),
    partial_update=extend_schema(tags=['farms'], summary='Partially update a farm'),
    destroy=extend_schema(tags=['farms'], summary='Delete a farm'),
)
class FarmViewSet(viewsets.ModelViewSet):
    """ViewSet for Farm model. Deleting a farm deletes its flocks, sheds and ledgers."""
    serializer_class = FarmSerializer
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'supervisor']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']

    def get_queryset(self):
        return Farm.objects.all()


@extend_schema_view(
    list=extend_schema(tags=['farms'], summary='List all flocks'),
    retrieve=extend_schema(tags=['farms'], summary='Get flock details'),
    create=extend_schema(tags=['farms'], summary='Create a new flock'),
    update=extend_schema(tags=['farms'], summary='Update a flock'),
    partial_update=extend_schema(tags=['farms'], summary='Partially update a flock'),
    destroy=extend_schema(tags=['farms'], summary='Delete a flock'),
)
class FlockViewSet(viewsets.ModelViewSet):
    serializer_class = FlockSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['farm', 'status']
    search_fields = ['name', 'farm__name']
    ordering_fields = ['name', 'start_date']
    ordering = ['-start_date', 'name']

    def get_queryset(self):
        return Flock.objects.select_related('farm')


@extend_schema_view(
    list=extend_schema(tags=['farms'], summary='List all sheds'),
    retrieve=extend_schema(tags=['farms'], summary='Get shed details'),
    create=extend_schema(tags=['farms'], summary='Create a new shed'),
    update=extend_schema(tags=['farms'], summary='Update a shed'),
    partial_update=extend_schema(tags=['farms'], summary='Partially update a shed'),
    destroy=extend_schema(tags=['farms'], summary='Delete a shed'),
)
class ShedViewSet(viewsets.ModelViewSet):
    serializer_class = ShedSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['flock', 'flock__farm']
    search_fields = ['name']
    ordering_fields = ['name', 'total_chicks']
    ordering = ['name']

    def get_queryset(self):
        return Shed.objects.select_related('flock')
