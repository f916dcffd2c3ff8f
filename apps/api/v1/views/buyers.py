# apps/api/v1/views/buyers.py
from rest_framework import viewsets, filters
from drf_spectacular.utils import extend_schema, extend_schema_view

from apps.buyers.models import Buyer
from apps.api.v1.serializers.buyers import BuyerSerializer


@extend_schema_view(
    list=extend_schema(tags=['buyers'], summary='List all buyers'),
    retrieve=extend_schema(tags=['buyers'], summary='Get buyer details'),
    create=extend_schema(tags=['buyers'], summary='Create a new buyer'),
    update=extend_schema(tags=['buyers'], summary='Update a buyer'),
    partial_update=extend_schema(tags=['buyers'], summary='Partially update a buyer'),
    destroy=extend_schema(tags=['buyers'], summary='Delete a buyer'),
)
class BuyerViewSet(viewsets.ModelViewSet):
    serializer_class = BuyerSerializer
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'contact_number', 'address']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']

    def get_queryset(self):
        return Buyer.objects.all()
