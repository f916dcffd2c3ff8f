# apps/api/v1/serializers/ledger.py
"""
Serializers for ledger entries.

LedgerWriteSerializer only checks shapes and types (ids are integers,
numbers are non-negative decimals, date is a datetime). The cross-field
rules (referential chain, weight and amount consistency) live in
apps.ledger.services.LedgerValidator, so every write path shares them.
"""
from decimal import Decimal

from rest_framework import serializers

from apps.ledger.models import Ledger, MONEY_FIELD_KWARGS


def money_field(source=None, **kwargs):
    return serializers.DecimalField(source=source, min_value=Decimal('0'), **MONEY_FIELD_KWARGS, **kwargs)


class BuyerInfoSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    contactNumber = serializers.CharField(source='contact_number')
    address = serializers.CharField()


class FarmInfoSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    supervisor = serializers.CharField()


class FlockInfoSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    status = serializers.CharField()


class ShedInfoSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    totalChicks = serializers.IntegerField(source='total_chicks')


class LedgerSerializer(serializers.ModelSerializer):
    """Read representation: joined references plus the derived balance."""
    vehicleNumber = serializers.CharField(source='vehicle_number')
    driverName = serializers.CharField(source='driver_name')
    driverContact = serializers.CharField(source='driver_contact')
    accountantName = serializers.CharField(source='accountant_name')
    emptyVehicleWeight = serializers.DecimalField(source='empty_vehicle_weight', **MONEY_FIELD_KWARGS)
    grossWeight = serializers.DecimalField(source='gross_weight', **MONEY_FIELD_KWARGS)
    netWeight = serializers.DecimalField(source='net_weight', **MONEY_FIELD_KWARGS)
    numberOfBirds = serializers.IntegerField(source='number_of_birds')
    totalAmount = serializers.DecimalField(source='total_amount', **MONEY_FIELD_KWARGS)
    amountPaid = serializers.DecimalField(source='amount_paid', **MONEY_FIELD_KWARGS)
    balance = serializers.DecimalField(source='outstanding', read_only=True, **MONEY_FIELD_KWARGS)
    buyerInfo = BuyerInfoSerializer(source='buyer', read_only=True)
    farmInfo = FarmInfoSerializer(source='farm', read_only=True)
    flockInfo = FlockInfoSerializer(source='flock', read_only=True)
    shedInfo = ShedInfoSerializer(source='shed', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Ledger
        fields = [
            'id', 'date', 'vehicleNumber', 'driverName', 'driverContact', 'accountantName',
            'emptyVehicleWeight', 'grossWeight', 'netWeight', 'numberOfBirds', 'rate',
            'totalAmount', 'amountPaid', 'balance',
            'buyerInfo', 'farmInfo', 'flockInfo', 'shedInfo',
            'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class LedgerWriteSerializer(serializers.Serializer):
    """
    Create/update payload.

    ``validated_data`` uses model attribute names (farm_id, net_weight, ...)
    and is handed to LedgerService unchanged. With ``partial=True`` only the
    supplied fields appear in it.
    """
    farmId = serializers.IntegerField(source='farm_id', min_value=1)
    flockId = serializers.IntegerField(source='flock_id', min_value=1)
    shedId = serializers.IntegerField(source='shed_id', min_value=1)
    buyerId = serializers.IntegerField(source='buyer_id', min_value=1)
    vehicleNumber = serializers.CharField(source='vehicle_number', max_length=20)
    driverName = serializers.CharField(source='driver_name', max_length=100)
    driverContact = serializers.CharField(source='driver_contact', max_length=20)
    accountantName = serializers.CharField(source='accountant_name', max_length=100)
    emptyVehicleWeight = money_field('empty_vehicle_weight')
    grossWeight = money_field('gross_weight')
    netWeight = money_field('net_weight')
    numberOfBirds = serializers.IntegerField(source='number_of_birds', min_value=0)
    rate = money_field()
    totalAmount = money_field('total_amount')
    amountPaid = money_field('amount_paid', default=Decimal('0'))
    date = serializers.DateTimeField()
