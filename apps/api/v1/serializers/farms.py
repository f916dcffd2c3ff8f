# apps/api/v1/serializers/farms.py
"""
Serializers for Farm, Flock and Shed.
"""
from rest_framework import serializers

from apps.farms.models import Farm, Flock, Shed


class FarmSerializer(serializers.ModelSerializer):
    totalSheds = serializers.IntegerField(source='total_sheds', min_value=0, required=False)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Farm
        fields = ['id', 'name', 'supervisor', 'totalSheds', 'createdAt', 'updatedAt']


class FlockSerializer(serializers.ModelSerializer):
    farmId = serializers.PrimaryKeyRelatedField(source='farm', queryset=Farm.objects.all())
    farmName = serializers.CharField(source='farm.name', read_only=True)
    startDate = serializers.DateField(source='start_date')
    endDate = serializers.DateField(source='end_date', required=False, allow_null=True)

    class Meta:
        model = Flock
        fields = ['id', 'farmId', 'farmName', 'name', 'status', 'startDate', 'endDate']

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'endDate': 'End date cannot be before start date.'})
        return attrs


class ShedSerializer(serializers.ModelSerializer):
    flockId = serializers.PrimaryKeyRelatedField(source='flock', queryset=Flock.objects.all())
    totalChicks = serializers.IntegerField(source='total_chicks', min_value=0, required=False)

    class Meta:
        model = Shed
        fields = ['id', 'flockId', 'name', 'totalChicks']
        validators = []

    def validate(self, attrs):
        flock = attrs.get('flock', getattr(self.instance, 'flock', None))
        name = attrs.get('name', getattr(self.instance, 'name', None))
        duplicates = Shed.objects.filter(flock=flock, name=name)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError({'name': 'A shed with this name already exists in the flock.'})
        return attrs
