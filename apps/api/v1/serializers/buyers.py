# apps/api/v1/serializers/buyers.py
from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from apps.buyers.models import Buyer


class BuyerSerializer(serializers.ModelSerializer):
    contactNumber = serializers.CharField(
        source='contact_number',
        max_length=20,
        validators=[UniqueValidator(queryset=Buyer.objects.all())],
    )
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Buyer
        fields = ['id', 'name', 'contactNumber', 'address', 'createdAt']
