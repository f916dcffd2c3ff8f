# apps/ledger/admin.py
"""
Django admin configuration for ledger entries.

Admin edits bypass LedgerService, so fields that feed the weight/amount
invariants are read-only here; corrections go through the API.
"""
from django.contrib import admin
from .models import Ledger


@admin.register(Ledger)
class LedgerAdmin(admin.ModelAdmin):
    list_display = [
        'date', 'vehicle_number', 'buyer', 'farm', 'flock', 'shed',
        'net_weight', 'rate', 'total_amount', 'amount_paid',
    ]
    list_filter = ['farm', 'buyer']
    search_fields = ['vehicle_number', 'driver_name', 'accountant_name', 'buyer__name']
    date_hierarchy = 'date'
    list_select_related = ['buyer', 'farm', 'flock', 'shed']
    readonly_fields = [
        'empty_vehicle_weight', 'gross_weight', 'net_weight',
        'rate', 'total_amount', 'created_at', 'updated_at',
    ]
