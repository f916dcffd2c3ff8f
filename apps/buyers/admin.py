# apps/buyers/admin.py
from django.contrib import admin
from .models import Buyer


@admin.register(Buyer)
class BuyerAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact_number', 'address', 'created_at']
    search_fields = ['name', 'contact_number', 'address']
