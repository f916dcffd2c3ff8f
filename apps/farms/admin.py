# apps/farms/admin.py
"""
Django admin configuration for the farm hierarchy.

Flocks are edited inline on the farm page, sheds inline on the flock page.
"""
from django.contrib import admin
from .models import Farm, Flock, Shed


class FlockInline(admin.TabularInline):
    model = Flock
    fields = ['name', 'status', 'start_date', 'end_date']
    extra = 0


class ShedInline(admin.TabularInline):
    model = Shed
    fields = ['name', 'total_chicks']
    extra = 0


@admin.register(Farm)
class FarmAdmin(admin.ModelAdmin):
    list_display = ['name', 'supervisor', 'total_sheds', 'created_at']
    search_fields = ['name', 'supervisor']
    inlines = [FlockInline]


@admin.register(Flock)
class FlockAdmin(admin.ModelAdmin):
    list_display = ['name', 'farm', 'status', 'start_date', 'end_date']
    list_filter = ['status', 'farm']
    search_fields = ['name', 'farm__name']
    inlines = [ShedInline]


@admin.register(Shed)
class ShedAdmin(admin.ModelAdmin):
    list_display = ['name', 'flock', 'total_chicks']
    search_fields = ['name', 'flock__name']
