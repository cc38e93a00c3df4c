from django.contrib import admin
from .models import Tenant


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'phone_number', 'email', 'move_in_date', 'created_at']
    list_filter = ['move_in_date']
    search_fields = ['full_name', 'phone_number', 'email']
    readonly_fields = ['created_at', 'updated_at']
