from django.contrib import admin
from .models import Rental, RentalMember


class RentalMemberInline(admin.TabularInline):
    model = RentalMember
    extra = 0
    autocomplete_fields = ['tenant']


@admin.register(Rental)
class RentalAdmin(admin.ModelAdmin):
    list_display = ['apartment', 'tenant_names', 'due_date', 'price', 'status', 'payment_status', 'paid_at']
    list_filter = ['status', 'payment_status', 'due_date']
    search_fields = ['apartment__name', 'members__tenant__full_name']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'due_date'
    inlines = [RentalMemberInline]

    fieldsets = (
        ('Rental', {
            'fields': ('apartment', 'assigned_date', 'due_date', 'price')
        }),
        ('Status', {
            'fields': ('status', 'payment_status', 'paid_at')
        }),
        ('Cancellation', {
            'fields': ('cancelled_at', 'cancellation_reason'),
            'classes': ('collapse',)
        }),
    )

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('apartment').prefetch_related('members__tenant')
