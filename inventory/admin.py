from django.contrib import admin

from .models import BloodUnit
from .utils import mark_expired_units


@admin.register(BloodUnit)
class BloodUnitAdmin(admin.ModelAdmin):
    list_display = ['batch_number', 'hospital', 'blood_type', 'quantity_units', 'collection_date', 'expiry_date', 'status']
    list_filter = ['status', 'blood_type', 'hospital']
    search_fields = ['batch_number', 'storage_location', 'hospital__name']
    readonly_fields = ['batch_number', 'created_at', 'updated_at']
    date_hierarchy = 'expiry_date'

    actions = ['sweep_expired']

    @admin.action(description='Mark all past-expiry units as expired')
    def sweep_expired(self, request, queryset):
        updated = mark_expired_units()
        self.message_user(request, f'{updated} unit(s) marked as expired.')
