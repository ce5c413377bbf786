# hospitals/admin.py
from django.contrib import admin
from django.utils.html import format_html

from algorithms.allocation import AllocationError
from algorithms.choices import HospitalStatus
from .models import BloodRequest, Hospital, HospitalStaff
from .utils import apply_allocation

STATUS_COLORS = {
    'pending': 'orange',
    'assigned': 'blue',
    'fulfilled': 'green',
    'partially_fulfilled': 'purple',
    'unavailable': 'red',
    'cancelled': 'gray',
    'verified': 'green',
    'suspended': 'red',
}


def colored_status(obj):
    return format_html(
        '<strong style="color: {};">{}</strong>',
        STATUS_COLORS.get(obj.status, 'black'),
        obj.get_status_display(),
    )


class HospitalStaffInline(admin.TabularInline):
    model = HospitalStaff
    extra = 0


@admin.register(Hospital)
class HospitalAdmin(admin.ModelAdmin):
    list_display = ['name', 'city', 'license_number', 'admin_user', 'status_badge', 'created_at']
    list_filter = ['status', 'city']
    search_fields = ['name', 'license_number', 'email']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [HospitalStaffInline]

    fieldsets = (
        ('Hospital', {
            'fields': ('name', 'license_number', 'admin_user', 'status', 'services')
        }),
        ('Contact', {
            'fields': ('address', 'city', 'state', 'postal_code', 'phone', 'email', 'website')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['verify_hospitals', 'suspend_hospitals']

    @admin.display(description='Status')
    def status_badge(self, obj):
        return colored_status(obj)

    @admin.action(description='Verify selected hospitals')
    def verify_hospitals(self, request, queryset):
        updated = queryset.update(status=HospitalStatus.VERIFIED)
        self.message_user(request, f'{updated} hospital(s) verified.')

    @admin.action(description='Suspend selected hospitals')
    def suspend_hospitals(self, request, queryset):
        updated = queryset.update(status=HospitalStatus.SUSPENDED)
        self.message_user(request, f'{updated} hospital(s) suspended.')


@admin.register(BloodRequest)
class BloodRequestAdmin(admin.ModelAdmin):
    list_display = [
        'id',
        'recipient',
        'hospital',
        'blood_type',
        'units_needed',
        'urgency',
        'needed_by',
        'status_badge',
    ]
    list_filter = ['status', 'urgency', 'blood_type', 'created_at']
    search_fields = ['recipient__user__full_name', 'recipient__user__email', 'hospital__name', 'doctor_name']
    readonly_fields = ['created_at', 'updated_at']
    filter_horizontal = ['matched_units']

    fieldsets = (
        ('Request Information', {
            'fields': ('recipient', 'hospital', 'blood_type', 'units_needed', 'urgency',
                       'needed_by', 'medical_reason', 'doctor_name', 'doctor_contact', 'notes')
        }),
        ('Allocation', {
            'fields': ('status', 'assigned_staff', 'matched_units'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['run_matching']

    @admin.display(description='Status')
    def status_badge(self, obj):
        return colored_status(obj)

    @admin.action(description='Match selected requests against inventory')
    def run_matching(self, request, queryset):
        outcomes = {}
        for blood_request in queryset:
            try:
                result = apply_allocation(blood_request, staff_user=request.user)
            except AllocationError:
                outcomes['skipped'] = outcomes.get('skipped', 0) + 1
                continue
            outcomes[result.status] = outcomes.get(result.status, 0) + 1
        summary = ', '.join(f'{count} {name}' for name, count in outcomes.items())
        self.message_user(request, f'Matching done: {summary or "nothing selected"}.')
