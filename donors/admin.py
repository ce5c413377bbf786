from django.contrib import admin

from .models import DonationAppointment, DonorProfile


@admin.register(DonorProfile)
class DonorProfileAdmin(admin.ModelAdmin):
    list_display   = ['user', 'blood_type', 'total_donations', 'last_donation_date', 'is_eligible', 'can_donate_display']
    list_filter    = ['blood_type', 'is_eligible']
    search_fields  = ['user__full_name', 'user__username', 'user__email']
    readonly_fields = ['total_donations', 'last_donation_date', 'created_at', 'updated_at']

    fieldsets = (
        ('Personal Info', {
            'fields': ('user', 'blood_type', 'date_of_birth')
        }),
        ('Donation Stats', {
            'fields': ('total_donations', 'last_donation_date', 'is_eligible')
        }),
        ('Health', {
            'fields': ('weight_kg', 'medical_conditions', 'emergency_contact_name', 'emergency_contact_phone'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    @admin.display(boolean=True, description='Can Donate Now')
    def can_donate_display(self, obj):
        return obj.can_donate


@admin.register(DonationAppointment)
class DonationAppointmentAdmin(admin.ModelAdmin):
    list_display  = ['donor', 'hospital', 'appointment_date', 'status', 'confirmed_by', 'confirmed_at']
    list_filter   = ['status', 'hospital']
    search_fields = ['donor__user__full_name', 'hospital__name']
    ordering      = ['-appointment_date']
    readonly_fields = ['confirmed_by', 'confirmed_at', 'created_at', 'updated_at']
