from django.contrib import admin

from .models import RecipientProfile


@admin.register(RecipientProfile)
class RecipientProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'blood_type', 'date_of_birth', 'created_at']
    list_filter = ['blood_type']
    search_fields = ['user__full_name', 'user__username', 'user__email']
    readonly_fields = ['created_at', 'updated_at']
