from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display = ['username', 'email', 'full_name', 'user_type', 'is_verified', 'is_locked']
    list_filter = ['user_type', 'is_verified', 'is_locked', 'is_active']
    search_fields = ['username', 'email', 'full_name']
    fieldsets = UserAdmin.fieldsets + (
        ('LifeSource', {'fields': ('user_type', 'full_name', 'phone', 'is_verified')}),
        ('Security', {'fields': ('failed_attempts', 'is_locked')}),
    )

    actions = ['unlock_accounts']

    @admin.action(description='Unlock selected accounts')
    def unlock_accounts(self, request, queryset):
        updated = queryset.update(is_locked=False, failed_attempts=0)
        self.message_user(request, f'{updated} account(s) unlocked.')
