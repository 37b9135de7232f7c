"""
Authentication admin configuration
"""
from django.contrib import admin
from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    """
    Admin configuration for User model
    """
    list_display = ['email', 'full_name', 'role', 'is_active', 'email_verified', 'created_at']
    list_filter = ['role', 'is_active', 'email_verified', 'created_at']
    search_fields = ['email', 'full_name', 'phone_number']
    ordering = ['-created_at']

    fieldsets = (
        ('Account', {
            'fields': ('id', 'email', 'email_verified')
        }),
        ('Personal Info', {
            'fields': ('full_name', 'phone_number')
        }),
        ('Role & Status', {
            'fields': ('role', 'is_active', 'is_staff')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at')
        }),
    )

    readonly_fields = ['id', 'created_at', 'updated_at']
