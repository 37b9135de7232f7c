"""
Join request admin configuration
"""
from django.contrib import admin
from .models import JoinRequest


@admin.register(JoinRequest)
class JoinRequestAdmin(admin.ModelAdmin):
    list_display = ['barber', 'shop', 'status', 'seat_number', 'assigned_seat', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['barber__user__email', 'shop__name']
    readonly_fields = ['id', 'created_at', 'updated_at', 'responded_at']
