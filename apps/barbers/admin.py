"""
Barber admin configuration
"""
from django.contrib import admin
from .models import BarberProfile


@admin.register(BarberProfile)
class BarberProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'shop', 'seat_number', 'status', 'is_available', 'rating', 'total_reviews']
    list_filter = ['status', 'is_available']
    search_fields = ['user__email', 'user__full_name', 'shop__name']
    readonly_fields = ['id', 'rating', 'total_reviews', 'created_at', 'updated_at']
