"""
Booking admin configuration
"""
from django.contrib import admin
from .models import Booking, Review


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ['customer', 'barber', 'shop', 'booking_date', 'status', 'payment_status', 'total_amount']
    search_fields = ['customer__user__email', 'barber__user__email', 'shop__name']
    list_filter = ['status', 'payment_status', 'booking_date', 'created_at']
    readonly_fields = ['id', 'created_at', 'updated_at', 'cancelled_at', 'completed_at']


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ['booking', 'barber', 'customer', 'rating', 'created_at']
    list_filter = ['rating']
    search_fields = ['barber__user__email', 'customer__user__email']
