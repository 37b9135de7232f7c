"""
Shop admin configuration
"""
from django.contrib import admin
from .models import Shop, ShopSeat


class ShopSeatInline(admin.TabularInline):
    model = ShopSeat
    extra = 0
    fields = ['seat_number', 'barber']
    readonly_fields = ['seat_number']


@admin.register(Shop)
class ShopAdmin(admin.ModelAdmin):
    list_display = ['name', 'owner', 'total_seats', 'is_verified', 'rating', 'created_at']
    search_fields = ['name', 'address', 'owner__user__email']
    list_filter = ['is_verified', 'created_at']
    inlines = [ShopSeatInline]
