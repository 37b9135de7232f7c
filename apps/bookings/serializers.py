"""
Booking serializers
"""
from rest_framework import serializers

from apps.core.serializers import StrictSerializer
from .models import Booking, Review


class BookingServiceItemSerializer(StrictSerializer):
    """One line of a booking's service list"""
    name = serializers.CharField(max_length=100)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    duration_minutes = serializers.IntegerField(required=False, min_value=1)


class ReviewSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.user.full_name', read_only=True)

    class Meta:
        model = Review
        fields = ['id', 'booking', 'customer', 'customer_name', 'barber', 'rating', 'comment', 'created_at']
        read_only_fields = fields


class BookingSerializer(serializers.ModelSerializer):
    """Detailed booking serializer for output"""
    customer_name = serializers.CharField(source='customer.user.full_name', read_only=True)
    customer_email = serializers.EmailField(source='customer.user.email', read_only=True)
    barber_name = serializers.CharField(source='barber.user.full_name', read_only=True)
    shop_name = serializers.CharField(source='shop.name', read_only=True)
    services = BookingServiceItemSerializer(many=True, read_only=True)

    class Meta:
        model = Booking
        fields = [
            'id', 'customer', 'customer_name', 'customer_email',
            'barber', 'barber_name', 'shop', 'shop_name', 'services',
            'booking_date', 'start_time', 'end_time', 'status', 'payment_status',
            'total_amount', 'notes', 'cancellation_reason', 'cancellation_fee',
            'cancelled_by', 'cancelled_at', 'completed_at',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class BookingCreateSerializer(StrictSerializer):
    """Input serializer for creating bookings"""
    barber_id = serializers.UUIDField()
    shop_id = serializers.UUIDField()
    services = BookingServiceItemSerializer(many=True, allow_empty=False)
    booking_date = serializers.DateField(help_text="Date in the shop's timezone (YYYY-MM-DD)")
    booking_time = serializers.TimeField(help_text="Start time in the shop's timezone (HH:MM)")
    notes = serializers.CharField(required=False, allow_blank=True, max_length=500)


class BookingCompleteSerializer(StrictSerializer):
    notes = serializers.CharField(required=False, allow_blank=True, max_length=500)


class BookingCancelSerializer(StrictSerializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500)


class BookingRateSerializer(StrictSerializer):
    """Rating is range-checked by the service so the error carries its own code"""
    rating = serializers.IntegerField()
    comment = serializers.CharField(required=False, allow_blank=True, max_length=1000)
