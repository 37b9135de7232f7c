"""
Barber serializers
"""
from rest_framework import serializers

from apps.core.serializers import StrictSerializer
from apps.core.utils.constants import BARBER_STATUSES, EARNINGS_PERIODS
from .models import BarberProfile


class BarberProfileSerializer(serializers.ModelSerializer):
    """Serializer for BarberProfile model"""
    full_name = serializers.CharField(source='user.full_name', read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)
    phone_number = serializers.CharField(source='user.phone_number', read_only=True)
    shop_name = serializers.CharField(source='shop.name', read_only=True, default=None)
    is_solo = serializers.BooleanField(read_only=True)

    class Meta:
        model = BarberProfile
        fields = [
            'id', 'full_name', 'email', 'phone_number',
            'shop', 'shop_name', 'seat_number', 'is_solo',
            'is_available', 'status', 'specialties', 'hourly_rate', 'bio',
            'rating', 'total_reviews', 'created_at', 'updated_at'
        ]
        read_only_fields = [
            'id', 'shop', 'seat_number', 'is_available', 'status',
            'rating', 'total_reviews', 'created_at', 'updated_at'
        ]


class BarberProfileUpdateSerializer(serializers.ModelSerializer):
    """Serializer for a barber editing their own profile"""

    class Meta:
        model = BarberProfile
        fields = ['specialties', 'hourly_rate', 'bio']

    def validate_specialties(self, value):
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise serializers.ValidationError('Specialties must be a list of strings.')
        return value

    def validate_hourly_rate(self, value):
        if value < 0:
            raise serializers.ValidationError('Hourly rate cannot be negative.')
        return value


class BarberStatusSerializer(StrictSerializer):
    """Serializer for a working status change"""
    status = serializers.ChoiceField(choices=BARBER_STATUSES)


class EarningsQuerySerializer(serializers.Serializer):
    """Query parameters for the earnings summary"""
    period = serializers.ChoiceField(choices=EARNINGS_PERIODS, default='month')


class EarningsSerializer(serializers.Serializer):
    """Earnings summary response"""
    period = serializers.CharField()
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()
    gross_earnings = serializers.DecimalField(max_digits=12, decimal_places=2)
    platform_fees = serializers.DecimalField(max_digits=12, decimal_places=2)
    net_earnings = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_bookings = serializers.IntegerField()
    unique_customers = serializers.IntegerField()
    completion_rate = serializers.IntegerField()
