"""
Shop serializers
"""
import pytz
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from apps.core.serializers import StrictSerializer
from apps.core.utils.constants import DEFAULT_TOTAL_SEATS
from apps.core.validators import validate_opening_hours, validate_phone_number
from .models import Shop, ShopSeat
from . import services


def validate_timezone_name(value):
    """Validate timezone is a valid pytz timezone."""
    try:
        pytz.timezone(value)
    except pytz.exceptions.UnknownTimeZoneError:
        raise serializers.ValidationError(
            f"Invalid timezone: {value}. Must be a valid IANA timezone (e.g., 'Africa/Lagos', 'Europe/London')"
        )
    return value


class ShopSerializer(serializers.ModelSerializer):
    """Basic shop serializer with seat availability"""
    owner_name = serializers.CharField(source='owner.user.full_name', read_only=True)
    occupied_seats = serializers.SerializerMethodField()
    available_seats = serializers.SerializerMethodField()
    distance_km = serializers.SerializerMethodField()

    @extend_schema_field(serializers.IntegerField)
    def get_occupied_seats(self, obj):
        occupied = getattr(obj, 'occupied_seats', None)
        if occupied is None:
            occupied = len(services.occupied_seat_numbers(obj))
        return occupied

    @extend_schema_field(serializers.IntegerField)
    def get_available_seats(self, obj):
        return max(obj.total_seats - self.get_occupied_seats(obj), 0)

    @extend_schema_field(serializers.FloatField(allow_null=True))
    def get_distance_km(self, obj):
        return getattr(obj, 'distance_km', None)

    class Meta:
        model = Shop
        fields = [
            'id', 'owner', 'owner_name', 'name', 'description', 'address',
            'location_lat', 'location_lng', 'phone_number', 'email',
            'total_seats', 'occupied_seats', 'available_seats', 'distance_km',
            'opening_hours', 'timezone', 'is_verified', 'rating', 'total_reviews',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class ShopSeatSerializer(serializers.ModelSerializer):
    """Seat with its current occupant"""
    barber_name = serializers.CharField(source='barber.user.full_name', read_only=True, default=None)
    is_occupied = serializers.BooleanField(read_only=True)

    class Meta:
        model = ShopSeat
        fields = ['seat_number', 'is_occupied', 'barber', 'barber_name']
        read_only_fields = fields


class ShopDetailSerializer(ShopSerializer):
    """Detailed shop serializer with seats"""
    seats = serializers.SerializerMethodField()

    @extend_schema_field(ShopSeatSerializer(many=True))
    def get_seats(self, obj):
        seats = obj.seats.select_related('barber__user').order_by('seat_number')
        return ShopSeatSerializer(seats, many=True).data

    class Meta(ShopSerializer.Meta):
        fields = ShopSerializer.Meta.fields + ['seats']
        read_only_fields = fields


class ShopCreateSerializer(StrictSerializer):
    """Serializer for creating a shop"""
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    address = serializers.CharField(max_length=500)
    phone_number = serializers.CharField(
        max_length=20, required=False, allow_blank=True, validators=[validate_phone_number]
    )
    email = serializers.EmailField(required=False, allow_blank=True)
    location_lat = serializers.FloatField(required=False, allow_null=True, min_value=-90, max_value=90)
    location_lng = serializers.FloatField(required=False, allow_null=True, min_value=-180, max_value=180)
    total_seats = serializers.IntegerField(required=False, default=DEFAULT_TOTAL_SEATS, min_value=1)
    opening_hours = serializers.JSONField(required=False, validators=[validate_opening_hours])
    timezone = serializers.CharField(required=False, validators=[validate_timezone_name])


class ShopCapacitySerializer(StrictSerializer):
    total_seats = serializers.IntegerField(min_value=1)


class ShopHoursSerializer(StrictSerializer):
    opening_hours = serializers.JSONField()


class ShopContactSerializer(StrictSerializer):
    """Serializer for contact info changes; every field is optional"""
    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    address = serializers.CharField(max_length=500, required=False)
    phone_number = serializers.CharField(
        max_length=20, required=False, allow_blank=True, validators=[validate_phone_number]
    )
    email = serializers.EmailField(required=False, allow_blank=True)


class ShopSearchSerializer(serializers.Serializer):
    """Serializer for shop search parameters"""
    search = serializers.CharField(required=False, help_text="Name or address contains")
    lat = serializers.FloatField(required=False, min_value=-90, max_value=90)
    lng = serializers.FloatField(required=False, min_value=-180, max_value=180)
    radius = serializers.FloatField(required=False, min_value=0, help_text="Radius in km (default 10)")
    verified = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        if ('lat' in attrs) != ('lng' in attrs):
            raise serializers.ValidationError('lat and lng must be given together.')
        return attrs
