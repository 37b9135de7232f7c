"""
Join request serializers
"""
from rest_framework import serializers

from apps.core.serializers import StrictSerializer
from apps.core.utils.constants import (
    JOIN_REQUEST_ACTION_APPROVE,
    JOIN_REQUEST_ACTION_REJECT,
    JOIN_REQUEST_STATUSES,
)
from .models import JoinRequest


class JoinRequestSerializer(serializers.ModelSerializer):
    """Join request with barber and shop summaries"""
    barber_name = serializers.CharField(source='barber.user.full_name', read_only=True)
    barber_email = serializers.EmailField(source='barber.user.email', read_only=True)
    barber_specialties = serializers.JSONField(source='barber.specialties', read_only=True)
    barber_rating = serializers.DecimalField(
        source='barber.rating', max_digits=3, decimal_places=2, read_only=True
    )
    shop_name = serializers.CharField(source='shop.name', read_only=True)

    class Meta:
        model = JoinRequest
        fields = [
            'id', 'barber', 'barber_name', 'barber_email', 'barber_specialties', 'barber_rating',
            'shop', 'shop_name', 'status', 'seat_number', 'assigned_seat',
            'message', 'responded_at', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class JoinRequestCreateSerializer(StrictSerializer):
    shop_id = serializers.UUIDField()
    message = serializers.CharField(required=False, allow_blank=True, max_length=1000)
    seat_number = serializers.IntegerField(required=False, allow_null=True, min_value=1)


class JoinRequestRespondSerializer(StrictSerializer):
    action = serializers.ChoiceField(choices=[JOIN_REQUEST_ACTION_APPROVE, JOIN_REQUEST_ACTION_REJECT])
    seat_number = serializers.IntegerField(required=False, allow_null=True, min_value=1)


class JoinRequestFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=JOIN_REQUEST_STATUSES, required=False)
