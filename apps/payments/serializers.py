"""
Payment serializers
"""
from rest_framework import serializers

from apps.bookings.serializers import BookingSerializer
from apps.core.serializers import StrictSerializer
from apps.core.utils.constants import TRANSACTION_STATUSES, TRANSACTION_TYPES
from apps.core.validators import validate_positive_decimal
from .models import Transaction


class TransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Transaction
        fields = [
            'id', 'type', 'amount', 'reference', 'status', 'payment_method',
            'description', 'metadata', 'processed_at', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class WalletBalanceSerializer(serializers.Serializer):
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    currency = serializers.CharField()


class FundWalletSerializer(StrictSerializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, validators=[validate_positive_decimal])
    payment_method = serializers.CharField(required=False, default='card', max_length=50)


class FundWalletResponseSerializer(serializers.Serializer):
    authorization_url = serializers.URLField()
    access_code = serializers.CharField()
    reference = serializers.CharField()
    transaction = TransactionSerializer()


class PayBookingSerializer(StrictSerializer):
    booking_id = serializers.UUIDField()


class PayBookingResponseSerializer(serializers.Serializer):
    transaction = TransactionSerializer()
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    booking = BookingSerializer()


class TransactionFilterSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=TRANSACTION_TYPES, required=False)
    status = serializers.ChoiceField(choices=TRANSACTION_STATUSES, required=False)
