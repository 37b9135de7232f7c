"""
Customer serializers
"""
from rest_framework import serializers
from .models import CustomerProfile


class CustomerProfileSerializer(serializers.ModelSerializer):
    """Serializer for CustomerProfile model"""
    wallet_balance = serializers.DecimalField(
        source='wallet.balance',
        max_digits=12,
        decimal_places=2,
        read_only=True,
        default=None
    )
    favorite_shops_count = serializers.IntegerField(
        source='favorite_shops.count',
        read_only=True
    )

    class Meta:
        model = CustomerProfile
        fields = [
            'id', 'address', 'wallet_balance', 'favorite_shops_count',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields
