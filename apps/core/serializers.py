"""
Core serializers
"""
from rest_framework import serializers


class StrictSerializer(serializers.Serializer):
    """
    Input serializer that rejects fields it does not declare
    """

    def to_internal_value(self, data):
        if hasattr(data, 'keys'):
            unknown = set(data.keys()) - set(self.fields.keys())
            if unknown:
                raise serializers.ValidationError({
                    field: ['Unknown field.'] for field in sorted(unknown)
                })
        return super().to_internal_value(data)
