from rest_framework import serializers


class VerificationQuerySerializer(serializers.Serializer):
    timeout = serializers.FloatField(required=False, min_value=0.001)


class TransactionResultSerializer(serializers.Serializer):
    id = serializers.CharField()
    reference_id = serializers.CharField()
    message = serializers.CharField(allow_blank=True)
    status = serializers.CharField(source="status.value")
    provider_status = serializers.CharField(allow_null=True)
    amount = serializers.FloatField(allow_null=True)
    created_at = serializers.DateTimeField(allow_null=True)
    is_final = serializers.BooleanField()
