"""
Serializers for the rates API.
Validates query parameters and renders domain results; no ORM models involved.
"""

from rest_framework import serializers


class RateQuerySerializer(serializers.Serializer):
    base_currency = serializers.CharField(min_length=3, max_length=3)
    target_currency = serializers.CharField(min_length=3, max_length=3)
    date = serializers.DateField(required=False)

    def validate_base_currency(self, value: str) -> str:
        return self._currency_code(value)

    def validate_target_currency(self, value: str) -> str:
        return self._currency_code(value)

    @staticmethod
    def _currency_code(value: str) -> str:
        if not value.isalpha():
            raise serializers.ValidationError("Currency code must contain letters only.")
        return value.upper()


class ConvertQuerySerializer(RateQuerySerializer):
    amount = serializers.DecimalField(max_digits=24, decimal_places=6)

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be positive")
        return value


class RateContextSerializer(serializers.Serializer):
    provider = serializers.CharField()
    rate_type = serializers.CharField(source="rate_type.value")
    day = serializers.DateField()
    timestamp = serializers.DateTimeField()


class ResolvedRateSerializer(serializers.Serializer):
    base_currency = serializers.CharField()
    target_currency = serializers.CharField()
    factor = serializers.SerializerMethodField()
    context = RateContextSerializer()
    chain = serializers.SerializerMethodField()

    def get_factor(self, obj) -> str:
        return str(obj.factor)

    def get_chain(self, obj) -> list:
        return ResolvedRateSerializer(obj.chain, many=True).data


class ConversionResultSerializer(serializers.Serializer):
    base_currency = serializers.CharField()
    target_currency = serializers.CharField()
    amount = serializers.SerializerMethodField()
    rate = serializers.SerializerMethodField()
    converted_amount = serializers.SerializerMethodField()
    valuation_date = serializers.DateField()
    derived = serializers.BooleanField()

    def get_amount(self, obj) -> str:
        return str(obj.amount)

    def get_rate(self, obj) -> str:
        return str(obj.rate)

    def get_converted_amount(self, obj) -> str:
        return str(obj.converted_amount)


class ProviderStatusSerializer(serializers.Serializer):
    feed = serializers.CharField()
    provider = serializers.CharField()
    base_currency = serializers.CharField()
    days_loaded = serializers.IntegerField()
    recent_day = serializers.DateField(allow_null=True)
    last_days_added = serializers.IntegerField()
    started = serializers.BooleanField()
