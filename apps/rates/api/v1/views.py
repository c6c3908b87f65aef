"""
ViewSet for the rates API v1.
Read-only query endpoints served from the in-memory rate provider.
"""

from django.apps import apps as django_apps
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.rates.api.v1.serializers import (
    ConversionResultSerializer,
    ConvertQuerySerializer,
    ProviderStatusSerializer,
    RateQuerySerializer,
    ResolvedRateSerializer,
)
from apps.rates.domain.exceptions import CurrencyConversionError


RATE_PARAMETERS = [
    OpenApiParameter("base_currency", OpenApiTypes.STR, required=True, description="Base currency code (e.g. USD)"),
    OpenApiParameter("target_currency", OpenApiTypes.STR, required=True, description="Target currency code (e.g. JPY)"),
    OpenApiParameter("date", OpenApiTypes.DATE, description="Day of the rate (optional, defaults to the most recent loaded day)"),
]


def get_rate_provider():
    return django_apps.get_app_config("rates").provider


@extend_schema(tags=['Rates'])
class RateViewSet(viewsets.ViewSet):

    @extend_schema(
        parameters=RATE_PARAMETERS,
        responses=ResolvedRateSerializer,
        description="Resolve the rate between two currencies, derived through the feed base if needed",
    )
    @action(detail=False, methods=['get'], url_path='resolve')
    def resolve(self, request):
        query = RateQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response({"error": query.errors}, status=status.HTTP_400_BAD_REQUEST)
        params = query.validated_data

        try:
            rate = get_rate_provider().get_exchange_rate(
                params["base_currency"],
                params["target_currency"],
                params.get("date"),
            )
        except CurrencyConversionError as e:
            return Response({"error": str(e)}, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

        if rate is None:
            return Response(
                {"error": f"No rate known for {params['base_currency']}/{params['target_currency']}"},
                status=status.HTTP_404_NOT_FOUND
            )

        return Response(ResolvedRateSerializer(rate).data)

    @extend_schema(
        parameters=RATE_PARAMETERS + [
            OpenApiParameter("amount", OpenApiTypes.DECIMAL, required=True, description="Amount to convert"),
        ],
        responses=ConversionResultSerializer,
        description="Convert amount from one currency to another",
    )
    @action(detail=False, methods=['get'], url_path='convert')
    def convert(self, request):
        query = ConvertQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response({"error": query.errors}, status=status.HTTP_400_BAD_REQUEST)
        params = query.validated_data

        try:
            result = get_rate_provider().convert_amount(
                params["base_currency"],
                params["target_currency"],
                params["amount"],
                params.get("date"),
            )
        except CurrencyConversionError as e:
            return Response({"error": str(e)}, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

        if result is None:
            return Response(
                {"error": f"No rate known for {params['base_currency']}/{params['target_currency']}"},
                status=status.HTTP_404_NOT_FOUND
            )

        return Response(ConversionResultSerializer(result).data)

    @extend_schema(responses=ProviderStatusSerializer, description="What the rate provider currently holds")
    @action(detail=False, methods=['get'], url_path='status')
    def provider_status(self, request):
        return Response(ProviderStatusSerializer(get_rate_provider().status()).data)
