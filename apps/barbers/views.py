"""
Barber self-service views
"""
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.core.permissions import IsBarber
from . import services
from .serializers import (
    BarberProfileSerializer,
    BarberProfileUpdateSerializer,
    BarberStatusSerializer,
    EarningsQuerySerializer,
    EarningsSerializer,
)


class BarberViewSet(viewsets.ViewSet):
    """
    Endpoints for the authenticated barber
    """
    permission_classes = [IsBarber]

    @extend_schema(
        summary="My barber profile",
        description="Get or update the current barber's profile",
        request=BarberProfileUpdateSerializer,
        responses={
            200: BarberProfileSerializer,
            404: OpenApiResponse(description="Barber profile not found")
        },
        tags=['Barbers']
    )
    @action(detail=False, methods=['get', 'patch'], url_path='me')
    def me(self, request):
        """Get or update own profile"""
        barber = services.get_barber_profile(request.user)

        if request.method == 'PATCH':
            serializer = BarberProfileUpdateSerializer(barber, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()

        return Response(BarberProfileSerializer(barber).data)

    @extend_schema(
        summary="Update working status",
        description="Set status to available, busy, break or offline. Only 'available' accepts bookings.",
        request=BarberStatusSerializer,
        responses={
            200: BarberProfileSerializer,
            400: OpenApiResponse(description="Invalid status")
        },
        tags=['Barbers']
    )
    @action(detail=False, methods=['patch'], url_path='me/status')
    def status(self, request):
        """Update own working status"""
        serializer = BarberStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        barber = services.get_barber_profile(request.user)
        barber = services.update_status(barber, serializer.validated_data['status'])
        return Response(BarberProfileSerializer(barber).data)

    @extend_schema(
        summary="Earnings summary",
        description="Gross, platform fee and net earnings from completed paid bookings",
        parameters=[
            OpenApiParameter('period', str, description='today, week or month (default month)'),
        ],
        responses={200: EarningsSerializer},
        tags=['Barbers']
    )
    @action(detail=False, methods=['get'], url_path='me/earnings')
    def earnings(self, request):
        """Get own earnings for a period"""
        query = EarningsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        barber = services.get_barber_profile(request.user)
        summary = services.earnings(barber, query.validated_data['period'])
        return Response(EarningsSerializer(summary).data)
