"""
Booking views
"""
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.barbers.services import get_barber_profile
from apps.core.permissions import IsCustomer, IsBarber
from apps.customers.services import get_customer_profile
from .models import Booking
from .serializers import (
    BookingSerializer,
    BookingCreateSerializer,
    BookingCompleteSerializer,
    BookingCancelSerializer,
    BookingRateSerializer,
    ReviewSerializer,
)
from .services.booking_service import booking_service


class BookingViewSet(viewsets.GenericViewSet,
                     mixins.ListModelMixin):
    """
    ViewSet for managing bookings.

    Customers book and cancel; the assigned barber confirms, completes or cancels.
    """
    serializer_class = BookingSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ['status', 'payment_status', 'shop']
    ordering_fields = ['booking_date', 'created_at', 'total_amount']
    ordering = ['-booking_date']

    def get_queryset(self):
        # Handle schema generation
        if getattr(self, 'swagger_fake_view', False):
            return Booking.objects.none()

        return booking_service.list_for_user(self.request.user)

    def get_permissions(self):
        """Set permissions based on action"""
        if self.action in ['create', 'rate']:
            return [IsCustomer()]
        elif self.action in ['confirm', 'complete']:
            return [IsBarber()]
        return super().get_permissions()

    @extend_schema(
        summary="List bookings",
        description="Customers see the bookings they made, barbers the bookings assigned to them.",
        parameters=[
            OpenApiParameter('status', str, description='pending, confirmed, completed or cancelled'),
            OpenApiParameter('payment_status', str, description='pending or paid'),
            OpenApiParameter('shop', str, description='Filter by shop UUID'),
        ],
        responses={200: BookingSerializer(many=True)},
        tags=['Bookings']
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(
        summary="Create booking",
        description="Book a barber for one or more services. Date and time are in the shop's timezone.",
        request=BookingCreateSerializer,
        responses={
            201: BookingSerializer,
            400: OpenApiResponse(description="Invalid input or time in the past"),
            404: OpenApiResponse(description="Barber or shop not found"),
            409: OpenApiResponse(description="Slot taken, barber unavailable or not in this shop")
        },
        tags=['Bookings']
    )
    def create(self, request):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        booking = booking_service.create(
            get_customer_profile(request.user),
            data['barber_id'],
            data['shop_id'],
            data['services'],
            data['booking_date'],
            data['booking_time'],
            notes=data.get('notes', ''),
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Get booking details",
        description="Retrieve a booking you are the customer or barber of",
        responses={
            200: BookingSerializer,
            403: OpenApiResponse(description="Forbidden"),
            404: OpenApiResponse(description="Booking not found")
        },
        tags=['Bookings']
    )
    def retrieve(self, request, pk=None):
        booking = booking_service.get_for_actor(pk, request.user)
        return Response(BookingSerializer(booking).data)

    @extend_schema(
        summary="Confirm booking",
        description="Confirm a pending booking (assigned barber only)",
        request=None,
        responses={
            200: BookingSerializer,
            403: OpenApiResponse(description="Not the assigned barber"),
            404: OpenApiResponse(description="Booking not found"),
            409: OpenApiResponse(description="Booking is not pending")
        },
        tags=['Bookings']
    )
    @action(detail=True, methods=['post'])
    def confirm(self, request, pk=None):
        booking = booking_service.confirm(pk, get_barber_profile(request.user))
        return Response(BookingSerializer(booking).data)

    @extend_schema(
        summary="Complete booking",
        description="Mark a confirmed booking as completed and paid (assigned barber only)",
        request=BookingCompleteSerializer,
        responses={
            200: BookingSerializer,
            403: OpenApiResponse(description="Not the assigned barber"),
            404: OpenApiResponse(description="Booking not found"),
            409: OpenApiResponse(description="Booking is not confirmed")
        },
        tags=['Bookings']
    )
    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        serializer = BookingCompleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = booking_service.complete(
            pk,
            get_barber_profile(request.user),
            notes=serializer.validated_data.get('notes'),
        )
        return Response(BookingSerializer(booking).data)

    @extend_schema(
        summary="Cancel booking",
        description=(
            "Cancel a pending or confirmed booking. A customer cancelling less than "
            "two hours before the start is quoted a cancellation fee."
        ),
        request=BookingCancelSerializer,
        responses={
            200: BookingSerializer,
            403: OpenApiResponse(description="Not your booking"),
            404: OpenApiResponse(description="Booking not found"),
            409: OpenApiResponse(description="Booking already completed or cancelled")
        },
        tags=['Bookings']
    )
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        serializer = BookingCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = booking_service.cancel(
            pk,
            request.user,
            request.user.role,
            reason=serializer.validated_data.get('reason'),
        )
        return Response(BookingSerializer(booking).data)

    @extend_schema(
        summary="Rate booking",
        description="Review a completed booking (1-5). Rating again replaces the previous review.",
        request=BookingRateSerializer,
        responses={
            200: ReviewSerializer,
            400: OpenApiResponse(description="Rating out of range"),
            403: OpenApiResponse(description="Not your booking"),
            409: OpenApiResponse(description="Booking is not completed")
        },
        tags=['Bookings']
    )
    @action(detail=True, methods=['post'])
    def rate(self, request, pk=None):
        serializer = BookingRateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        review = booking_service.rate(
            pk,
            get_customer_profile(request.user),
            serializer.validated_data['rating'],
            comment=serializer.validated_data.get('comment', ''),
        )
        return Response(ReviewSerializer(review).data)
