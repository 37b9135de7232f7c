"""
Shop views
"""
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response

from apps.barbers.serializers import BarberProfileSerializer
from apps.barbers.services import get_barber_profile
from apps.core.permissions import IsBarber
from .models import Shop
from . import services
from .serializers import (
    ShopSerializer,
    ShopDetailSerializer,
    ShopCreateSerializer,
    ShopCapacitySerializer,
    ShopHoursSerializer,
    ShopContactSerializer,
    ShopSearchSerializer,
)


class ShopViewSet(viewsets.GenericViewSet):
    """ViewSet for shop discovery and owner management"""
    queryset = Shop.objects.select_related('owner__user')
    serializer_class = ShopSerializer
    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.action in ['list', 'retrieve', 'barbers']:
            return [AllowAny()]
        if self.action in ['create', 'capacity', 'hours', 'contact', 'leave']:
            return [IsBarber()]
        return super().get_permissions()

    def get_shop(self):
        return services.get_shop(self.kwargs['pk'])

    @extend_schema(
        summary="Search shops",
        description="List shops, optionally filtered by text and distance from a point. "
                    "With lat/lng, results within the radius are sorted nearest first.",
        parameters=[
            OpenApiParameter('search', str, description='Search in name and address'),
            OpenApiParameter('lat', float, description='Latitude of the customer'),
            OpenApiParameter('lng', float, description='Longitude of the customer'),
            OpenApiParameter('radius', float, description='Radius in km (default 10)'),
            OpenApiParameter('verified', bool, description='Only verified shops'),
        ],
        responses={200: ShopSerializer(many=True)},
        tags=['Shops - Public']
    )
    def list(self, request):
        params = ShopSearchSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = params.validated_data

        shops = services.search_shops(
            query=data.get('search'),
            latitude=data.get('lat'),
            longitude=data.get('lng'),
            radius_km=data.get('radius'),
            verified_only=data.get('verified', False),
        )

        page = self.paginate_queryset(shops)
        if page is not None:
            return self.get_paginated_response(ShopSerializer(page, many=True).data)
        return Response(ShopSerializer(shops, many=True).data)

    @extend_schema(
        summary="Get shop details",
        description="Retrieve a shop with its seats and their occupants",
        responses={
            200: ShopDetailSerializer,
            404: OpenApiResponse(description="Shop not found")
        },
        tags=['Shops - Public']
    )
    def retrieve(self, request, pk=None):
        return Response(ShopDetailSerializer(self.get_shop()).data)

    @extend_schema(
        summary="Create shop",
        description="Create a shop owned by the current barber. The owner takes seat 1.",
        request=ShopCreateSerializer,
        responses={
            201: ShopDetailSerializer,
            400: OpenApiResponse(description="Bad Request"),
            409: OpenApiResponse(description="Barber already owns or sits in a shop")
        },
        tags=['Shops - Owner']
    )
    def create(self, request):
        serializer = ShopCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        owner = get_barber_profile(request.user)
        shop = services.create_shop(owner, **serializer.validated_data)
        return Response(ShopDetailSerializer(shop).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Change shop capacity",
        description="Add seats, or remove trailing seats that are all free (owner only)",
        request=ShopCapacitySerializer,
        responses={
            200: ShopDetailSerializer,
            403: OpenApiResponse(description="Not the shop owner"),
            409: OpenApiResponse(description="Removed seats are occupied")
        },
        tags=['Shops - Owner']
    )
    @action(detail=True, methods=['patch'])
    def capacity(self, request, pk=None):
        serializer = ShopCapacitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        shop = services.update_capacity(
            self.get_shop(),
            get_barber_profile(request.user),
            serializer.validated_data['total_seats']
        )
        return Response(ShopDetailSerializer(shop).data)

    @extend_schema(
        summary="Update opening hours",
        description="Set opening hours per weekday: {\"monday\": {\"open\": \"09:00\", \"close\": \"18:00\", \"closed\": false}}",
        request=ShopHoursSerializer,
        responses={
            200: ShopSerializer,
            400: OpenApiResponse(description="Invalid hours"),
            403: OpenApiResponse(description="Not the shop owner")
        },
        tags=['Shops - Owner']
    )
    @action(detail=True, methods=['patch'])
    def hours(self, request, pk=None):
        serializer = ShopHoursSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        shop = services.update_hours(
            self.get_shop(),
            get_barber_profile(request.user),
            serializer.validated_data['opening_hours']
        )
        return Response(ShopSerializer(shop).data)

    @extend_schema(
        summary="Update contact info",
        description="Update name, description, address, phone number or email (owner only)",
        request=ShopContactSerializer,
        responses={
            200: ShopSerializer,
            403: OpenApiResponse(description="Not the shop owner")
        },
        tags=['Shops - Owner']
    )
    @action(detail=True, methods=['patch'])
    def contact(self, request, pk=None):
        serializer = ShopContactSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        shop = services.update_contact_info(
            self.get_shop(),
            get_barber_profile(request.user),
            **serializer.validated_data
        )
        return Response(ShopSerializer(shop).data)

    @extend_schema(
        summary="Shop barbers",
        description="Barbers currently seated in the shop",
        responses={200: BarberProfileSerializer(many=True)},
        tags=['Shops - Public']
    )
    @action(detail=True, methods=['get'])
    def barbers(self, request, pk=None):
        shop = self.get_shop()
        barbers = shop.barbers.select_related('user').order_by('seat_number')
        return Response(BarberProfileSerializer(barbers, many=True).data)

    @extend_schema(
        summary="Leave shop",
        description="Give up your seat and go back to working solo. The owner cannot leave.",
        request=None,
        responses={
            200: BarberProfileSerializer,
            400: OpenApiResponse(description="Owner cannot leave"),
            409: OpenApiResponse(description="Barber does not belong to this shop")
        },
        tags=['Shops - Owner']
    )
    @action(detail=True, methods=['post'])
    def leave(self, request, pk=None):
        barber = services.release_seat(self.get_shop(), get_barber_profile(request.user))
        return Response(BarberProfileSerializer(barber).data)
