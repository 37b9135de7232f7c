"""
Join request views
"""
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.barbers.services import get_barber_profile
from apps.core.permissions import IsBarber
from . import services
from .serializers import (
    JoinRequestSerializer,
    JoinRequestCreateSerializer,
    JoinRequestRespondSerializer,
    JoinRequestFilterSerializer,
)


class JoinRequestViewSet(viewsets.GenericViewSet):
    """
    Barbers ask to join shops; shop owners approve or reject.
    """
    serializer_class = JoinRequestSerializer
    permission_classes = [IsBarber]

    def _paginated(self, queryset):
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(JoinRequestSerializer(page, many=True).data)
        return Response(JoinRequestSerializer(queryset, many=True).data)

    @extend_schema(
        summary="Submit join request",
        description="Ask to join a barbershop, optionally for a specific seat",
        request=JoinRequestCreateSerializer,
        responses={
            201: JoinRequestSerializer,
            404: OpenApiResponse(description="Shop not found"),
            409: OpenApiResponse(description="Already affiliated, shop full or duplicate request")
        },
        tags=['Join Requests']
    )
    def create(self, request):
        serializer = JoinRequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        join_request = services.submit(
            get_barber_profile(request.user),
            data['shop_id'],
            message=data.get('message', ''),
            seat_number=data.get('seat_number'),
        )
        return Response(JoinRequestSerializer(join_request).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Join requests for my shop",
        description="Requests sent to the shop owned by the current barber",
        parameters=[
            OpenApiParameter('status', str, description='pending, approved or rejected'),
        ],
        responses={200: JoinRequestSerializer(many=True)},
        tags=['Join Requests']
    )
    def list(self, request):
        params = JoinRequestFilterSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        queryset = services.list_for_owner(
            get_barber_profile(request.user),
            params.validated_data.get('status')
        )
        return self._paginated(queryset)

    @extend_schema(
        summary="My join requests",
        description="Requests the current barber has sent",
        responses={200: JoinRequestSerializer(many=True)},
        tags=['Join Requests']
    )
    @action(detail=False, methods=['get'])
    def mine(self, request):
        return self._paginated(services.list_for_barber(get_barber_profile(request.user)))

    @extend_schema(
        summary="Respond to join request",
        description="Approve (optionally choosing the seat) or reject a pending request (shop owner only)",
        request=JoinRequestRespondSerializer,
        responses={
            200: JoinRequestSerializer,
            403: OpenApiResponse(description="Not the shop owner"),
            404: OpenApiResponse(description="Join request not found"),
            409: OpenApiResponse(description="Already processed, shop full or seat taken")
        },
        tags=['Join Requests']
    )
    @action(detail=True, methods=['post'])
    def respond(self, request, pk=None):
        serializer = JoinRequestRespondSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        join_request = services.respond(
            pk,
            get_barber_profile(request.user),
            serializer.validated_data['action'],
            seat_number=serializer.validated_data.get('seat_number'),
        )
        return Response(JoinRequestSerializer(join_request).data)
