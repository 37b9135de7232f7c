"""
API views for in-app notifications.
"""
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from rest_framework import generics, views
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.core.pagination import LimitPagePagination
from apps.notifications.serializers import (
    NotificationSerializer,
    NotificationFilterSerializer,
    MarkNotificationReadSerializer,
    MarkNotificationReadResponseSerializer,
    NotificationCountSerializer,
)
from apps.notifications.services import dispatcher


@extend_schema(
    tags=['Notifications'],
    summary='List notifications',
    description='Notifications for the current user, newest first.',
    parameters=[
        OpenApiParameter('is_read', bool, description='Filter by read flag'),
        OpenApiParameter('page', int, description='Page number'),
        OpenApiParameter('limit', int, description='Items per page (default 20)'),
    ],
    responses={200: NotificationSerializer(many=True)}
)
class NotificationListView(generics.ListAPIView):
    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = LimitPagePagination

    def get_queryset(self):
        params = NotificationFilterSerializer(data=self.request.query_params)
        params.is_valid(raise_exception=True)
        return dispatcher.list_notifications(self.request.user, params.validated_data.get('is_read'))


@extend_schema(
    tags=['Notifications'],
    summary='Notification counts',
    description='Total and unread notification counts for the current user.',
    responses={200: NotificationCountSerializer}
)
class NotificationCountView(views.APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(NotificationCountSerializer(dispatcher.counts(request.user)).data)


@extend_schema(
    tags=['Notifications'],
    summary='Mark notifications as read',
    description='Mark the listed notifications as read, or all of them when no IDs are given.',
    request=MarkNotificationReadSerializer,
    responses={200: MarkNotificationReadResponseSerializer}
)
class NotificationMarkReadView(views.APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = MarkNotificationReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        updated = dispatcher.mark_all_read(
            request.user,
            serializer.validated_data.get('notification_ids')
        )
        return Response({
            'message': f'{updated} notification(s) marked as read',
            'updated_count': updated,
        })


@extend_schema(
    tags=['Notifications'],
    summary='Mark one notification as read',
    request=None,
    responses={
        200: NotificationSerializer,
        404: OpenApiResponse(description='Notification not found')
    }
)
class NotificationReadView(views.APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        notification = dispatcher.mark_read(request.user, pk)
        return Response(NotificationSerializer(notification).data)
