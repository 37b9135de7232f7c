"""
URL routes for notifications API.
"""
from django.urls import path
from apps.notifications.views import (
    NotificationListView,
    NotificationCountView,
    NotificationMarkReadView,
    NotificationReadView,
)

app_name = 'notifications'

urlpatterns = [
    path('', NotificationListView.as_view(), name='list'),
    path('count/', NotificationCountView.as_view(), name='count'),
    path('mark-read/', NotificationMarkReadView.as_view(), name='mark-read'),
    path('<uuid:pk>/read/', NotificationReadView.as_view(), name='read'),
]
