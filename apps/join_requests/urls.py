"""
URL configuration for join_requests app.
"""
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'join_requests'

router = DefaultRouter()
router.register(r'', views.JoinRequestViewSet, basename='join-request')

urlpatterns = router.urls
