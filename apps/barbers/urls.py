"""
URL configuration for barbers app.
"""
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'barbers'

router = DefaultRouter()
router.register(r'', views.BarberViewSet, basename='barber')

urlpatterns = router.urls
