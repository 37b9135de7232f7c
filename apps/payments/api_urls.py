"""
Payment app URLs for the wallet API.
"""
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'payments_api'

router = DefaultRouter()
router.register(r'', views.PaymentViewSet, basename='payment')

urlpatterns = router.urls
