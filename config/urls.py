"""
URL configuration for Barberzon.
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),

    # API v1 endpoints
    path('api/v1/auth/', include('apps.authentication.urls')),
    path('api/v1/shops/', include('apps.shops.urls')),
    path('api/v1/join-requests/', include('apps.join_requests.urls')),
    path('api/v1/bookings/', include('apps.bookings.urls')),
    path('api/v1/barbers/', include('apps.barbers.urls')),
    path('api/v1/payments/', include('apps.payments.api_urls')),
    path('api/v1/notifications/', include('apps.notifications.urls')),

    # Webhooks (no version prefix for webhooks)
    path('api/payments/', include('apps.payments.urls')),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
