"""
Payment app URLs for webhooks.
"""
from django.urls import path
from . import webhook_views

app_name = 'payments'

urlpatterns = [
    path('webhooks/paystack/', webhook_views.paystack_webhook, name='paystack-webhook'),
]
