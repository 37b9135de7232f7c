"""
Join requests app configuration
"""
from django.apps import AppConfig


class JoinRequestsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.join_requests'
    verbose_name = 'Join Requests'
