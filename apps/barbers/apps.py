"""
Barbers app configuration
"""
from django.apps import AppConfig


class BarbersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.barbers'
    verbose_name = 'Barbers'

    def ready(self):
        # Import signals to register them
        import apps.barbers.signals  # noqa: F401
