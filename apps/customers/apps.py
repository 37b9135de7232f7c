"""
Customers app configuration
"""
from django.apps import AppConfig


class CustomersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.customers'
    verbose_name = 'Customers'

    def ready(self):
        # Import signals to register them
        import apps.customers.signals  # noqa: F401
