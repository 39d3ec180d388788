# indications/apps.py
from django.apps import AppConfig


class IndicationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "indications"
    verbose_name = "Indicações"

    def ready(self):
        import indications.signals  # noqa
