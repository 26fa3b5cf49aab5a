from django.apps import AppConfig


class EnchanterConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "enchanter"
    verbose_name = "Ghibli Photo Enchanter"
