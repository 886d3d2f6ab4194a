from django.apps import AppConfig


class LoyersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'loyers'
    verbose_name = "Gestion locative"
