from django.apps import AppConfig


class InspeccionesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.inspecciones'
    verbose_name = 'Inspecciones'
