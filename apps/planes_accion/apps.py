from django.apps import AppConfig


class PlanesAccionConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.planes_accion'
    verbose_name = 'Planes de Acción'
