from django.apps import AppConfig


class MlRecomendacionesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.ml_recomendaciones'
    verbose_name = 'Recomendaciones ML'
