# apps/ml_recomendaciones/management/commands/despachar_feedback_ml.py

from django.conf import settings
from django.core.management.base import BaseCommand

from apps.ml_recomendaciones.feedback import despachar_pendientes


class Command(BaseCommand):
    help = 'Reenvía al servicio ML los feedbacks pendientes o fallidos'

    def add_arguments(self, parser):
        parser.add_argument(
            '--max-intentos',
            type=int,
            default=settings.ML_FEEDBACK_MAX_INTENTOS,
            help='No reintentar registros con este número de intentos o más'
        )

    def handle(self, *args, **options):
        enviados, total = despachar_pendientes(max_intentos=options['max_intentos'])

        self.stdout.write(self.style.SUCCESS(
            f'✅ Feedback ML despachado: {enviados}/{total}'
        ))
