# apps/ml_recomendaciones/tasks.py

import logging

from celery import shared_task
from django.conf import settings

from .feedback import despachar_feedback, despachar_pendientes

logger = logging.getLogger(__name__)


@shared_task(ignore_result=True)
def enviar_feedback_ml(feedback_id):
    despachar_feedback(feedback_id)


@shared_task(ignore_result=True)
def reintentar_feedback_ml():
    enviados, total = despachar_pendientes(max_intentos=settings.ML_FEEDBACK_MAX_INTENTOS)
    if total:
        logger.info(f"Reintento de feedback ML: {enviados}/{total} enviados")
