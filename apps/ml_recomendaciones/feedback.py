# apps/ml_recomendaciones/feedback.py

import logging

from django.db import transaction
from kombu.exceptions import OperationalError

from apps.core.exceptions import ErrorServicioExterno
from .cliente import ClienteRecomendaciones
from .models import FeedbackML

logger = logging.getLogger(__name__)

FEEDBACK_GUARDADO = 'guardado'
# Toda observación que llega a plan de acción se asume crítica (puntaje bajo)
PUNTAJE_ASUMIDO = 0
PUNTAJE_FEEDBACK_ML = 1.0
PUNTAJE_FEEDBACK_MANUAL = 0.5


def construir_payload_feedback(tarea, plan, ml_metadata) -> dict:
    fue_recomendacion_ml = bool(ml_metadata.get('fue_recomendacion_ml', False))

    return {
        'question_text': tarea.texto_pregunta or '',
        'current_response': PUNTAJE_ASUMIDO,
        'comment': tarea.descripcion_observacion,
        'accion_seleccionada': tarea.accion_propuesta or '',
        'fue_recomendacion_ml': fue_recomendacion_ml,
        'indice_recomendacion': ml_metadata.get('indice_recomendacion'),
        'recomendaciones_originales': ml_metadata.get('recomendaciones_originales'),
        'context': {
            'familia_peligro': tarea.familia_peligro,
            'area': plan.area_fisica,
            'empresa': tarea.empresa,
            'vicepresidencia': plan.vicepresidencia,
            'superintendencia_senior': plan.superintendencia_senior,
            'superintendencia': plan.superintendencia,
        },
        'feedback_type': FEEDBACK_GUARDADO,
        'feedback_score': PUNTAJE_FEEDBACK_ML if fue_recomendacion_ml else PUNTAJE_FEEDBACK_MANUAL,
    }


def encolar_feedback(tarea, plan, ml_metadata) -> FeedbackML:
    """
    Registra el feedback en la bandeja de salida dentro de la transacción actual.
    El envío se programa para después del commit.
    """
    feedback = FeedbackML.objects.create(
        tarea=tarea,
        payload=construir_payload_feedback(tarea, plan, ml_metadata),
    )
    feedback_id = str(feedback.id)
    transaction.on_commit(lambda: programar_envio(feedback_id))
    logger.info(f"Feedback ML {feedback_id} encolado para la tarea #{tarea.numero_item}")
    return feedback


def programar_envio(feedback_id):
    from .tasks import enviar_feedback_ml

    try:
        enviar_feedback_ml.delay(feedback_id)
    except OperationalError as e:
        # Queda pendiente: el comando despachar_feedback_ml lo reintenta
        logger.warning(f"No se pudo programar el envío del feedback {feedback_id}: {e}")


def despachar_feedback(feedback_id, cliente=None) -> bool:
    """
    Envía un feedback pendiente al servicio ML y registra el resultado.
    Retorna True si quedó enviado.
    """
    try:
        feedback = FeedbackML.objects.get(pk=feedback_id)
    except FeedbackML.DoesNotExist:
        logger.warning(f"Feedback ML {feedback_id} no existe")
        return False

    if feedback.estado == FeedbackML.ESTADO_ENVIADO:
        return True

    cliente = cliente or ClienteRecomendaciones()
    try:
        resultado = cliente.enviar_feedback(feedback.payload)
    except ErrorServicioExterno as e:
        logger.error(f"Error enviando feedback ML {feedback_id} (no crítico): {e.mensaje}")
        feedback.marcar_fallido(e.mensaje)
        return False

    feedback.marcar_enviado()
    logger.info(f"Feedback ML {feedback_id} enviado: {resultado}")
    return True


def despachar_pendientes(max_intentos=5, cliente=None):
    """
    Reintenta los feedbacks pendientes o fallidos (los más antiguos primero).
    Retorna (enviados, total).
    """
    pendientes = FeedbackML.objects.filter(
        estado__in=[FeedbackML.ESTADO_PENDIENTE, FeedbackML.ESTADO_FALLIDO],
        intentos__lt=max_intentos,
    ).order_by('fecha_creacion')

    ids = list(pendientes.values_list('id', flat=True))
    enviados = sum(1 for feedback_id in ids if despachar_feedback(feedback_id, cliente=cliente))
    return enviados, len(ids)
