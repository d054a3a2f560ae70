from datetime import date
from unittest import mock

import pytest
from django.core.management import call_command
from kombu.exceptions import OperationalError

from apps.core.exceptions import ErrorServicioExterno
from apps.ml_recomendaciones.cliente import ClienteRecomendaciones
from apps.ml_recomendaciones.feedback import construir_payload_feedback, despachar_feedback
from apps.ml_recomendaciones.models import FeedbackML

pytestmark = pytest.mark.django_db

ML_METADATA = {
    'fue_recomendacion_ml': True,
    'indice_recomendacion': 1,
    'recomendaciones_originales': ['Ajustar baranda', 'Reemplazar baranda'],
}


def iniciar_tarea(service, plan, ml_metadata=ML_METADATA):
    tarea = plan.tareas.get(numero_item=1)
    service.actualizar_tarea(plan.id, tarea.id, {
        'accion_propuesta': 'Reemplazar baranda',
        'fecha_cumplimiento_acordada': date(2024, 4, 1),
        'estado': 'en_progreso',
        'ml_metadata': ml_metadata,
    })
    tarea.refresh_from_db()
    return tarea


def test_payload(service, plan_generado):
    tarea = iniciar_tarea(service, plan_generado)

    payload = construir_payload_feedback(tarea, plan_generado, ML_METADATA)

    assert payload == {
        'question_text': '¿Baranda firme?',
        'current_response': 0,
        'comment': 'Baranda suelta',
        'accion_seleccionada': 'Reemplazar baranda',
        'fue_recomendacion_ml': True,
        'indice_recomendacion': 1,
        'recomendaciones_originales': ['Ajustar baranda', 'Reemplazar baranda'],
        'context': {
            'familia_peligro': 'Trabajo en Altura',
            'area': 'Chancado Primario',
            'empresa': 'MSC',
            'vicepresidencia': 'VP Operaciones',
            'superintendencia_senior': 'Superintendencia Senior no especificada',
            'superintendencia': 'Mantenimiento Mina',
        },
        'feedback_type': 'guardado',
        'feedback_score': 1.0,
    }


def test_puntaje_sin_recomendacion_ml(service, plan_generado):
    tarea = iniciar_tarea(service, plan_generado, {'fue_recomendacion_ml': False})

    payload = construir_payload_feedback(tarea, plan_generado, {'fue_recomendacion_ml': False})

    assert payload['feedback_score'] == 0.5


def test_envio_despues_del_commit(service, plan_generado, django_capture_on_commit_callbacks):
    with mock.patch.object(ClienteRecomendaciones, 'enviar_feedback', return_value={'status': 'ok'}) as enviar:
        with django_capture_on_commit_callbacks(execute=True):
            tarea = iniciar_tarea(service, plan_generado)

    feedback = FeedbackML.objects.get()
    assert feedback.tarea == tarea
    assert feedback.estado == FeedbackML.ESTADO_ENVIADO
    assert feedback.intentos == 1
    enviar.assert_called_once_with(feedback.payload)


def test_falla_del_servicio_no_afecta_la_tarea(service, plan_generado, django_capture_on_commit_callbacks):
    with mock.patch.object(
        ClienteRecomendaciones, 'enviar_feedback', side_effect=ErrorServicioExterno('Servicio caído')
    ):
        with django_capture_on_commit_callbacks(execute=True):
            tarea = iniciar_tarea(service, plan_generado)

    assert tarea.estado == 'en_progreso'
    feedback = FeedbackML.objects.get()
    assert feedback.estado == FeedbackML.ESTADO_FALLIDO
    assert feedback.ultimo_error == 'Servicio caído'


def test_sin_metadatos_ml_no_hay_feedback(service, plan_generado, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks() as callbacks:
        iniciar_tarea(service, plan_generado, ml_metadata=None)

    assert FeedbackML.objects.count() == 0
    assert callbacks == []


def test_broker_no_disponible_queda_pendiente(service, plan_generado, django_capture_on_commit_callbacks):
    with mock.patch('apps.ml_recomendaciones.tasks.enviar_feedback_ml.delay', side_effect=OperationalError('sin broker')):
        with django_capture_on_commit_callbacks(execute=True):
            iniciar_tarea(service, plan_generado)

    feedback = FeedbackML.objects.get()
    assert feedback.estado == FeedbackML.ESTADO_PENDIENTE

    with mock.patch.object(ClienteRecomendaciones, 'enviar_feedback', return_value={'status': 'ok'}):
        call_command('despachar_feedback_ml')

    feedback.refresh_from_db()
    assert feedback.estado == FeedbackML.ESTADO_ENVIADO


def test_comando_respeta_maximo_de_intentos(service, plan_generado, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks():
        iniciar_tarea(service, plan_generado)
    FeedbackML.objects.update(estado=FeedbackML.ESTADO_FALLIDO, intentos=5)

    with mock.patch.object(ClienteRecomendaciones, 'enviar_feedback') as enviar:
        call_command('despachar_feedback_ml', '--max-intentos', '5')

    enviar.assert_not_called()


def test_despachar_feedback_inexistente():
    assert despachar_feedback('00000000-0000-0000-0000-000000000000') is False


def test_despachar_feedback_ya_enviado(service, plan_generado, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks():
        iniciar_tarea(service, plan_generado)
    feedback = FeedbackML.objects.get()
    feedback.marcar_enviado()

    cliente = mock.Mock()
    assert despachar_feedback(feedback.id, cliente=cliente) is True
    cliente.enviar_feedback.assert_not_called()


def test_tarea_periodica_reintenta_fallidos(service, plan_generado, django_capture_on_commit_callbacks):
    from apps.ml_recomendaciones.tasks import reintentar_feedback_ml

    with mock.patch.object(
        ClienteRecomendaciones, 'enviar_feedback', side_effect=ErrorServicioExterno('Servicio caído')
    ):
        with django_capture_on_commit_callbacks(execute=True):
            iniciar_tarea(service, plan_generado)

    with mock.patch.object(ClienteRecomendaciones, 'enviar_feedback', return_value={'status': 'ok'}):
        reintentar_feedback_ml()

    feedback = FeedbackML.objects.get()
    assert feedback.estado == FeedbackML.ESTADO_ENVIADO
    assert feedback.intentos == 2
