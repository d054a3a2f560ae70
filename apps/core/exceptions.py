# apps/core/exceptions.py
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ErrorNegocio(Exception):
    """
    Error base de las reglas de negocio.
    Cada subclase define el status HTTP con el que se responde.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    mensaje_defecto = 'Error en la operación'

    def __init__(self, mensaje=None, errores=None):
        self.mensaje = mensaje or self.mensaje_defecto
        self.errores = errores
        super().__init__(self.mensaje)


class ErrorValidacion(ErrorNegocio):
    """Datos mal formados: se rechaza antes de cualquier modificación"""
    status_code = status.HTTP_400_BAD_REQUEST
    mensaje_defecto = 'Error en validación de datos'


class RecursoNoEncontrado(ErrorNegocio):
    """Plan, tarea, instancia o plantilla inexistente"""
    status_code = status.HTTP_404_NOT_FOUND
    mensaje_defecto = 'Recurso no encontrado'


class ErrorPrecondicion(ErrorNegocio):
    """La operación no cumple una condición previa del ciclo de vida"""
    status_code = status.HTTP_409_CONFLICT
    mensaje_defecto = 'La operación no cumple las condiciones requeridas'


class ErrorServicioExterno(ErrorNegocio):
    """El servicio de recomendaciones no respondió correctamente"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    mensaje_defecto = 'Servicio de recomendaciones no disponible'


def manejador_excepciones(exc, context):
    """
    Exception handler de DRF: respuestas de error con el formato estándar
    {'success': False, 'message': ..., 'errors': ...}
    """
    if isinstance(exc, ErrorNegocio):
        if isinstance(exc, ErrorServicioExterno):
            logger.warning(f"Servicio externo no disponible: {exc.mensaje}")
        return Response({
            'success': False,
            'message': exc.mensaje,
            'errors': exc.errores
        }, status=exc.status_code)

    response = exception_handler(exc, context)
    if response is None:
        return None

    detalle = response.data
    if isinstance(detalle, dict) and set(detalle.keys()) == {'detail'}:
        mensaje = str(detalle['detail'])
        errores = None
    else:
        mensaje = 'Error en validación de datos'
        errores = detalle

    response.data = {
        'success': False,
        'message': mensaje,
        'errors': errores
    }
    return response
