# apps/planes_accion/ciclo_vida.py

from apps.core.exceptions import ErrorPrecondicion
from apps.planes_accion.utils.metadatos import (
    ESTADO_ABIERTO,
    ESTADO_EN_PROGRESO,
    ESTADO_CERRADO,
)

# Campos descriptivos que no se pueden editar en tareas generadas desde inspección
CAMPOS_BLOQUEADOS = (
    'fecha_hallazgo',
    'responsable_observacion',
    'empresa',
    'lugar_fisico',
    'actividad',
    'descripcion_observacion',
)

TRANSICIONES_PERMITIDAS = {
    ESTADO_ABIERTO: {ESTADO_EN_PROGRESO},
    ESTADO_EN_PROGRESO: {ESTADO_ABIERTO, ESTADO_CERRADO},
    ESTADO_CERRADO: {ESTADO_EN_PROGRESO},
}

REQUISITOS_EN_PROGRESO = (
    ('familia_peligro', 'Familia de Peligro'),
    ('accion_propuesta', 'Acción Propuesta'),
    ('responsable_area_cierre', 'Responsable'),
    ('fecha_cumplimiento_acordada', 'Fecha Acordada'),
)


def _vacio(valor) -> bool:
    if valor is None:
        return True
    if isinstance(valor, str):
        return not valor.strip()
    return False


def validar_edicion(tarea, campos):
    """
    Guardia previa a cualquier modificación de una tarea.

    Args:
        tarea: TareaPlan actual (sin cambios aplicados)
        campos: nombres de los campos que la actualización pretende tocar
    """
    if tarea.aprobado:
        raise ErrorPrecondicion('No se puede editar una tarea aprobada')

    if tarea.es_generada_por_sistema:
        bloqueados = [campo for campo in CAMPOS_BLOQUEADOS if campo in campos]
        if bloqueados:
            raise ErrorPrecondicion(
                'No se pueden modificar los siguientes campos en tareas generadas desde inspección: '
                f'{", ".join(bloqueados)}',
                errores={campo: 'Campo bloqueado' for campo in bloqueados}
            )


def validar_transicion(estado_actual, estado_nuevo):
    if estado_nuevo == estado_actual:
        return

    if estado_nuevo not in TRANSICIONES_PERMITIDAS.get(estado_actual, set()):
        raise ErrorPrecondicion(
            f'No se permite pasar la tarea de "{estado_actual}" a "{estado_nuevo}"'
        )


def validar_requisitos_estado(tarea):
    """
    Valida que la tarea (con los cambios ya aplicados en memoria) cumpla los
    requisitos del estado en el que quedaría.
    """
    if tarea.estado == ESTADO_EN_PROGRESO:
        faltantes = [
            etiqueta for campo, etiqueta in REQUISITOS_EN_PROGRESO
            if _vacio(getattr(tarea, campo))
        ]
        if faltantes:
            raise ErrorPrecondicion(
                'Para pasar a "en_progreso", la tarea debe tener: Familia de Peligro, '
                'Acción Propuesta, Responsable y Fecha Acordada. '
                f'Faltan: {", ".join(faltantes)}'
            )

    if tarea.estado == ESTADO_CERRADO and not tarea.fecha_cumplimiento_efectiva:
        raise ErrorPrecondicion(
            'Para cerrar la tarea, debe tener una Fecha de Cumplimiento Efectiva'
        )


def validar_aprobacion(tarea):
    if tarea.aprobado:
        raise ErrorPrecondicion('La tarea ya fue aprobada')

    if tarea.estado != ESTADO_CERRADO:
        raise ErrorPrecondicion('Solo se pueden aprobar tareas en estado "cerrado"')

    if not tarea.fecha_cumplimiento_efectiva:
        raise ErrorPrecondicion(
            'La tarea debe tener una fecha de cumplimiento efectiva para ser aprobada'
        )


def requiere_feedback(estado_anterior, estado_nuevo, ml_metadata) -> bool:
    """El paso de abierto a en_progreso con metadatos ML alimenta al servicio de recomendaciones"""
    return (
        estado_anterior == ESTADO_ABIERTO
        and estado_nuevo == ESTADO_EN_PROGRESO
        and bool(ml_metadata)
    )
