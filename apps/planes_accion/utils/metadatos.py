# apps/planes_accion/utils/metadatos.py

from apps.core.utils import calcular_porcentaje

ESTADO_ABIERTO = 'abierto'
ESTADO_EN_PROGRESO = 'en_progreso'
ESTADO_CERRADO = 'cerrado'

ESTADOS = [
    (ESTADO_ABIERTO, 'Abierto'),
    (ESTADO_EN_PROGRESO, 'En Progreso'),
    (ESTADO_CERRADO, 'Cerrado'),
]


def calcular_estado_plan(total, en_progreso, cerradas) -> str:
    if total > 0 and cerradas == total:
        return ESTADO_CERRADO
    if en_progreso > 0 or cerradas > 0:
        return ESTADO_EN_PROGRESO
    return ESTADO_ABIERTO


def calcular_metadatos(tareas) -> dict:
    """
    Contadores y estado general de un plan a partir de sus tareas.

    Es la única fuente de los contadores del plan: se recalcula después de
    agregar, actualizar, eliminar o aprobar una tarea.
    """
    estados = [tarea.estado for tarea in tareas]

    total_tareas = len(estados)
    tareas_abiertas = estados.count(ESTADO_ABIERTO)
    tareas_en_progreso = estados.count(ESTADO_EN_PROGRESO)
    tareas_cerradas = estados.count(ESTADO_CERRADO)

    return {
        'total_tareas': total_tareas,
        'tareas_abiertas': tareas_abiertas,
        'tareas_en_progreso': tareas_en_progreso,
        'tareas_cerradas': tareas_cerradas,
        'porcentaje_cierre': calcular_porcentaje(tareas_cerradas, total_tareas),
        'estado': calcular_estado_plan(total_tareas, tareas_en_progreso, tareas_cerradas),
    }
