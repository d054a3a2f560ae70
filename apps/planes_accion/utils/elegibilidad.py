# apps/planes_accion/utils/elegibilidad.py

import math
from dataclasses import dataclass
from typing import Optional

NO_APLICA = 'N/A'
PUNTAJE_MAXIMO = 3


@dataclass(frozen=True)
class PoliticaElegibilidad:
    """
    incluir_puntaje_3: las observaciones con puntaje 3 también generan tarea (si tienen comentario)
    solo_con_comentario: las observaciones con puntaje < 3 requieren comentario
    """
    incluir_puntaje_3: bool = False
    solo_con_comentario: bool = True


def extraer_puntaje(respuesta) -> Optional[float]:
    """
    Puntaje numérico de una respuesta. None si es "N/A" o no es numérica.
    Los decimales se conservan: 3.5 no equivale a 3.
    """
    if respuesta is None or isinstance(respuesta, bool):
        return None

    if isinstance(respuesta, int):
        return respuesta

    if isinstance(respuesta, float):
        return respuesta if math.isfinite(respuesta) else None

    texto = str(respuesta).strip()
    if not texto or texto.upper() == NO_APLICA:
        return None

    try:
        return int(texto)
    except ValueError:
        pass

    try:
        valor = float(texto)
    except ValueError:
        return None
    return valor if math.isfinite(valor) else None


def tiene_comentario(comentario) -> bool:
    return bool(comentario) and bool(str(comentario).strip())


def requiere_plan_de_accion(puntaje: float, comentario, politica: PoliticaElegibilidad) -> bool:
    if puntaje < PUNTAJE_MAXIMO:
        if politica.solo_con_comentario:
            return tiene_comentario(comentario)
        return True

    if puntaje == PUNTAJE_MAXIMO and politica.incluir_puntaje_3:
        return tiene_comentario(comentario)

    return False


def es_observacion_elegible(respuesta, comentario, politica: PoliticaElegibilidad = None) -> bool:
    """Decide si una pregunta respondida debe generar una tarea de remediación"""
    puntaje = extraer_puntaje(respuesta)
    if puntaje is None:
        return False
    return requiere_plan_de_accion(puntaje, comentario, politica or PoliticaElegibilidad())
