# apps/planes_accion/fabrica.py

import logging
from typing import List

from django.utils import timezone

from apps.core.utils import a_fecha
from apps.planes_accion.models import TareaPlan
from apps.planes_accion.repositorios import InstanciaInspeccion, PlantillaInspeccion
from apps.planes_accion.utils.elegibilidad import PoliticaElegibilidad, es_observacion_elegible
from apps.planes_accion.utils.familias_peligro import determinar_familia_peligro
from apps.planes_accion.utils.metadatos import ESTADO_ABIERTO
from apps.planes_accion.utils.secciones import crear_indice_secciones
from apps.planes_accion.utils.verificacion import DatosOrganizacionales

logger = logging.getLogger(__name__)

ACTIVIDAD_NO_ESPECIFICADA = 'Actividad no especificada'


def construir_tareas(
    instancia: InstanciaInspeccion,
    plantilla: PlantillaInspeccion,
    datos: DatosOrganizacionales,
    politica: PoliticaElegibilidad,
) -> List[TareaPlan]:
    """
    Una tarea (sin guardar, sin plan) por cada observación elegible.

    El orden es el de la instancia: sección por sección, pregunta por pregunta.
    Los números de ítem siguen ese orden (1..N).
    """
    indice = crear_indice_secciones(plantilla.secciones)
    fecha_hallazgo = a_fecha(instancia.fecha_creacion) or timezone.localdate()
    actividad = plantilla.nombre or ACTIVIDAD_NO_ESPECIFICADA

    tareas = []
    for seccion in instancia.secciones:
        info_seccion = indice.get(seccion.seccion_id)
        if info_seccion is None:
            logger.warning(
                f"Sección {seccion.seccion_id} no encontrada en la plantilla {plantilla.id}"
            )
            continue

        familia_peligro = determinar_familia_peligro(info_seccion.titulo)

        for pregunta in seccion.preguntas:
            if not es_observacion_elegible(pregunta.respuesta, pregunta.comentario, politica):
                continue

            comentario = (pregunta.comentario or '').strip()
            tareas.append(TareaPlan(
                numero_item=len(tareas) + 1,
                fecha_hallazgo=fecha_hallazgo,
                responsable_observacion=datos.supervisor,
                empresa=datos.empresa,
                lugar_fisico=datos.area_fisica,
                actividad=actividad,
                familia_peligro=familia_peligro,
                descripcion_observacion=comentario or pregunta.texto,
                # La acción propuesta se completa después (con ayuda del servicio de recomendaciones)
                accion_propuesta='',
                responsable_area_cierre=datos.supervisor,
                dias_retraso=0,
                estado=ESTADO_ABIERTO,
                aprobado=False,
                evidencias=[],
                instancia_id=instancia.id,
                seccion_id=seccion.seccion_id,
                seccion_titulo=info_seccion.titulo,
                texto_pregunta=pregunta.texto,
            ))

    return tareas
