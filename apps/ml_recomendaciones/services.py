# apps/ml_recomendaciones/services.py

import logging

from apps.inspecciones.secciones import buscar_seccion
from apps.planes_accion.repositorios import RepositorioInstanciasORM, RepositorioPlantillasORM
from apps.planes_accion.utils.elegibilidad import extraer_puntaje
from .cliente import ClienteRecomendaciones

logger = logging.getLogger(__name__)

SECCION_SIN_TITULO = 'Sección sin título'


class RecomendacionesService:
    """
    Recomendaciones interactivas (síncronas): las fallas del servicio ML se propagan
    como ErrorServicioExterno.
    """

    def __init__(self, instancias=None, plantillas=None, cliente=None):
        self.instancias = instancias or RepositorioInstanciasORM()
        self.plantillas = plantillas or RepositorioPlantillasORM()
        self.cliente = cliente or ClienteRecomendaciones()

    def recomendar(self, question_text, current_response, comment=None, context=None):
        return self.cliente.recomendar(question_text, current_response, comment, context)

    def recomendaciones_instancia(self, instancia_id):
        """
        Recomendaciones para todas las observaciones de una instancia.
        Se omiten las respuestas "N/A"; solo se devuelven las que tienen brecha de mejora.
        """
        instancia = self.instancias.obtener(instancia_id)
        plantilla = self.plantillas.obtener(instancia.plantilla_id)

        logger.info(f"Generando recomendaciones para la instancia {instancia.id}")

        recomendaciones = []
        conteo_prioridad = {'Alta': 0, 'Media': 0, 'Baja': 0}
        brecha_total = 0

        for seccion in instancia.secciones:
            nodo = buscar_seccion(plantilla.secciones, seccion.seccion_id)
            titulo = nodo.titulo if nodo and nodo.titulo else SECCION_SIN_TITULO

            for pregunta in seccion.preguntas:
                puntaje = extraer_puntaje(pregunta.respuesta)
                if puntaje is None:
                    continue

                recomendacion = self.cliente.recomendar(
                    pregunta.texto,
                    puntaje,
                    pregunta.comentario,
                    {
                        'sectionCompliance': seccion.porcentaje_cumplimiento,
                        'overallCompliance': instancia.porcentaje_cumplimiento_general,
                        'naCount': seccion.cantidad_na,
                    },
                )

                recomendaciones.append({
                    'sectionId': seccion.seccion_id,
                    'sectionTitle': titulo,
                    'questionText': pregunta.texto,
                    'currentScore': puntaje,
                    'recommendation': recomendacion,
                })

                prioridad = recomendacion.get('priority')
                if prioridad in ('Alta', 'Media'):
                    conteo_prioridad[prioridad] += 1
                else:
                    conteo_prioridad['Baja'] += 1

                brecha_total += recomendacion.get('improvement_gap') or 0

        total = len(recomendaciones)
        logger.info(
            f"Recomendaciones generadas - Alta: {conteo_prioridad['Alta']}, "
            f"Media: {conteo_prioridad['Media']}, Baja: {conteo_prioridad['Baja']}"
        )

        return {
            'instanceId': instancia.id,
            'overallCompliance': instancia.porcentaje_cumplimiento_general,
            'recommendations': [
                r for r in recomendaciones
                if (r['recommendation'].get('improvement_gap') or 0) > 0
            ],
            'summary': {
                'totalQuestions': total,
                'highPriority': conteo_prioridad['Alta'],
                'mediumPriority': conteo_prioridad['Media'],
                'lowPriority': conteo_prioridad['Baja'],
                'averageImprovementGap': (brecha_total / total) if total > 0 else 0,
            },
        }

    def health(self):
        return self.cliente.health()
