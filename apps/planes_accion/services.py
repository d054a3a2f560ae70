# apps/planes_accion/services.py

import logging

from django.conf import settings
from django.db import transaction
from django.db.models import Avg, Count, Q
from django.utils import timezone

from apps.core.exceptions import ErrorValidacion, RecursoNoEncontrado
from apps.core.utils import calcular_porcentaje, validar_uuid
from apps.ml_recomendaciones.feedback import encolar_feedback
from .ciclo_vida import (
    validar_aprobacion,
    validar_edicion,
    validar_requisitos_estado,
    validar_transicion,
    requiere_feedback,
)
from .fabrica import construir_tareas
from .models import PlanAccion, TareaPlan
from .repositorios import RepositorioInstanciasORM, RepositorioPlantillasORM
from .utils.elegibilidad import PoliticaElegibilidad
from .utils.metadatos import ESTADO_ABIERTO, ESTADO_EN_PROGRESO, ESTADO_CERRADO
from .utils.verificacion import resolver_datos_organizacionales

logger = logging.getLogger(__name__)

CAMPOS_ORGANIZACIONALES = (
    'vicepresidencia',
    'superintendencia_senior',
    'superintendencia',
    'area_fisica',
)

CAMPOS_EDITABLES_TAREA = (
    'fecha_hallazgo',
    'responsable_observacion',
    'empresa',
    'lugar_fisico',
    'actividad',
    'familia_peligro',
    'descripcion_observacion',
    'accion_propuesta',
    'responsable_area_cierre',
    'fecha_cumplimiento_acordada',
    'fecha_cumplimiento_efectiva',
    'estado',
    'evidencias',
    'ml_metadata',
)


def validar_evidencias(evidencias):
    """
    Copia validada de la lista de evidencias ({nombre, url}, ambos no vacíos).
    Reemplaza por completo la lista anterior.
    """
    if evidencias is None:
        return []

    if not isinstance(evidencias, (list, tuple)):
        raise ErrorValidacion('Las evidencias deben ser una lista')

    validadas = []
    for posicion, evidencia in enumerate(evidencias, start=1):
        if not isinstance(evidencia, dict):
            raise ErrorValidacion(f'Evidencia #{posicion} inválida')

        nombre = str(evidencia.get('nombre') or '').strip()
        url = str(evidencia.get('url') or '').strip()
        if not nombre or not url:
            raise ErrorValidacion(
                f'Evidencia #{posicion} inválida: nombre y url son requeridos',
                errores={'evidencias': [f'La evidencia #{posicion} debe tener nombre y url']}
            )
        validadas.append({'nombre': nombre, 'url': url})

    return validadas


def _con_timestamp(ml_metadata):
    if not ml_metadata:
        return None
    return {**ml_metadata, 'timestamp': timezone.now().isoformat()}


class PlanAccionService:
    """
    Operaciones sobre el agregado Plan de Acción.

    Toda modificación corre en una transacción con el plan bloqueado
    (select_for_update); los contadores y el estado del plan se recalculan
    desde sus tareas antes de guardar.
    """

    def __init__(self, repo_instancias=None, repo_plantillas=None):
        self.repo_instancias = repo_instancias or RepositorioInstanciasORM()
        self.repo_plantillas = repo_plantillas or RepositorioPlantillasORM()

    # ═══════════════════════════════════════════════════════════
    # GENERACIÓN DESDE INSPECCIÓN
    # ═══════════════════════════════════════════════════════════

    def generar_desde_instancia(self, instancia_id, politica: PoliticaElegibilidad = None) -> PlanAccion:
        politica = politica or PoliticaElegibilidad()

        instancia = self.repo_instancias.obtener(instancia_id)
        plantilla = self.repo_plantillas.obtener(instancia.plantilla_id)

        datos = resolver_datos_organizacionales(
            instancia.lista_verificacion,
            empresa_defecto=getattr(settings, 'PLANES_ACCION_EMPRESA_DEFECTO', 'MSC')
        )
        logger.info(
            f"Datos organizacionales de la instancia {instancia.id}: "
            f"VP={datos.vicepresidencia}, Sup.Senior={datos.superintendencia_senior}, "
            f"Sup={datos.superintendencia}, Área={datos.area_fisica}, Supervisor={datos.supervisor}"
        )

        tareas = construir_tareas(instancia, plantilla, datos, politica)
        if not tareas:
            raise ErrorValidacion(
                'No se encontraron observaciones que requieran plan de acción. '
                'Todas las preguntas tienen puntaje 3 o no tienen comentarios.'
            )

        with transaction.atomic():
            plan = PlanAccion(
                vicepresidencia=datos.vicepresidencia,
                superintendencia_senior=datos.superintendencia_senior,
                superintendencia=datos.superintendencia,
                area_fisica=datos.area_fisica,
            )
            plan.aplicar_metadatos(tareas)
            plan.save()

            for tarea in tareas:
                tarea.plan = plan
            TareaPlan.objects.bulk_create(tareas)

        logger.info(f"Plan {plan.id} generado con {len(tareas)} tareas desde la instancia {instancia.id}")
        return plan

    # ═══════════════════════════════════════════════════════════
    # TAREAS
    # ═══════════════════════════════════════════════════════════

    def agregar_tarea(self, plan_id, datos) -> PlanAccion:
        pk = validar_uuid(plan_id, 'ID de plan')
        datos = dict(datos)
        evidencias = validar_evidencias(datos.pop('evidencias', None))
        ml_metadata = _con_timestamp(datos.pop('ml_metadata', None))

        with transaction.atomic():
            plan = self._obtener_plan_bloqueado(pk)

            tarea = TareaPlan(
                plan=plan,
                numero_item=plan.tareas.count() + 1,
                estado=ESTADO_ABIERTO,
                aprobado=False,
                evidencias=evidencias,
                ml_metadata=ml_metadata,
                **datos
            )
            tarea.recalcular_dias_retraso()
            tarea.save()

            self._guardar_plan(plan)

        logger.info(f"Tarea #{tarea.numero_item} agregada al plan {plan.id}")
        return plan

    def actualizar_tarea(self, plan_id, tarea_id, cambios) -> PlanAccion:
        plan_pk = validar_uuid(plan_id, 'ID de plan')
        tarea_pk = validar_uuid(tarea_id, 'ID de tarea')
        cambios = dict(cambios)

        with transaction.atomic():
            plan = self._obtener_plan_bloqueado(plan_pk)
            tarea = self._obtener_tarea(plan, tarea_pk)

            validar_edicion(tarea, cambios.keys())

            no_editables = [campo for campo in cambios if campo not in CAMPOS_EDITABLES_TAREA]
            if no_editables:
                raise ErrorValidacion(
                    f'Campos no editables: {", ".join(no_editables)}',
                    errores={campo: 'Campo no editable' for campo in no_editables}
                )

            if 'evidencias' in cambios:
                cambios['evidencias'] = validar_evidencias(cambios['evidencias'])

            ml_metadata = cambios.pop('ml_metadata', None)
            estado_anterior = tarea.estado

            for campo, valor in cambios.items():
                setattr(tarea, campo, valor)

            # Las precondiciones se validan contra la tarea con los cambios ya aplicados
            validar_transicion(estado_anterior, tarea.estado)
            validar_requisitos_estado(tarea)

            if ml_metadata:
                tarea.ml_metadata = _con_timestamp(ml_metadata)

            tarea.recalcular_dias_retraso()
            tarea.save()

            self._guardar_plan(plan)

            if requiere_feedback(estado_anterior, tarea.estado, ml_metadata):
                encolar_feedback(tarea, plan, ml_metadata)

        logger.info(
            f"Tarea #{tarea.numero_item} del plan {plan.id} actualizada "
            f"({estado_anterior} → {tarea.estado})"
        )
        return plan

    def eliminar_tarea(self, plan_id, tarea_id) -> PlanAccion:
        plan_pk = validar_uuid(plan_id, 'ID de plan')
        tarea_pk = validar_uuid(tarea_id, 'ID de tarea')

        with transaction.atomic():
            plan = self._obtener_plan_bloqueado(plan_pk)
            tarea = self._obtener_tarea(plan, tarea_pk)
            numero_item = tarea.numero_item

            tarea.delete()
            plan.renumerar_tareas()
            self._guardar_plan(plan)

        logger.info(f"Tarea #{numero_item} eliminada del plan {plan.id}")
        return plan

    def aprobar_tarea(self, plan_id, tarea_id) -> PlanAccion:
        plan_pk = validar_uuid(plan_id, 'ID de plan')
        tarea_pk = validar_uuid(tarea_id, 'ID de tarea')

        with transaction.atomic():
            plan = self._obtener_plan_bloqueado(plan_pk)
            tarea = self._obtener_tarea(plan, tarea_pk)

            validar_aprobacion(tarea)

            tarea.aprobado = True
            tarea.save(update_fields=['aprobado', 'fecha_actualizacion'])

            self._guardar_plan(plan)

        logger.info(f"Tarea #{tarea.numero_item} del plan {plan.id} aprobada")
        return plan

    # ═══════════════════════════════════════════════════════════
    # PLANES
    # ═══════════════════════════════════════════════════════════

    def crear_plan(self, datos) -> PlanAccion:
        """Plan manual: datos organizacionales y, opcionalmente, sus tareas iniciales"""
        datos = dict(datos)
        datos_tareas = datos.pop('tareas', None) or []

        with transaction.atomic():
            plan = PlanAccion(**{campo: datos.get(campo, '') for campo in CAMPOS_ORGANIZACIONALES})

            tareas = []
            for numero, datos_tarea in enumerate(datos_tareas, start=1):
                datos_tarea = dict(datos_tarea)
                tarea = TareaPlan(
                    numero_item=numero,
                    estado=ESTADO_ABIERTO,
                    aprobado=False,
                    evidencias=validar_evidencias(datos_tarea.pop('evidencias', None)),
                    ml_metadata=_con_timestamp(datos_tarea.pop('ml_metadata', None)),
                    **datos_tarea
                )
                tarea.recalcular_dias_retraso()
                tareas.append(tarea)

            plan.aplicar_metadatos(tareas)
            plan.save()

            for tarea in tareas:
                tarea.plan = plan
            TareaPlan.objects.bulk_create(tareas)

        logger.info(f"Plan {plan.id} creado manualmente con {len(tareas)} tareas")
        return plan

    def obtener_plan(self, plan_id) -> PlanAccion:
        pk = validar_uuid(plan_id, 'ID de plan')
        try:
            return PlanAccion.objects.prefetch_related('tareas').get(pk=pk)
        except PlanAccion.DoesNotExist:
            raise RecursoNoEncontrado('Plan no encontrado')

    def actualizar_plan(self, plan_id, datos) -> PlanAccion:
        """Solo los datos organizacionales son editables; contadores y estado se derivan"""
        pk = validar_uuid(plan_id, 'ID de plan')

        no_editables = [campo for campo in datos if campo not in CAMPOS_ORGANIZACIONALES]
        if no_editables:
            raise ErrorValidacion(
                f'Campos no editables: {", ".join(no_editables)}',
                errores={campo: 'Campo no editable' for campo in no_editables}
            )

        with transaction.atomic():
            plan = self._obtener_plan_bloqueado(pk)
            for campo, valor in datos.items():
                setattr(plan, campo, valor)
            plan.version += 1
            plan.save()

        return plan

    def eliminar_plan(self, plan_id):
        pk = validar_uuid(plan_id, 'ID de plan')

        with transaction.atomic():
            plan = self._obtener_plan_bloqueado(pk)
            total = plan.total_tareas
            plan.delete()

        logger.info(f"Plan {pk} eliminado junto con {total} tareas")

    def listar_planes(self, estado=None, vicepresidencia=None, superintendencia=None, area_fisica=None):
        queryset = PlanAccion.objects.all()

        if estado:
            queryset = queryset.filter(estado=estado)
        if vicepresidencia:
            queryset = queryset.filter(vicepresidencia=vicepresidencia)
        if superintendencia:
            queryset = queryset.filter(superintendencia=superintendencia)
        if area_fisica:
            queryset = queryset.filter(area_fisica=area_fisica)

        return queryset.order_by('-fecha_creacion')

    def estadisticas(self) -> dict:
        resumen = PlanAccion.objects.aggregate(
            total_planes=Count('id'),
            planes_abiertos=Count('id', filter=Q(estado=ESTADO_ABIERTO)),
            planes_en_progreso=Count('id', filter=Q(estado=ESTADO_EN_PROGRESO)),
            planes_cerrados=Count('id', filter=Q(estado=ESTADO_CERRADO)),
            promedio_cierre=Avg('porcentaje_cierre'),
        )

        total = resumen['total_planes']
        promedio = resumen.pop('promedio_cierre') or 0
        # Promedio redondeado al entero más cercano
        resumen['porcentaje_cierre'] = calcular_porcentaje(promedio, 100) if total else 0
        return resumen

    # ═══════════════════════════════════════════════════════════
    # AUXILIARES
    # ═══════════════════════════════════════════════════════════

    def _obtener_plan_bloqueado(self, pk) -> PlanAccion:
        try:
            return PlanAccion.objects.select_for_update().get(pk=pk)
        except PlanAccion.DoesNotExist:
            raise RecursoNoEncontrado('Plan no encontrado')

    def _obtener_tarea(self, plan, pk) -> TareaPlan:
        try:
            return plan.tareas.get(pk=pk)
        except TareaPlan.DoesNotExist:
            raise RecursoNoEncontrado('Tarea no encontrada')

    def _guardar_plan(self, plan):
        plan.aplicar_metadatos()
        plan.version += 1
        plan.save()
