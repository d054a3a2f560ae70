# apps/planes_accion/views.py

import logging

from django.utils import timezone
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.permissions import AllowAny

from apps.core.mixins import ResponseMixin
from apps.core.services.storage_service import StorageService
from .exporters import PlanAccionExcelExporter
from .serializers import (
    PlanAccionListSerializer,
    PlanAccionDetailSerializer,
    GenerarPlanSerializer,
    AgregarTareaSerializer,
    ActualizarTareaSerializer,
    PlanAccionCrearSerializer,
    PlanAccionActualizarSerializer,
    SubirEvidenciaSerializer,
)
from .services import PlanAccionService
from .utils.elegibilidad import PoliticaElegibilidad

logger = logging.getLogger(__name__)


class PlanAccionViewSet(ResponseMixin, viewsets.ViewSet):
    """
    Planes de acción generados desde inspecciones y el ciclo de vida de sus tareas.
    Las reglas de negocio viven en PlanAccionService; los errores de dominio
    se responden desde el exception handler.
    """

    permission_classes = [AllowAny]

    def get_service(self):
        return PlanAccionService()

    def _detalle(self, plan, message, status_code=status.HTTP_200_OK):
        plan.refresh_from_db()
        return self.success_response(
            data=PlanAccionDetailSerializer(plan).data,
            message=message,
            status_code=status_code
        )

    # ═══════════════════════════════════════════════════════════
    # PLANES
    # ═══════════════════════════════════════════════════════════

    def list(self, request):
        """
        GET /api/planes-accion/?estado=&vicepresidencia=&superintendencia=&area_fisica=
        """
        planes = self.get_service().listar_planes(
            estado=request.query_params.get('estado'),
            vicepresidencia=request.query_params.get('vicepresidencia'),
            superintendencia=request.query_params.get('superintendencia'),
            area_fisica=request.query_params.get('area_fisica'),
        )
        serializer = PlanAccionListSerializer(planes, many=True)
        return self.success_response(
            data=serializer.data,
            message=f'{len(serializer.data)} planes encontrados'
        )

    def create(self, request):
        serializer = PlanAccionCrearSerializer(data=request.data)
        if not serializer.is_valid():
            return self.validation_error_response(serializer)

        plan = self.get_service().crear_plan(serializer.validated_data)
        return self._detalle(plan, 'Plan de acción creado exitosamente', status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        plan = self.get_service().obtener_plan(pk)
        return self.success_response(data=PlanAccionDetailSerializer(plan).data)

    def partial_update(self, request, pk=None):
        serializer = PlanAccionActualizarSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return self.validation_error_response(serializer)

        plan = self.get_service().actualizar_plan(pk, serializer.validated_data)
        return self._detalle(plan, 'Plan de acción actualizado exitosamente')

    def destroy(self, request, pk=None):
        self.get_service().eliminar_plan(pk)
        return self.success_response(message='Plan de acción eliminado exitosamente')

    @action(detail=False, methods=['get'])
    def estadisticas(self, request):
        """
        GET /api/planes-accion/estadisticas/
        """
        return self.success_response(data=self.get_service().estadisticas())

    @action(
        detail=False,
        methods=['post'],
        url_path=r'generar-desde-instancia/(?P<instancia_id>[^/.]+)'
    )
    def generar_desde_instancia(self, request, instancia_id=None):
        """
        POST /api/planes-accion/generar-desde-instancia/{instancia_id}/?incluir_puntaje_3=&solo_con_comentario=
        """
        serializer = GenerarPlanSerializer(data=request.data or request.query_params)
        if not serializer.is_valid():
            return self.validation_error_response(serializer)

        politica = PoliticaElegibilidad(**serializer.validated_data)
        plan = self.get_service().generar_desde_instancia(instancia_id, politica)
        return self._detalle(
            plan,
            f'Plan de acción generado con {plan.total_tareas} tareas',
            status.HTTP_201_CREATED
        )

    # ═══════════════════════════════════════════════════════════
    # TAREAS
    # ═══════════════════════════════════════════════════════════

    @action(detail=True, methods=['post'], url_path='tareas')
    def agregar_tarea(self, request, pk=None):
        """
        POST /api/planes-accion/{id}/tareas/
        """
        serializer = AgregarTareaSerializer(data=request.data)
        if not serializer.is_valid():
            return self.validation_error_response(serializer)

        plan = self.get_service().agregar_tarea(pk, serializer.validated_data)
        return self._detalle(plan, 'Tarea agregada exitosamente', status.HTTP_201_CREATED)

    @action(detail=True, methods=['patch', 'delete'], url_path=r'tareas/(?P<tarea_id>[^/.]+)')
    def tarea(self, request, pk=None, tarea_id=None):
        """
        PATCH  /api/planes-accion/{id}/tareas/{tarea_id}/
        DELETE /api/planes-accion/{id}/tareas/{tarea_id}/
        """
        if request.method == 'DELETE':
            plan = self.get_service().eliminar_tarea(pk, tarea_id)
            return self._detalle(plan, 'Tarea eliminada exitosamente')

        serializer = ActualizarTareaSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return self.validation_error_response(serializer)

        plan = self.get_service().actualizar_tarea(pk, tarea_id, serializer.validated_data)
        return self._detalle(plan, 'Tarea actualizada exitosamente')

    @action(detail=True, methods=['patch'], url_path=r'tareas/(?P<tarea_id>[^/.]+)/aprobar')
    def aprobar_tarea(self, request, pk=None, tarea_id=None):
        """
        PATCH /api/planes-accion/{id}/tareas/{tarea_id}/aprobar/
        """
        plan = self.get_service().aprobar_tarea(pk, tarea_id)
        return self._detalle(plan, 'Tarea aprobada exitosamente')

    # ═══════════════════════════════════════════════════════════
    # EXPORTACIÓN Y EVIDENCIAS
    # ═══════════════════════════════════════════════════════════

    @action(detail=True, methods=['get'], url_path='exportar-excel')
    def exportar_excel(self, request, pk=None):
        """
        GET /api/planes-accion/{id}/exportar-excel/
        """
        plan = self.get_service().obtener_plan(pk)
        return PlanAccionExcelExporter(plan).export()

    @action(
        detail=False,
        methods=['post'],
        url_path='subir-evidencia',
        parser_classes=[MultiPartParser, FormParser]
    )
    def subir_evidencia(self, request):
        """
        POST /api/planes-accion/subir-evidencia/
        Retorna {nombre, url} listo para agregarse a las evidencias de una tarea.
        """
        serializer = SubirEvidenciaSerializer(data=request.data)
        if not serializer.is_valid():
            return self.validation_error_response(serializer)

        archivo = serializer.validated_data['archivo']

        try:
            storage = StorageService()
        except ValueError as e:
            logger.error(f"Almacenamiento de evidencias no configurado: {e}")
            return self.error_response(
                message='El almacenamiento de evidencias no está disponible',
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE
            )

        folder = f"planes_accion/{timezone.localdate().strftime('%Y/%m')}"
        resultado = storage.upload_file(file=archivo, folder=folder)

        if not resultado['success']:
            return self.error_response(
                message=f"Error al subir archivo: {resultado.get('error')}",
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return self.success_response(
            data={'nombre': archivo.name, 'url': resultado['url']},
            message='Evidencia subida exitosamente',
            status_code=status.HTTP_201_CREATED
        )
