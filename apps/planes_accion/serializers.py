# apps/planes_accion/serializers.py

from datetime import datetime

from django.conf import settings
from django.utils.dateparse import parse_datetime
from rest_framework import serializers

from apps.core.utils import a_fecha
from .models import PlanAccion, TareaPlan
from .utils.metadatos import ESTADOS

TIPOS_EVIDENCIA_PERMITIDOS = (
    'image/jpeg',
    'image/png',
    'image/gif',
    'application/pdf',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'application/vnd.ms-excel',
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
)

# Campos calculados o de trazabilidad: nunca se aceptan como entrada
CAMPOS_SOLO_LECTURA_TAREA = (
    'id',
    'numero_item',
    'dias_retraso',
    'aprobado',
    'instancia_id',
    'seccion_id',
    'seccion_titulo',
    'texto_pregunta',
)


class FechaCalendarioField(serializers.DateField):
    """
    Fecha calendario. Acepta también fecha-hora ISO (2024-01-10T08:00:00):
    la hora se descarta.
    """

    def to_internal_value(self, value):
        if isinstance(value, datetime):
            return a_fecha(value)

        if isinstance(value, str):
            try:
                fecha_hora = parse_datetime(value.strip())
            except ValueError:
                fecha_hora = None
            if fecha_hora is not None:
                return a_fecha(fecha_hora)

        return super().to_internal_value(value)


# ═══════════════════════════════════════════════════════════════
# SERIALIZERS DE SALIDA
# ═══════════════════════════════════════════════════════════════

class TareaPlanSerializer(serializers.ModelSerializer):

    estado_display = serializers.CharField(source='get_estado_display', read_only=True)
    es_generada_por_sistema = serializers.BooleanField(read_only=True)

    class Meta:
        model = TareaPlan
        fields = [
            'id',
            'numero_item',
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
            'dias_retraso',
            'estado',
            'estado_display',
            'aprobado',
            'evidencias',
            'ml_metadata',
            'instancia_id',
            'seccion_id',
            'seccion_titulo',
            'texto_pregunta',
            'es_generada_por_sistema',
            'fecha_creacion',
            'fecha_actualizacion',
        ]
        read_only_fields = fields


class PlanAccionListSerializer(serializers.ModelSerializer):
    """Serializer para listar planes (sin tareas)"""

    estado_display = serializers.CharField(source='get_estado_display', read_only=True)

    class Meta:
        model = PlanAccion
        fields = [
            'id',
            'vicepresidencia',
            'superintendencia_senior',
            'superintendencia',
            'area_fisica',
            'total_tareas',
            'tareas_abiertas',
            'tareas_en_progreso',
            'tareas_cerradas',
            'porcentaje_cierre',
            'estado',
            'estado_display',
            'version',
            'fecha_creacion',
            'fecha_actualizacion',
        ]
        read_only_fields = fields


class PlanAccionDetailSerializer(PlanAccionListSerializer):
    """Plan completo con sus tareas ordenadas por número de ítem"""

    tareas = serializers.SerializerMethodField()

    class Meta(PlanAccionListSerializer.Meta):
        fields = PlanAccionListSerializer.Meta.fields + ['tareas']
        read_only_fields = fields

    def get_tareas(self, obj):
        return TareaPlanSerializer(obj.tareas.order_by('numero_item'), many=True).data


# ═══════════════════════════════════════════════════════════════
# SERIALIZERS DE ENTRADA
# ═══════════════════════════════════════════════════════════════

class GenerarPlanSerializer(serializers.Serializer):
    incluir_puntaje_3 = serializers.BooleanField(default=False)
    solo_con_comentario = serializers.BooleanField(default=True)


class EvidenciaSerializer(serializers.Serializer):
    nombre = serializers.CharField(max_length=300)
    url = serializers.CharField(max_length=1000)


class MLMetadataSerializer(serializers.Serializer):
    fue_recomendacion_ml = serializers.BooleanField(default=False)
    indice_recomendacion = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    recomendaciones_originales = serializers.ListField(
        child=serializers.JSONField(),
        required=False,
        allow_null=True
    )


class AgregarTareaSerializer(serializers.Serializer):
    """Tarea agregada manualmente: entra en estado abierto y sin trazabilidad"""

    fecha_hallazgo = FechaCalendarioField()
    responsable_observacion = serializers.CharField(max_length=200)
    empresa = serializers.CharField(max_length=200)
    lugar_fisico = serializers.CharField(max_length=200)
    actividad = serializers.CharField(max_length=300)
    familia_peligro = serializers.CharField(max_length=100)
    descripcion_observacion = serializers.CharField()
    accion_propuesta = serializers.CharField(allow_blank=True)
    responsable_area_cierre = serializers.CharField(max_length=200)
    fecha_cumplimiento_acordada = FechaCalendarioField()
    fecha_cumplimiento_efectiva = FechaCalendarioField(required=False, allow_null=True)
    evidencias = EvidenciaSerializer(many=True, required=False)
    ml_metadata = MLMetadataSerializer(required=False, allow_null=True)


class ActualizarTareaSerializer(AgregarTareaSerializer):
    """
    Actualización parcial de una tarea. Se usa siempre con partial=True:
    solo las claves enviadas llegan al servicio.
    """

    estado = serializers.ChoiceField(choices=ESTADOS)
    fecha_cumplimiento_acordada = FechaCalendarioField(allow_null=True)

    def validate(self, attrs):
        rechazados = [campo for campo in CAMPOS_SOLO_LECTURA_TAREA if campo in self.initial_data]
        if rechazados:
            raise serializers.ValidationError({
                campo: 'Este campo no se puede modificar directamente' for campo in rechazados
            })

        if not attrs:
            raise serializers.ValidationError('Debe enviar al menos un campo a actualizar')

        return attrs


class PlanAccionActualizarSerializer(serializers.Serializer):
    vicepresidencia = serializers.CharField(max_length=200)
    superintendencia_senior = serializers.CharField(max_length=200, allow_blank=True)
    superintendencia = serializers.CharField(max_length=200, allow_blank=True)
    area_fisica = serializers.CharField(max_length=200)

    def validate(self, attrs):
        calculados = [
            campo for campo in ('total_tareas', 'tareas_abiertas', 'tareas_en_progreso',
                                'tareas_cerradas', 'porcentaje_cierre', 'estado', 'version')
            if campo in self.initial_data
        ]
        if calculados:
            raise serializers.ValidationError({
                campo: 'Se calcula a partir de las tareas' for campo in calculados
            })
        return attrs


class PlanAccionCrearSerializer(PlanAccionActualizarSerializer):
    superintendencia_senior = serializers.CharField(max_length=200, allow_blank=True, default='')
    superintendencia = serializers.CharField(max_length=200, allow_blank=True, default='')
    tareas = AgregarTareaSerializer(many=True, required=False)


class SubirEvidenciaSerializer(serializers.Serializer):
    archivo = serializers.FileField()

    def validate_archivo(self, value):
        tipo = getattr(value, 'content_type', None)
        if tipo not in TIPOS_EVIDENCIA_PERMITIDOS:
            raise serializers.ValidationError(
                "Tipo de archivo no permitido. Válidos: imágenes (JPEG, PNG, GIF), PDF, Word y Excel"
            )

        tamanio_maximo = settings.EVIDENCIAS_TAMANIO_MAXIMO_MB * 1024 * 1024
        if value.size > tamanio_maximo:
            raise serializers.ValidationError(
                f"El archivo no puede superar los {settings.EVIDENCIAS_TAMANIO_MAXIMO_MB}MB. "
                f"Tamaño actual: {round(value.size / (1024 * 1024), 2)}MB"
            )

        return value
