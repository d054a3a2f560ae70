# apps/planes_accion/models.py

import uuid

from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator

from apps.core.models import BaseModel
from apps.planes_accion.utils.date_utils import calcular_dias_retraso
from apps.planes_accion.utils.metadatos import ESTADOS, ESTADO_ABIERTO, calcular_metadatos


class PlanAccion(BaseModel):
    """
    Plan de acción derivado de una inspección.

    Es el contenedor (agregado) de sus tareas: toda modificación de una tarea
    recalcula los contadores y el estado general del plan. El estado nunca se
    asigna directamente, se deriva de las tareas.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        verbose_name='ID del Plan'
    )

    # ═══════════════════════════════════════════════════════════
    # DATOS ORGANIZACIONALES
    # ═══════════════════════════════════════════════════════════

    vicepresidencia = models.CharField(
        max_length=200,
        verbose_name='Vicepresidencia',
        db_index=True
    )

    superintendencia_senior = models.CharField(
        max_length=200,
        blank=True,
        verbose_name='Superintendencia Senior'
    )

    superintendencia = models.CharField(
        max_length=200,
        blank=True,
        verbose_name='Superintendencia',
        db_index=True
    )

    area_fisica = models.CharField(
        max_length=200,
        verbose_name='Área Física',
        db_index=True
    )

    # ═══════════════════════════════════════════════════════════
    # METADATOS CALCULADOS (solo desde calcular_metadatos)
    # ═══════════════════════════════════════════════════════════

    total_tareas = models.PositiveIntegerField(default=0, verbose_name='Total de Tareas')
    tareas_abiertas = models.PositiveIntegerField(default=0, verbose_name='Tareas Abiertas')
    tareas_en_progreso = models.PositiveIntegerField(default=0, verbose_name='Tareas en Progreso')
    tareas_cerradas = models.PositiveIntegerField(default=0, verbose_name='Tareas Cerradas')

    porcentaje_cierre = models.PositiveIntegerField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        verbose_name='Cierre (%)'
    )

    estado = models.CharField(
        max_length=20,
        choices=ESTADOS,
        default=ESTADO_ABIERTO,
        verbose_name='Estado General',
        db_index=True
    )

    version = models.PositiveIntegerField(
        default=1,
        verbose_name='Versión',
        help_text='Se incrementa con cada modificación del plan o de sus tareas'
    )

    class Meta:
        db_table = 'planes_accion'
        verbose_name = 'Plan de Acción'
        verbose_name_plural = 'Planes de Acción'
        ordering = ['-fecha_creacion']

    def __str__(self):
        return f"Plan {self.area_fisica} - {self.vicepresidencia} ({self.get_estado_display()})"

    def aplicar_metadatos(self, tareas=None):
        """Recalcula contadores y estado desde la lista actual de tareas"""
        if tareas is None:
            tareas = list(self.tareas.all())

        for campo, valor in calcular_metadatos(tareas).items():
            setattr(self, campo, valor)

    def renumerar_tareas(self):
        """Deja los números de ítem como secuencia 1..N sin huecos"""
        for numero, tarea in enumerate(self.tareas.order_by('numero_item'), start=1):
            if tarea.numero_item != numero:
                tarea.numero_item = numero
                tarea.save(update_fields=['numero_item'])


class TareaPlan(BaseModel):
    """
    Tarea (observación) de un plan de acción.

    Si tiene trazabilidad (instancia_id) fue generada desde una inspección:
    sus campos descriptivos quedan bloqueados.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    plan = models.ForeignKey(
        PlanAccion,
        on_delete=models.CASCADE,
        related_name='tareas',
        verbose_name='Plan de Acción'
    )

    numero_item = models.PositiveIntegerField(verbose_name='N° Ítem')

    # ═══════════════════════════════════════════════════════════
    # DATOS DESCRIPTIVOS
    # ═══════════════════════════════════════════════════════════

    fecha_hallazgo = models.DateField(verbose_name='Fecha del Hallazgo')
    responsable_observacion = models.CharField(max_length=200, verbose_name='Responsable de la Observación')
    empresa = models.CharField(max_length=200, verbose_name='Empresa')
    lugar_fisico = models.CharField(max_length=200, verbose_name='Lugar Físico')
    actividad = models.CharField(max_length=300, verbose_name='Actividad')
    familia_peligro = models.CharField(max_length=100, verbose_name='Familia de Peligro')
    descripcion_observacion = models.TextField(verbose_name='Descripción de la Observación')

    # ═══════════════════════════════════════════════════════════
    # SEGUIMIENTO
    # ═══════════════════════════════════════════════════════════

    accion_propuesta = models.TextField(blank=True, verbose_name='Acción Propuesta')
    responsable_area_cierre = models.CharField(max_length=200, verbose_name='Responsable del Área de Cierre')

    fecha_cumplimiento_acordada = models.DateField(
        null=True,
        blank=True,
        verbose_name='Fecha de Cumplimiento Acordada'
    )

    fecha_cumplimiento_efectiva = models.DateField(
        null=True,
        blank=True,
        verbose_name='Fecha de Cumplimiento Efectiva'
    )

    dias_retraso = models.PositiveIntegerField(
        default=0,
        editable=False,
        verbose_name='Días de Retraso',
        help_text='Calculado desde las fechas acordada y efectiva'
    )

    estado = models.CharField(
        max_length=20,
        choices=ESTADOS,
        default=ESTADO_ABIERTO,
        verbose_name='Estado'
    )

    aprobado = models.BooleanField(default=False, verbose_name='Aprobado')

    evidencias = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Evidencias',
        help_text='Lista de {"nombre": ..., "url": ...}'
    )

    ml_metadata = models.JSONField(
        null=True,
        blank=True,
        verbose_name='Metadatos ML',
        help_text='{"fue_recomendacion_ml", "indice_recomendacion", "recomendaciones_originales", "timestamp"}'
    )

    # ═══════════════════════════════════════════════════════════
    # TRAZABILIDAD (solo tareas generadas desde inspección)
    # ═══════════════════════════════════════════════════════════

    instancia_id = models.CharField(max_length=64, blank=True, null=True, verbose_name='Instancia de Origen')
    seccion_id = models.CharField(max_length=64, blank=True, null=True, verbose_name='Sección de Origen')
    seccion_titulo = models.CharField(max_length=300, blank=True, null=True, verbose_name='Título de la Sección')
    texto_pregunta = models.TextField(blank=True, null=True, verbose_name='Pregunta de Origen')

    class Meta:
        db_table = 'tareas_plan_accion'
        verbose_name = 'Tarea de Plan de Acción'
        verbose_name_plural = 'Tareas de Plan de Acción'
        ordering = ['plan', 'numero_item']
        unique_together = [['plan', 'numero_item']]
        indexes = [
            models.Index(fields=['plan', 'estado']),
            models.Index(fields=['aprobado']),
        ]

    def __str__(self):
        return f"{self.numero_item}. {self.descripcion_observacion[:50]}"

    @property
    def es_generada_por_sistema(self) -> bool:
        """Tiene trazabilidad hacia una inspección"""
        return bool(self.instancia_id)

    def recalcular_dias_retraso(self):
        self.dias_retraso = calcular_dias_retraso(
            self.fecha_cumplimiento_acordada,
            self.fecha_cumplimiento_efectiva
        )
