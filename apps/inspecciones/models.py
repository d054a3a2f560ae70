# apps/inspecciones/models.py

import uuid

from django.db import models

from apps.core.models import BaseModel


class Plantilla(BaseModel):
    """
    Plantilla de inspección (solo lectura para el motor de planes de acción).

    `secciones` guarda el árbol completo:
    [{"id": "...", "title": "...", "isParent": false, "subsections": [...], "questions": [{"text": "..."}]}]
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    codigo = models.CharField(max_length=50, unique=True, verbose_name='Código')
    nombre = models.CharField(max_length=200, verbose_name='Nombre')
    revision = models.CharField(max_length=20, blank=True, verbose_name='Revisión')

    secciones = models.JSONField(default=list, verbose_name='Secciones')

    class Meta:
        db_table = 'plantillas_inspeccion'
        verbose_name = 'Plantilla de Inspección'
        verbose_name_plural = 'Plantillas de Inspección'
        ordering = ['nombre']

    def __str__(self):
        return f"{self.codigo} - {self.nombre}"


class Instancia(BaseModel):
    """
    Inspección completada: respuestas por sección y lista de verificación.

    `secciones`:
    [{"sectionId": "...", "compliancePercentage": 80, "naCount": 1,
      "questions": [{"questionText": "...", "response": 0 | 1 | 2 | 3 | "N/A", "comment": "..."}]}]
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    plantilla = models.ForeignKey(
        Plantilla,
        on_delete=models.PROTECT,
        related_name='instancias',
        verbose_name='Plantilla'
    )

    lista_verificacion = models.JSONField(
        default=dict,
        blank=True,
        verbose_name='Lista de Verificación',
        help_text='Datos organizacionales capturados en la inspección (Área, Supervisor, Empresa, ...)'
    )

    secciones = models.JSONField(default=list, verbose_name='Respuestas por Sección')

    porcentaje_cumplimiento_general = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=0,
        verbose_name='Cumplimiento General (%)'
    )

    class Meta:
        db_table = 'instancias_inspeccion'
        verbose_name = 'Instancia de Inspección'
        verbose_name_plural = 'Instancias de Inspección'
        ordering = ['-fecha_creacion']

    def __str__(self):
        return f"{self.plantilla.nombre} ({self.fecha_creacion:%Y-%m-%d})"
