# apps/ml_recomendaciones/models.py

import uuid

from django.db import models
from django.utils import timezone

from apps.core.models import BaseModel


class FeedbackML(BaseModel):
    """
    Bandeja de salida de feedback hacia el servicio de recomendaciones.

    El registro se crea en la misma transacción que la tarea; el envío ocurre
    después del commit y su resultado nunca afecta a la tarea.
    """

    ESTADO_PENDIENTE = 'pendiente'
    ESTADO_ENVIADO = 'enviado'
    ESTADO_FALLIDO = 'fallido'

    ESTADOS = [
        (ESTADO_PENDIENTE, 'Pendiente'),
        (ESTADO_ENVIADO, 'Enviado'),
        (ESTADO_FALLIDO, 'Fallido'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tarea = models.ForeignKey(
        'planes_accion.TareaPlan',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='feedbacks_ml',
        verbose_name='Tarea'
    )

    payload = models.JSONField(verbose_name='Payload')

    estado = models.CharField(
        max_length=20,
        choices=ESTADOS,
        default=ESTADO_PENDIENTE,
        verbose_name='Estado',
        db_index=True
    )

    intentos = models.PositiveIntegerField(default=0, verbose_name='Intentos')
    ultimo_error = models.TextField(blank=True, verbose_name='Último Error')
    fecha_envio = models.DateTimeField(null=True, blank=True, verbose_name='Fecha de Envío')

    class Meta:
        db_table = 'feedback_ml'
        verbose_name = 'Feedback ML'
        verbose_name_plural = 'Feedback ML'
        ordering = ['-fecha_creacion']

    def __str__(self):
        return f"Feedback {self.id} ({self.get_estado_display()})"

    def marcar_enviado(self):
        self.estado = self.ESTADO_ENVIADO
        self.intentos += 1
        self.ultimo_error = ''
        self.fecha_envio = timezone.now()
        self.save(update_fields=['estado', 'intentos', 'ultimo_error', 'fecha_envio', 'fecha_actualizacion'])

    def marcar_fallido(self, error):
        self.estado = self.ESTADO_FALLIDO
        self.intentos += 1
        self.ultimo_error = str(error)[:2000]
        self.save(update_fields=['estado', 'intentos', 'ultimo_error', 'fecha_actualizacion'])
