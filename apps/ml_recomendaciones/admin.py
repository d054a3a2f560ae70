# apps/ml_recomendaciones/admin.py
from django.contrib import admin
from .models import FeedbackML


@admin.register(FeedbackML)
class FeedbackMLAdmin(admin.ModelAdmin):
    list_display = ['id', 'tarea', 'estado', 'intentos', 'fecha_envio', 'fecha_creacion']
    list_filter = ['estado', 'fecha_creacion']
    readonly_fields = ['payload', 'intentos', 'ultimo_error', 'fecha_envio', 'fecha_creacion', 'fecha_actualizacion']
    ordering = ['-fecha_creacion']
