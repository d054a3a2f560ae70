# apps/inspecciones/admin.py
from django.contrib import admin
from .models import Plantilla, Instancia


@admin.register(Plantilla)
class PlantillaAdmin(admin.ModelAdmin):
    list_display = ['codigo', 'nombre', 'revision', 'fecha_creacion']
    search_fields = ['codigo', 'nombre']
    readonly_fields = ['fecha_creacion', 'fecha_actualizacion']


@admin.register(Instancia)
class InstanciaAdmin(admin.ModelAdmin):
    list_display = ['id', 'plantilla', 'porcentaje_cumplimiento_general', 'fecha_creacion']
    list_filter = ['plantilla', 'fecha_creacion']
    readonly_fields = ['fecha_creacion', 'fecha_actualizacion']
