# apps/planes_accion/admin.py
from django.contrib import admin
from .models import PlanAccion, TareaPlan


class TareaPlanInline(admin.TabularInline):
    model = TareaPlan
    extra = 0
    fields = ['numero_item', 'familia_peligro', 'responsable_area_cierre', 'estado', 'aprobado', 'dias_retraso']
    readonly_fields = ['numero_item', 'estado', 'aprobado', 'dias_retraso']
    ordering = ['numero_item']
    show_change_link = True
    can_delete = False


@admin.register(PlanAccion)
class PlanAccionAdmin(admin.ModelAdmin):
    list_display = ['area_fisica', 'vicepresidencia', 'superintendencia', 'estado', 'total_tareas', 'porcentaje_cierre', 'fecha_creacion']
    list_filter = ['estado', 'vicepresidencia', 'fecha_creacion']
    search_fields = ['vicepresidencia', 'superintendencia', 'area_fisica']
    inlines = [TareaPlanInline]
    ordering = ['-fecha_creacion']

    # Contadores y estado se derivan de las tareas
    readonly_fields = [
        'total_tareas', 'tareas_abiertas', 'tareas_en_progreso', 'tareas_cerradas',
        'porcentaje_cierre', 'estado', 'version', 'fecha_creacion', 'fecha_actualizacion',
    ]


@admin.register(TareaPlan)
class TareaPlanAdmin(admin.ModelAdmin):
    list_display = ['numero_item', 'plan', 'familia_peligro', 'estado', 'aprobado', 'dias_retraso']
    list_filter = ['estado', 'aprobado', 'familia_peligro']
    search_fields = ['descripcion_observacion', 'accion_propuesta', 'responsable_area_cierre']

    # Solo lectura: las modificaciones pasan por el ciclo de vida (API)
    def has_change_permission(self, request, obj=None):
        return False

    def has_add_permission(self, request):
        return False
