# apps/planes_accion/exporters.py

from io import BytesIO
from datetime import datetime

from django.http import HttpResponse
from django.utils.text import slugify
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter


COLUMNAS_TAREAS = (
    ('N°', 'numero_item', 6),
    ('Fecha Hallazgo', 'fecha_hallazgo', 14),
    ('Responsable Observación', 'responsable_observacion', 25),
    ('Empresa', 'empresa', 15),
    ('Lugar Físico', 'lugar_fisico', 25),
    ('Actividad', 'actividad', 30),
    ('Familia de Peligro', 'familia_peligro', 22),
    ('Descripción de la Observación', 'descripcion_observacion', 50),
    ('Acción Propuesta', 'accion_propuesta', 50),
    ('Responsable Área de Cierre', 'responsable_area_cierre', 25),
    ('Fecha Acordada', 'fecha_cumplimiento_acordada', 14),
    ('Fecha Efectiva', 'fecha_cumplimiento_efectiva', 14),
    ('Días de Retraso', 'dias_retraso', 10),
    ('Estado', 'get_estado_display', 14),
    ('Aprobado', 'aprobado', 10),
    ('Evidencias', 'evidencias', 40),
)


class PlanAccionExcelExporter:
    """
    Exporta un plan de acción a Excel: bloque de datos generales del plan
    y una fila por tarea.
    """

    content_type = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

    def __init__(self, plan):
        self.plan = plan
        self.buffer = BytesIO()

    def get_filename(self):
        # Solo ASCII: el nombre viaja en la cabecera Content-Disposition
        area = slugify(self.plan.area_fisica).replace('-', '_') or 'sin_area'
        fecha = datetime.now().strftime('%Y%m%d')
        return f'Plan_Accion_{area}_{fecha}.xlsx'

    def generate(self):
        wb = Workbook()
        ws = wb.active
        ws.title = "PLAN DE ACCIÓN"

        header_fill = PatternFill(start_color="1F4E78", end_color="1F4E78", fill_type="solid")
        header_font = Font(bold=True, color="FFFFFF", size=11)
        label_font = Font(bold=True)
        center_alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)
        left_alignment = Alignment(horizontal='left', vertical='top', wrap_text=True)
        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        # ═══ DATOS GENERALES ═══
        ws.cell(row=1, column=1, value='PLAN DE ACCIÓN').font = Font(bold=True, size=14)

        datos_plan = [
            ('Vicepresidencia', self.plan.vicepresidencia),
            ('Superintendencia Senior', self.plan.superintendencia_senior),
            ('Superintendencia', self.plan.superintendencia),
            ('Área Física', self.plan.area_fisica),
            ('Estado', self.plan.get_estado_display()),
            ('Total de Tareas', self.plan.total_tareas),
            ('Abiertas', self.plan.tareas_abiertas),
            ('En Progreso', self.plan.tareas_en_progreso),
            ('Cerradas', self.plan.tareas_cerradas),
            ('Cierre (%)', self.plan.porcentaje_cierre),
        ]
        for fila, (etiqueta, valor) in enumerate(datos_plan, start=3):
            ws.cell(row=fila, column=1, value=etiqueta).font = label_font
            ws.cell(row=fila, column=2, value=valor)

        # ═══ TAREAS ═══
        fila_encabezado = len(datos_plan) + 4

        for col_idx, (titulo, _, ancho) in enumerate(COLUMNAS_TAREAS, start=1):
            cell = ws.cell(row=fila_encabezado, column=col_idx, value=titulo)
            cell.fill = header_fill
            cell.font = header_font
            cell.alignment = center_alignment
            cell.border = thin_border
            ws.column_dimensions[get_column_letter(col_idx)].width = ancho

        tareas = self.plan.tareas.order_by('numero_item')
        for row_idx, tarea in enumerate(tareas, start=fila_encabezado + 1):
            for col_idx, (_, campo, _) in enumerate(COLUMNAS_TAREAS, start=1):
                cell = ws.cell(row=row_idx, column=col_idx, value=self._valor_celda(tarea, campo))
                cell.alignment = left_alignment if col_idx in (6, 8, 9, 16) else center_alignment
                cell.border = thin_border

        ws.freeze_panes = ws.cell(row=fila_encabezado + 1, column=1)

        wb.save(self.buffer)
        return self.buffer

    def export(self):
        """Genera y retorna HttpResponse con el archivo"""
        self.generate()
        self.buffer.seek(0)

        response = HttpResponse(self.buffer, content_type=self.content_type)
        response['Content-Disposition'] = f'attachment; filename="{self.get_filename()}"'
        return response

    @staticmethod
    def _valor_celda(tarea, campo):
        if campo == 'get_estado_display':
            return tarea.get_estado_display()
        valor = getattr(tarea, campo)
        if campo == 'aprobado':
            return 'Sí' if valor else 'No'
        if campo == 'evidencias':
            return '\n'.join(f"{e.get('nombre')}: {e.get('url')}" for e in valor or [])
        return valor
