import pytest

from apps.planes_accion.exporters import PlanAccionExcelExporter
from apps.planes_accion.models import PlanAccion


@pytest.mark.parametrize('area, prefijo', [
    ('Chancado Primario', 'Plan_Accion_chancado_primario_'),
    ('Área "Norte"/Sur', 'Plan_Accion_area_nortesur_'),
    ('北京', 'Plan_Accion_sin_area_'),
])
def test_nombre_de_archivo_seguro_para_cabecera(area, prefijo):
    nombre = PlanAccionExcelExporter(PlanAccion(area_fisica=area)).get_filename()

    assert nombre.startswith(prefijo)
    assert nombre.endswith('.xlsx')
    nombre.encode('ascii')
