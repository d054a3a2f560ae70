import pytest

from apps.planes_accion.utils.familias_peligro import FAMILIA_PELIGRO_DEFECTO, determinar_familia_peligro


@pytest.mark.parametrize('titulo, familia', [
    ('Trabajo en ALTURA', 'Trabajo en Altura'),
    ('Tableros Eléctricos', 'Riesgo Eléctrico'),
    ('Ingreso a Espacio Confinado', 'Espacio Confinado'),
    ('Soldadura - Trabajo en Caliente', 'Trabajo en Caliente'),
    ('Maniobras de Izaje', 'Izaje y Levante'),
    ('Orden y Limpieza', FAMILIA_PELIGRO_DEFECTO),
    ('', FAMILIA_PELIGRO_DEFECTO),
    (None, FAMILIA_PELIGRO_DEFECTO),
])
def test_determinar_familia_peligro(titulo, familia):
    assert determinar_familia_peligro(titulo) == familia


def test_gana_la_primera_coincidencia():
    # "altura" aparece antes que "eléctric" en la tabla
    assert determinar_familia_peligro('Trabajo eléctrico en altura') == 'Trabajo en Altura'
