# apps/planes_accion/utils/familias_peligro.py

FAMILIA_PELIGRO_DEFECTO = 'Seguridad Industrial'

# (palabra clave, familia): gana la primera coincidencia
FAMILIAS_PELIGRO = (
    ('altura', 'Trabajo en Altura'),
    ('eléctric', 'Riesgo Eléctrico'),
    ('confinado', 'Espacio Confinado'),
    ('caliente', 'Trabajo en Caliente'),
    ('aislamiento', 'Aislamiento de Energía'),
    ('izaje', 'Izaje y Levante'),
    ('sustancia', 'Sustancias Peligrosas'),
    ('maquinaria', 'Uso de Maquinaria'),
)


def determinar_familia_peligro(titulo_seccion) -> str:
    titulo = (titulo_seccion or '').lower()

    for palabra_clave, familia in FAMILIAS_PELIGRO:
        if palabra_clave in titulo:
            return familia

    return FAMILIA_PELIGRO_DEFECTO
