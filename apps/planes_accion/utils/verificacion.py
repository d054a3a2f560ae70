# apps/planes_accion/utils/verificacion.py

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Dict, Iterable


# Alias en orden de prioridad: gana el primero con valor no vacío
ALIAS_VICEPRESIDENCIA = ('Vicepresidencia', 'Gerencia', 'Gerencia / Vicepresidencia')
ALIAS_SUPERINTENDENCIA_SENIOR = ('Superintendencia Senior', 'Superintendencia Sénior', 'Sup. Senior')
ALIAS_SUPERINTENDENCIA = ('Superintendencia', 'Sup.')
ALIAS_AREA = ('Área', 'Area', 'Área Física', 'Lugar')
ALIAS_EMPRESA = ('Empresa', 'Compañía')
ALIAS_SUPERVISOR = ('Supervisor',)

VICEPRESIDENCIA_NO_ESPECIFICADA = 'Vicepresidencia no especificada'
SUPERINTENDENCIA_SENIOR_NO_ESPECIFICADA = 'Superintendencia Senior no especificada'
SUPERINTENDENCIA_NO_ESPECIFICADA = 'Superintendencia no especificada'
AREA_NO_ESPECIFICADA = 'Área no especificada'
SUPERVISOR_NO_ASIGNADO = 'No asignado'


@dataclass(frozen=True)
class DatosOrganizacionales:
    vicepresidencia: str
    superintendencia_senior: str
    superintendencia: str
    area_fisica: str
    empresa: str
    supervisor: str


def _a_texto(valor) -> str:
    if valor is None:
        return ''
    return str(valor).strip()


def normalizar_lista_verificacion(lista) -> Dict[str, str]:
    """
    Convierte la lista de verificación de una instancia en un dict clave -> texto.

    Acepta un mapeo, una lista de pares (clave, valor) o una lista de
    {"label": ..., "value": ...}. Cualquier otra forma (o None) produce un dict vacío.
    """
    if lista is None:
        return {}

    if isinstance(lista, Mapping):
        pares = lista.items()
    elif isinstance(lista, (list, tuple)):
        pares = []
        for entrada in lista:
            if isinstance(entrada, Mapping):
                clave = entrada.get('label', entrada.get('key'))
                pares.append((clave, entrada.get('value')))
            elif isinstance(entrada, (list, tuple)) and len(entrada) == 2:
                pares.append((entrada[0], entrada[1]))
    else:
        return {}

    mapa = {}
    for clave, valor in pares:
        clave = _a_texto(clave)
        if clave:
            mapa[clave] = _a_texto(valor)
    return mapa


def resolver_campo(mapa: Dict[str, str], alias: Iterable[str], por_defecto: str) -> str:
    """Devuelve el valor del primer alias no vacío o el valor por defecto"""
    for clave in alias:
        valor = mapa.get(clave)
        if valor:
            return valor
    return por_defecto


def resolver_datos_organizacionales(mapa: Dict[str, str], empresa_defecto: str = 'MSC') -> DatosOrganizacionales:
    return DatosOrganizacionales(
        vicepresidencia=resolver_campo(mapa, ALIAS_VICEPRESIDENCIA, VICEPRESIDENCIA_NO_ESPECIFICADA),
        superintendencia_senior=resolver_campo(
            mapa, ALIAS_SUPERINTENDENCIA_SENIOR, SUPERINTENDENCIA_SENIOR_NO_ESPECIFICADA
        ),
        superintendencia=resolver_campo(mapa, ALIAS_SUPERINTENDENCIA, SUPERINTENDENCIA_NO_ESPECIFICADA),
        area_fisica=resolver_campo(mapa, ALIAS_AREA, AREA_NO_ESPECIFICADA),
        empresa=resolver_campo(mapa, ALIAS_EMPRESA, empresa_defecto),
        supervisor=resolver_campo(mapa, ALIAS_SUPERVISOR, SUPERVISOR_NO_ASIGNADO),
    )
