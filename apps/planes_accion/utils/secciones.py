# apps/planes_accion/utils/secciones.py

from typing import Dict, List

from apps.inspecciones.secciones import NodoSeccion, recorrer_secciones


def crear_indice_secciones(raices: List[NodoSeccion]) -> Dict[str, NodoSeccion]:
    """
    Índice plano id -> sección con solo las secciones hoja.
    Los nodos agrupadores se recorren (sus hijos sí entran) pero no se indexan.
    """
    indice = {}
    for nodo in recorrer_secciones(raices):
        if not nodo.es_padre and nodo.id:
            indice[nodo.id] = nodo
    return indice
