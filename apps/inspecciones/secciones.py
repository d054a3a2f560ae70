# apps/inspecciones/secciones.py

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class NodoSeccion:
    """
    Nodo del árbol de secciones de una plantilla.
    Un nodo agrupador (es_padre=True) solo organiza subsecciones, no tiene preguntas propias.
    """
    id: str
    titulo: str
    es_padre: bool = False
    subsecciones: List['NodoSeccion'] = field(default_factory=list)
    preguntas: List[str] = field(default_factory=list)

    @classmethod
    def desde_dict(cls, datos: dict) -> 'NodoSeccion':
        """
        Construye el nodo (y sus hijos) desde el JSON almacenado en la plantilla:
        {"id" | "_id", "title", "isParent", "subsections": [...], "questions": [...]}
        """
        seccion_id = datos.get('id') or datos.get('_id') or ''
        preguntas = [
            p.get('text', '') if isinstance(p, dict) else str(p)
            for p in datos.get('questions') or []
        ]
        return cls(
            id=str(seccion_id),
            titulo=datos.get('title') or '',
            es_padre=bool(datos.get('isParent', False)),
            subsecciones=[cls.desde_dict(s) for s in datos.get('subsections') or []],
            preguntas=preguntas,
        )


def construir_arbol(secciones) -> List[NodoSeccion]:
    """Convierte la lista raíz de secciones (JSON) en nodos"""
    return [NodoSeccion.desde_dict(s) for s in secciones or []]


def recorrer_secciones(raices: List[NodoSeccion]):
    """
    Recorrido en profundidad: padre antes que hijos, hermanos de izquierda a derecha.
    Incluye los nodos agrupadores.
    """
    pendientes = list(reversed(raices))
    while pendientes:
        nodo = pendientes.pop()
        yield nodo
        pendientes.extend(reversed(nodo.subsecciones))


def buscar_seccion(raices: List[NodoSeccion], seccion_id) -> Optional[NodoSeccion]:
    """Busca una sección (agrupadora o no) por ID en todo el árbol"""
    seccion_id = str(seccion_id)
    for nodo in recorrer_secciones(raices):
        if nodo.id == seccion_id:
            return nodo
    return None
