# apps/planes_accion/repositorios.py

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from apps.core.exceptions import RecursoNoEncontrado
from apps.core.utils import validar_uuid
from apps.inspecciones.models import Instancia, Plantilla
from apps.inspecciones.secciones import NodoSeccion, construir_arbol
from apps.planes_accion.utils.verificacion import normalizar_lista_verificacion


@dataclass
class PreguntaRespondida:
    texto: str
    respuesta: object
    comentario: str = ''


@dataclass
class SeccionRespondida:
    seccion_id: str
    preguntas: List[PreguntaRespondida] = field(default_factory=list)
    porcentaje_cumplimiento: Optional[float] = None
    cantidad_na: int = 0


@dataclass
class InstanciaInspeccion:
    id: str
    plantilla_id: str
    fecha_creacion: Optional[datetime]
    secciones: List[SeccionRespondida]
    lista_verificacion: Dict[str, str]
    porcentaje_cumplimiento_general: float = 0.0


@dataclass
class PlantillaInspeccion:
    id: str
    nombre: str
    secciones: List[NodoSeccion]


def seccion_respondida_desde_dict(datos: dict) -> SeccionRespondida:
    return SeccionRespondida(
        seccion_id=str(datos.get('sectionId', '')),
        preguntas=[
            PreguntaRespondida(
                texto=p.get('questionText', ''),
                respuesta=p.get('response'),
                comentario=p.get('comment') or '',
            )
            for p in datos.get('questions') or []
        ],
        porcentaje_cumplimiento=datos.get('compliancePercentage'),
        cantidad_na=datos.get('naCount') or 0,
    )


class RepositorioInstancias(ABC):
    """Lectura de instancias de inspección (colaborador externo)"""

    @abstractmethod
    def obtener(self, instancia_id) -> InstanciaInspeccion:
        """Lanza RecursoNoEncontrado si la instancia no existe"""


class RepositorioPlantillas(ABC):
    """Lectura de plantillas de inspección (colaborador externo)"""

    @abstractmethod
    def obtener(self, plantilla_id) -> PlantillaInspeccion:
        """Lanza RecursoNoEncontrado si la plantilla no existe"""


class RepositorioInstanciasORM(RepositorioInstancias):

    def obtener(self, instancia_id) -> InstanciaInspeccion:
        pk = validar_uuid(instancia_id, 'ID de instancia')
        try:
            instancia = Instancia.objects.get(pk=pk)
        except Instancia.DoesNotExist:
            raise RecursoNoEncontrado('Instancia no encontrada')

        return InstanciaInspeccion(
            id=str(instancia.id),
            plantilla_id=str(instancia.plantilla_id),
            fecha_creacion=instancia.fecha_creacion,
            secciones=[seccion_respondida_desde_dict(s) for s in instancia.secciones or []],
            lista_verificacion=normalizar_lista_verificacion(instancia.lista_verificacion),
            porcentaje_cumplimiento_general=float(instancia.porcentaje_cumplimiento_general or 0),
        )


class RepositorioPlantillasORM(RepositorioPlantillas):

    def obtener(self, plantilla_id) -> PlantillaInspeccion:
        pk = validar_uuid(plantilla_id, 'ID de plantilla')
        try:
            plantilla = Plantilla.objects.get(pk=pk)
        except Plantilla.DoesNotExist:
            raise RecursoNoEncontrado('Plantilla no encontrada')

        return PlantillaInspeccion(
            id=str(plantilla.id),
            nombre=plantilla.nombre,
            secciones=construir_arbol(plantilla.secciones),
        )
