import uuid
from datetime import datetime

import pytest
from django.utils import timezone

from apps.core.exceptions import RecursoNoEncontrado
from apps.inspecciones.secciones import construir_arbol
from apps.planes_accion.repositorios import (
    InstanciaInspeccion,
    PlantillaInspeccion,
    RepositorioInstancias,
    RepositorioPlantillas,
    seccion_respondida_desde_dict,
)
from apps.planes_accion.services import PlanAccionService
from apps.planes_accion.utils.verificacion import normalizar_lista_verificacion


class RepositorioInstanciasMemoria(RepositorioInstancias):

    def __init__(self):
        self.instancias = {}

    def agregar(self, instancia):
        self.instancias[instancia.id] = instancia
        return instancia

    def obtener(self, instancia_id):
        try:
            return self.instancias[str(instancia_id)]
        except KeyError:
            raise RecursoNoEncontrado('Instancia no encontrada')


class RepositorioPlantillasMemoria(RepositorioPlantillas):

    def __init__(self):
        self.plantillas = {}

    def agregar(self, plantilla):
        self.plantillas[plantilla.id] = plantilla
        return plantilla

    def obtener(self, plantilla_id):
        try:
            return self.plantillas[str(plantilla_id)]
        except KeyError:
            raise RecursoNoEncontrado('Plantilla no encontrada')


SECCIONES_PLANTILLA = [
    {
        'id': 'grupo-riesgos',
        'title': 'Riesgos Críticos',
        'isParent': True,
        'subsections': [
            {'id': 's-altura', 'title': 'Trabajo en Altura', 'questions': [{'text': '¿Baranda firme?'}]},
            {'id': 's-electrico', 'title': 'Tableros Eléctricos', 'questions': [{'text': '¿Cables protegidos?'}]},
        ],
    },
    {'id': 's-general', 'title': 'Orden y Limpieza', 'questions': [{'text': '¿Pasillos despejados?'}]},
]

LISTA_VERIFICACION = [
    {'label': 'Gerencia', 'value': 'VP Operaciones'},
    {'label': 'Superintendencia', 'value': 'Mantenimiento Mina'},
    {'label': 'Área', 'value': 'Chancado Primario'},
    {'label': 'Supervisor', 'value': 'Juan Pérez'},
]


@pytest.fixture
def repo_instancias():
    return RepositorioInstanciasMemoria()


@pytest.fixture
def repo_plantillas():
    return RepositorioPlantillasMemoria()


@pytest.fixture
def plantilla(repo_plantillas):
    return repo_plantillas.agregar(PlantillaInspeccion(
        id=str(uuid.uuid4()),
        nombre='Inspección de Seguridad en Planta',
        secciones=construir_arbol(SECCIONES_PLANTILLA),
    ))


@pytest.fixture
def crear_instancia(repo_instancias, plantilla):
    """Registra una instancia en el repositorio en memoria a partir del JSON de secciones"""

    def _crear(secciones, lista_verificacion=LISTA_VERIFICACION, porcentaje=75.0):
        return repo_instancias.agregar(InstanciaInspeccion(
            id=str(uuid.uuid4()),
            plantilla_id=plantilla.id,
            fecha_creacion=timezone.make_aware(datetime(2024, 3, 15, 9, 30)),
            secciones=[seccion_respondida_desde_dict(s) for s in secciones],
            lista_verificacion=normalizar_lista_verificacion(lista_verificacion),
            porcentaje_cumplimiento_general=porcentaje,
        ))

    return _crear


@pytest.fixture
def instancia_tres_observaciones(crear_instancia):
    return crear_instancia([
        {
            'sectionId': 's-altura',
            'compliancePercentage': 50,
            'questions': [
                {'questionText': '¿Baranda firme?', 'response': 0, 'comment': 'Baranda suelta'},
                {'questionText': '¿Línea de vida?', 'response': '1', 'comment': 'Falta línea de vida'},
            ],
        },
        {
            'sectionId': 's-electrico',
            'compliancePercentage': 66,
            'questions': [
                {'questionText': '¿Cables protegidos?', 'response': 2, 'comment': 'Cable expuesto'},
                {'questionText': '¿Tablero rotulado?', 'response': 3, 'comment': ''},
            ],
        },
    ])


@pytest.fixture
def service(repo_instancias, repo_plantillas):
    return PlanAccionService(repo_instancias=repo_instancias, repo_plantillas=repo_plantillas)


@pytest.fixture
def plan_generado(db, service, instancia_tres_observaciones):
    return service.generar_desde_instancia(instancia_tres_observaciones.id)


@pytest.fixture
def instancia_orm(db):
    """Plantilla e instancia persistidas, para las pruebas que pasan por la API"""
    from apps.inspecciones.models import Instancia, Plantilla

    plantilla = Plantilla.objects.create(
        codigo='INS-001',
        nombre='Inspección de Seguridad en Planta',
        secciones=SECCIONES_PLANTILLA,
    )
    return Instancia.objects.create(
        plantilla=plantilla,
        lista_verificacion=LISTA_VERIFICACION,
        porcentaje_cumplimiento_general=75,
        secciones=[
            {
                'sectionId': 's-altura',
                'compliancePercentage': 50,
                'questions': [
                    {'questionText': '¿Baranda firme?', 'response': 0, 'comment': 'Baranda suelta'},
                    {'questionText': '¿Línea de vida?', 'response': 3, 'comment': ''},
                ],
            },
            {
                'sectionId': 's-electrico',
                'compliancePercentage': 66,
                'questions': [
                    {'questionText': '¿Cables protegidos?', 'response': 1, 'comment': 'Cable expuesto'},
                ],
            },
        ],
    )
