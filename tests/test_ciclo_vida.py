from datetime import date

import pytest

from apps.core.exceptions import ErrorPrecondicion
from apps.planes_accion.ciclo_vida import (
    requiere_feedback,
    validar_aprobacion,
    validar_edicion,
    validar_requisitos_estado,
    validar_transicion,
)
from apps.planes_accion.models import TareaPlan


def nueva_tarea(**kwargs):
    datos = {
        'numero_item': 1,
        'fecha_hallazgo': date(2024, 3, 15),
        'responsable_observacion': 'Juan Pérez',
        'empresa': 'MSC',
        'lugar_fisico': 'Chancado Primario',
        'actividad': 'Inspección de Seguridad',
        'familia_peligro': 'Trabajo en Altura',
        'descripcion_observacion': 'Baranda suelta',
        'accion_propuesta': '',
        'responsable_area_cierre': 'Juan Pérez',
    }
    datos.update(kwargs)
    return TareaPlan(**datos)


class TestValidarEdicion:

    def test_tarea_aprobada_no_se_edita(self):
        tarea = nueva_tarea(estado='cerrado', aprobado=True, fecha_cumplimiento_efectiva=date(2024, 4, 1))

        with pytest.raises(ErrorPrecondicion, match='aprobada'):
            validar_edicion(tarea, ['accion_propuesta'])

    def test_campos_bloqueados_en_tarea_generada(self):
        tarea = nueva_tarea(instancia_id='abc123')

        with pytest.raises(ErrorPrecondicion) as excinfo:
            validar_edicion(tarea, ['empresa', 'accion_propuesta', 'fecha_hallazgo'])

        assert 'empresa' in excinfo.value.mensaje
        assert 'fecha_hallazgo' in excinfo.value.mensaje
        assert set(excinfo.value.errores) == {'empresa', 'fecha_hallazgo'}

    def test_bloqueo_no_depende_del_estado(self):
        tarea = nueva_tarea(instancia_id='abc123', estado='en_progreso')

        with pytest.raises(ErrorPrecondicion):
            validar_edicion(tarea, ['descripcion_observacion', 'estado'])

    def test_campos_operativos_en_tarea_generada(self):
        validar_edicion(nueva_tarea(instancia_id='abc123'), ['accion_propuesta', 'estado'])

    def test_tarea_manual_permite_editar_descriptivos(self):
        validar_edicion(nueva_tarea(), ['empresa', 'descripcion_observacion'])


class TestValidarTransicion:

    @pytest.mark.parametrize('actual, nuevo', [
        ('abierto', 'en_progreso'),
        ('en_progreso', 'abierto'),
        ('en_progreso', 'cerrado'),
        ('cerrado', 'en_progreso'),
        ('abierto', 'abierto'),
        ('cerrado', 'cerrado'),
    ])
    def test_transiciones_permitidas(self, actual, nuevo):
        validar_transicion(actual, nuevo)

    @pytest.mark.parametrize('actual, nuevo', [
        ('abierto', 'cerrado'),
        ('cerrado', 'abierto'),
    ])
    def test_transiciones_no_permitidas(self, actual, nuevo):
        with pytest.raises(ErrorPrecondicion):
            validar_transicion(actual, nuevo)


class TestValidarRequisitosEstado:

    def test_en_progreso_exige_campos(self):
        tarea = nueva_tarea(estado='en_progreso', accion_propuesta='   ')

        with pytest.raises(ErrorPrecondicion) as excinfo:
            validar_requisitos_estado(tarea)

        assert 'Acción Propuesta' in excinfo.value.mensaje
        assert 'Fecha Acordada' in excinfo.value.mensaje

    def test_en_progreso_completo(self):
        validar_requisitos_estado(nueva_tarea(
            estado='en_progreso',
            accion_propuesta='Reemplazar baranda',
            fecha_cumplimiento_acordada=date(2024, 4, 1),
        ))

    def test_cerrado_exige_fecha_efectiva(self):
        with pytest.raises(ErrorPrecondicion, match='Fecha de Cumplimiento Efectiva'):
            validar_requisitos_estado(nueva_tarea(estado='cerrado'))

    def test_abierto_no_tiene_requisitos(self):
        validar_requisitos_estado(nueva_tarea(estado='abierto', familia_peligro=''))


class TestValidarAprobacion:

    def test_solo_tareas_cerradas(self):
        with pytest.raises(ErrorPrecondicion, match='cerrado'):
            validar_aprobacion(nueva_tarea(estado='en_progreso'))

    def test_exige_fecha_efectiva(self):
        with pytest.raises(ErrorPrecondicion, match='fecha de cumplimiento efectiva'):
            validar_aprobacion(nueva_tarea(estado='cerrado'))

    def test_no_se_aprueba_dos_veces(self):
        tarea = nueva_tarea(estado='cerrado', aprobado=True, fecha_cumplimiento_efectiva=date(2024, 4, 1))

        with pytest.raises(ErrorPrecondicion, match='ya fue aprobada'):
            validar_aprobacion(tarea)

    def test_tarea_cerrada_con_fecha(self):
        validar_aprobacion(nueva_tarea(estado='cerrado', fecha_cumplimiento_efectiva=date(2024, 4, 1)))


@pytest.mark.parametrize('anterior, nuevo, ml_metadata, esperado', [
    ('abierto', 'en_progreso', {'fue_recomendacion_ml': True}, True),
    ('abierto', 'en_progreso', {'fue_recomendacion_ml': False}, True),
    ('abierto', 'en_progreso', None, False),
    ('abierto', 'en_progreso', {}, False),
    ('en_progreso', 'en_progreso', {'fue_recomendacion_ml': True}, False),
    ('cerrado', 'en_progreso', {'fue_recomendacion_ml': True}, False),
])
def test_requiere_feedback(anterior, nuevo, ml_metadata, esperado):
    assert requiere_feedback(anterior, nuevo, ml_metadata) is esperado
