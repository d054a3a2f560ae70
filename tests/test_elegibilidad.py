import pytest

from apps.planes_accion.utils.elegibilidad import (
    PoliticaElegibilidad,
    es_observacion_elegible,
    extraer_puntaje,
)

INCLUIR_3 = PoliticaElegibilidad(incluir_puntaje_3=True)
SIN_COMENTARIO = PoliticaElegibilidad(solo_con_comentario=False)


@pytest.mark.parametrize('respuesta, esperado', [
    (0, 0),
    ('1', 1),
    (' 2 ', 2),
    ('2.0', 2),
    (2.7, 2.7),
    ('3.5', 3.5),
    ('N/A', None),
    ('n/a', None),
    ('', None),
    ('bueno', None),
    (None, None),
    (True, None),
    (float('nan'), None),
])
def test_extraer_puntaje(respuesta, esperado):
    assert extraer_puntaje(respuesta) == esperado


def test_puntaje_bajo_con_comentario_es_elegible():
    assert es_observacion_elegible('1', 'loose handrail') is True


def test_puntaje_3_no_es_elegible_por_defecto():
    assert es_observacion_elegible('3', 'minor wear') is False


def test_puntaje_3_con_comentario_si_se_incluye():
    assert es_observacion_elegible('3', 'minor wear', INCLUIR_3) is True


def test_puntaje_3_sin_comentario_nunca_es_elegible():
    assert es_observacion_elegible(3, '   ', INCLUIR_3) is False


@pytest.mark.parametrize('politica', [
    PoliticaElegibilidad(),
    INCLUIR_3,
    SIN_COMENTARIO,
    PoliticaElegibilidad(incluir_puntaje_3=True, solo_con_comentario=False),
])
def test_no_aplica_nunca_es_elegible(politica):
    assert es_observacion_elegible('N/A', 'comentario', politica) is False


def test_comentario_en_blanco_no_cuenta():
    assert es_observacion_elegible(0, '   ') is False
    assert es_observacion_elegible(0, None) is False


def test_sin_exigir_comentario():
    assert es_observacion_elegible(2, '', SIN_COMENTARIO) is True


def test_puntaje_mayor_a_3_nunca_es_elegible():
    assert es_observacion_elegible(4, 'fuera de escala', INCLUIR_3) is False


def test_respuesta_no_numerica_no_es_elegible():
    assert es_observacion_elegible('Regular', 'comentario', SIN_COMENTARIO) is False


def test_puntaje_decimal_sobre_3_nunca_es_elegible():
    assert es_observacion_elegible(3.5, 'desgaste', INCLUIR_3) is False
    assert es_observacion_elegible('3.5', 'desgaste', INCLUIR_3) is False


def test_puntaje_decimal_bajo_3_es_elegible():
    assert es_observacion_elegible(2.5, 'desgaste') is True
