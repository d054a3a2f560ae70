from datetime import date, datetime

from django.utils import timezone

from apps.planes_accion.utils.date_utils import calcular_dias_retraso


def test_ignora_las_horas():
    assert calcular_dias_retraso(datetime(2024, 1, 10, 8, 0), datetime(2024, 1, 12, 23, 0)) == 2


def test_fechas_calendario():
    assert calcular_dias_retraso(date(2024, 1, 31), date(2024, 2, 2)) == 2


def test_cumplimiento_anticipado_no_es_negativo():
    assert calcular_dias_retraso(date(2024, 1, 10), date(2024, 1, 5)) == 0


def test_mismo_dia():
    assert calcular_dias_retraso(datetime(2024, 1, 10, 23, 59), datetime(2024, 1, 10, 0, 1)) == 0


def test_sin_fecha_efectiva():
    assert calcular_dias_retraso(date(2024, 1, 10)) == 0
    assert calcular_dias_retraso(date(2024, 1, 10), None) == 0


def test_sin_fecha_acordada():
    assert calcular_dias_retraso(None, date(2024, 1, 10)) == 0


def test_fechas_con_zona_horaria():
    acordada = timezone.make_aware(datetime(2024, 1, 10, 8, 0))
    efectiva = timezone.make_aware(datetime(2024, 1, 12, 23, 0))
    assert calcular_dias_retraso(acordada, efectiva) == 2
