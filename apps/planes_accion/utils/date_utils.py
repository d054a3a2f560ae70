# apps/planes_accion/utils/date_utils.py

from apps.core.utils import a_fecha


def calcular_dias_retraso(fecha_acordada, fecha_efectiva=None) -> int:
    """
    Días calendario entre la fecha acordada y la efectiva, nunca negativo.
    Las horas se descartan: ambas fechas se comparan a medianoche.
    """
    if not fecha_acordada or not fecha_efectiva:
        return 0

    dias = (a_fecha(fecha_efectiva) - a_fecha(fecha_acordada)).days
    return max(0, dias)
