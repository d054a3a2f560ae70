# apps/core/utils.py
import math
import uuid
from datetime import datetime

from django.utils import timezone

from .exceptions import ErrorValidacion


def calcular_porcentaje(valor, total):
    """
    Calcula porcentaje entero de forma segura (redondeo al entero más cercano,
    las mitades hacia arriba)
    """
    if not total:
        return 0

    return int(math.floor((valor * 100) / total + 0.5))


def a_fecha(valor):
    """
    Normaliza una fecha o fecha-hora a fecha calendario (medianoche local)
    """
    if valor is None:
        return None

    if isinstance(valor, datetime):
        if timezone.is_aware(valor):
            valor = timezone.localtime(valor)
        return valor.date()

    return valor


def validar_uuid(valor, nombre='ID'):
    """
    Valida que el identificador sea un UUID. Lanza ErrorValidacion si no lo es.
    """
    try:
        return uuid.UUID(str(valor))
    except (TypeError, ValueError, AttributeError):
        raise ErrorValidacion(f'{nombre} inválido')
