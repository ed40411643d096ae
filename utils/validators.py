"""
utils/validators.py
Parseo y validación de entradas (libras, fechas, paginación).
Todas las funciones lanzan ValidationError con el nombre del campo.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from services.errors import ValidationError

CENTAVO = Decimal("0.01")
# Numeric(10, 2)
LIBRAS_MAX = Decimal("99999999.99")
# Integer de 32 bits
ENTERO_MAX = 2**31 - 1


def redondear_libras(valor: Decimal) -> Decimal:
    return valor.quantize(CENTAVO, rounding=ROUND_HALF_UP)


def parse_libras(valor, campo: str = "libras") -> Decimal:
    """Convierte a Decimal con 2 decimales; debe estar en [0.01, LIBRAS_MAX]."""
    if valor is None or isinstance(valor, bool) or valor == "":
        raise ValidationError(
            "Las libras son requeridas", errors={campo: ["Las libras son requeridas"]}
        )
    try:
        libras = Decimal(str(valor).strip())
        if not libras.is_finite():
            raise ValueError(valor)
        libras = redondear_libras(libras)
    except (InvalidOperation, ValueError):
        raise ValidationError(
            "Valor numérico inválido", errors={campo: ["Valor numérico inválido"]}
        ) from None
    if libras < CENTAVO:
        raise ValidationError(
            "Las libras deben ser un número positivo",
            errors={campo: ["Las libras deben ser un número positivo"]},
        )
    if libras > LIBRAS_MAX:
        mensaje = f"Las libras no pueden superar {LIBRAS_MAX}"
        raise ValidationError(mensaje, errors={campo: [mensaje]})
    return libras


def parse_entero_positivo(valor, campo: str, maximo: int = ENTERO_MAX) -> int:
    """Entero en [1, maximo]; acepta floats sin parte decimal (2.0)."""
    invalido = ValidationError(
        f"{campo} debe ser un número entero positivo",
        errors={campo: ["Debe ser un número entero positivo"]},
    )
    if isinstance(valor, bool):
        raise invalido
    if isinstance(valor, float) and not valor.is_integer():
        # también NaN e infinito
        raise invalido
    try:
        numero = int(valor)
    except (TypeError, ValueError, OverflowError):
        raise invalido from None
    if numero < 1:
        raise invalido
    if numero > maximo:
        mensaje = f"{campo} no puede superar {maximo}"
        raise ValidationError(mensaje, errors={campo: [mensaje]})
    return numero


def parse_fecha(valor, campo: str = "fecha") -> date:
    """Fecha de calendario en formato YYYY-MM-DD (sin hora ni zona)."""
    if isinstance(valor, date) and not isinstance(valor, datetime):
        return valor
    try:
        return datetime.strptime(str(valor).strip(), "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(
            "Formato de fecha inválido (usar YYYY-MM-DD)",
            errors={campo: ["Formato de fecha inválido (usar YYYY-MM-DD)"]},
        ) from None


def parse_texto(valor, campo: str, min_len: int = 0, max_len: int | None = None) -> str:
    if valor is None:
        valor = ""
    if not isinstance(valor, str):
        raise ValidationError(f"{campo} debe ser texto", errors={campo: ["Debe ser texto"]})
    texto = valor.strip()
    if len(texto) < min_len or (max_len is not None and len(texto) > max_len):
        rango = f"entre {min_len} y {max_len}" if max_len else f"al menos {min_len}"
        mensaje = f"{campo} debe tener {rango} caracteres"
        raise ValidationError(mensaje, errors={campo: [mensaje]})
    return texto


def normalizar_paginacion(page, limit, default_limit: int = 20, max_limit: int = 100) -> tuple[int, int]:
    """page >= 1 y limit en [1, max_limit]; fuera de rango es error, no se corrige."""
    page = 1 if page in (None, "") else page
    limit = default_limit if limit in (None, "") else limit
    try:
        page, limit = int(page), int(limit)
    except (TypeError, ValueError):
        raise ValidationError(
            "Parámetros de paginación inválidos",
            errors={"page": ["Debe ser un entero"], "limit": ["Debe ser un entero"]},
        ) from None
    if not 1 <= page <= ENTERO_MAX:
        raise ValidationError(
            "La página debe ser un número mayor a 0",
            errors={"page": ["La página debe ser un número mayor a 0"]},
        )
    if not 1 <= limit <= max_limit:
        raise ValidationError(
            f"El límite debe estar entre 1 y {max_limit}",
            errors={"limit": [f"El límite debe estar entre 1 y {max_limit}"]},
        )
    return page, limit


def total_paginas(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0
