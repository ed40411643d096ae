"""
services/ledger.py
Libro de capacidad: cuántas libras quedan en un periodo.

    disponibles = libras_totales - Σ libras (status != CANCELADA)

Consultas puras. Para que la lectura sea consistente con la escritura que la
sigue, se llama dentro de la misma transacción después de bloquear_periodos().
"""

from __future__ import annotations

from decimal import Decimal

from extensions.database import db
from models import PeriodoLibras, Reserva, StatusReserva
from services.errors import ValidationError
from utils.validators import redondear_libras


def bloquear_periodos(ids) -> list[PeriodoLibras]:
    """
    Lectura con bloqueo (SELECT ... FOR UPDATE) de los periodos dados.
    Se bloquean en orden de id para no provocar deadlocks entre escritores.
    """
    ids = sorted(set(ids))
    if not ids:
        return []
    stmt = (
        db.select(PeriodoLibras)
        .where(PeriodoLibras.id.in_(ids))
        .order_by(PeriodoLibras.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return list(db.session.execute(stmt).scalars())


def libras_comprometidas(periodo_id: int, excluir_reserva_id: int | None = None) -> Decimal:
    stmt = db.select(Reserva.libras).where(
        Reserva.periodo_id == periodo_id,
        Reserva.status != StatusReserva.CANCELADA,
    )
    if excluir_reserva_id is not None:
        stmt = stmt.where(Reserva.id != excluir_reserva_id)

    total = sum((Decimal(libras) for libras in db.session.execute(stmt).scalars()), Decimal("0"))
    return redondear_libras(total)


def libras_disponibles(periodo: PeriodoLibras, excluir_reserva_id: int | None = None) -> Decimal:
    comprometidas = libras_comprometidas(periodo.id, excluir_reserva_id)
    return redondear_libras(Decimal(periodo.libras_totales) - comprometidas)


def validar_reduccion(periodo: PeriodoLibras, nuevo_total: int) -> None:
    """Rechaza bajar libras_totales por debajo de lo ya comprometido."""
    comprometidas = libras_comprometidas(periodo.id)
    if Decimal(nuevo_total) < comprometidas:
        raise ValidationError(
            f"No se puede reducir el total a {nuevo_total} lbs. "
            f"Ya hay {comprometidas:.2f} lbs reservadas."
        )
