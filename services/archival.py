"""
services/archival.py
Cierre irreversible de un periodo.

Pasos (todos en una transacción):
  1. bloquear el periodo y cargar sus reservas con sus dueños
  2. calcular agregados sobre las reservas no canceladas
  3. escribir HistoricoPeriodo
  4. escribir un HistoricoReserva por reserva (canceladas incluidas)
  5. borrar las reservas vivas del periodo
  6. marcar el periodo como inactivo

Si algo falla en la base de datos, rollback completo: el periodo queda tal
como estaba y el cierre puede reintentarse.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from config import Settings
from extensions.database import db, unidad_de_trabajo
from models import HistoricoPeriodo, HistoricoReserva, PeriodoLibras, Reserva, StatusReserva
from services import ledger
from services.errors import InternalError, NotFoundError, ValidationError
from utils.logger import get_logger
from utils.validators import redondear_libras

logger = get_logger("archival")


@dataclass(frozen=True)
class ResumenCierre:
    libras_reservadas: Decimal
    libras_disponibles: Decimal
    total_reservas: int
    total_usuarios: int


def calcular_resumen(libras_totales: int, reservas: list[Reserva]) -> ResumenCierre:
    """Agregados del cierre; las canceladas no cuentan."""
    activas = [r for r in reservas if r.status != StatusReserva.CANCELADA]
    reservadas = redondear_libras(sum((Decimal(r.libras) for r in activas), Decimal("0")))
    return ResumenCierre(
        libras_reservadas=reservadas,
        libras_disponibles=redondear_libras(Decimal(libras_totales) - reservadas),
        total_reservas=len(activas),
        total_usuarios=len({r.usuario_id for r in activas}),
    )


def _copiar_reserva(reserva: Reserva, historico: HistoricoPeriodo, periodo: PeriodoLibras,
                    archivado: datetime) -> HistoricoReserva:
    return HistoricoReserva(
        historico_periodo=historico,
        reserva_original_id=reserva.id,
        usuario_id=reserva.usuario_id,
        usuario_nombre=reserva.usuario.nombre,
        usuario_email=reserva.usuario.correo,
        libras=reserva.libras,
        fecha=reserva.fecha,
        estado=reserva.estado,
        observaciones=reserva.observaciones,
        status=reserva.status,
        confirmada_en=reserva.confirmada_en,
        enviada_en=reserva.enviada_en,
        entregada_en=reserva.entregada_en,
        periodo_fecha_envio=periodo.fecha_envio,
        fecha_archivado=archivado,
    )


def _borrar_reservas_vivas(periodo_id: int) -> None:
    db.session.execute(
        db.delete(Reserva)
        .where(Reserva.periodo_id == periodo_id)
        .execution_options(synchronize_session=False)
    )


def _archivar(periodo_id: int, settings: Settings) -> HistoricoPeriodo:
    mensajes = settings.mensajes

    bloqueados = ledger.bloquear_periodos([periodo_id])
    if not bloqueados:
        raise NotFoundError(mensajes.periodo_not_found)
    periodo = bloqueados[0]
    if not periodo.activo:
        raise ValidationError(mensajes.periodo_cerrado)

    reservas = list(
        db.session.execute(
            db.select(Reserva)
            .options(joinedload(Reserva.usuario, innerjoin=True))
            .where(Reserva.periodo_id == periodo.id)
            .order_by(Reserva.id)
            .with_for_update(of=Reserva)
        ).scalars()
    )

    resumen = calcular_resumen(periodo.libras_totales, reservas)
    archivado = datetime.utcnow()

    historico = HistoricoPeriodo(
        periodo_id=periodo.id,
        libras_totales=periodo.libras_totales,
        libras_reservadas=resumen.libras_reservadas,
        libras_disponibles=resumen.libras_disponibles,
        fecha_envio=periodo.fecha_envio,
        total_reservas=resumen.total_reservas,
        total_usuarios=resumen.total_usuarios,
        fecha_archivado=archivado,
    )
    db.session.add(historico)
    db.session.add_all(_copiar_reserva(r, historico, periodo, archivado) for r in reservas)
    db.session.flush()

    _borrar_reservas_vivas(periodo.id)
    for reserva in reservas:
        db.session.expunge(reserva)

    periodo.activo = False
    db.session.flush()
    return historico


def cerrar_periodo(periodo_id: int, settings: Settings) -> HistoricoPeriodo:
    try:
        with unidad_de_trabajo():
            historico = _archivar(periodo_id, settings)
    except SQLAlchemyError:
        logger.exception("Rollback al archivar el periodo %s", periodo_id)
        raise InternalError(settings.mensajes.internal_server_error) from None

    logger.info(
        "Periodo %s archivado: %s/%s lbs reservadas, %s reservas, %s usuarios",
        periodo_id,
        historico.libras_reservadas,
        historico.libras_totales,
        historico.total_reservas,
        historico.total_usuarios,
    )
    return historico
