"""
services/reportes.py
Proyecciones de solo lectura para el dashboard: ocupación de los periodos
activos, histórico de periodos cerrados y reportes agregados.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from decimal import Decimal

from sqlalchemy.orm import selectinload

from config import Settings
from extensions.database import db
from models import HistoricoPeriodo, HistoricoReserva, PeriodoLibras, Reserva, StatusReserva
from services.errors import NotFoundError

CERO = Decimal("0")
EN_TRANSITO = (StatusReserva.CONFIRMADA, StatusReserva.ENVIADA)


def _suma(reservas, *status) -> Decimal:
    return sum((Decimal(r.libras) for r in reservas if r.status in status), CERO)


def _porcentaje(parte, total) -> float:
    return round(float(parte) / float(total) * 100, 2) if total else 0.0


def _resumen_usuarios(reservas) -> list[dict]:
    por_usuario: dict[int, dict] = {}
    for r in reservas:
        item = por_usuario.setdefault(
            r.usuario_id,
            {
                "usuario_id": r.usuario_id,
                "usuario_nombre": r.usuario.nombre,
                "usuario_email": r.usuario.correo,
                "total_libras": CERO,
                "total_reservas": 0,
            },
        )
        item["total_libras"] += Decimal(r.libras)
        item["total_reservas"] += 1

    resumen = sorted(por_usuario.values(), key=lambda u: u["total_libras"], reverse=True)
    for item in resumen:
        item["total_libras"] = f"{item['total_libras']:.2f}"
    return resumen


def _estadisticas_periodo(periodo: PeriodoLibras) -> dict:
    activas = [r for r in periodo.reservas if r.status != StatusReserva.CANCELADA]
    reservadas = sum((Decimal(r.libras) for r in activas), CERO)
    conteo = Counter(r.status for r in activas)
    return {
        "periodo": periodo.to_dict(),
        "libras_reservadas": f"{reservadas:.2f}",
        "libras_disponibles": f"{periodo.libras_totales - reservadas:.2f}",
        "libras_en_central": f"{_suma(activas, StatusReserva.ENTREGADA):.2f}",
        "libras_en_transito": f"{_suma(activas, *EN_TRANSITO):.2f}",
        "libras_pendientes": f"{_suma(activas, StatusReserva.PENDIENTE):.2f}",
        "porcentaje_ocupacion": _porcentaje(reservadas, periodo.libras_totales),
        "total_reservas": len(activas),
        "total_usuarios_con_reservas": len({r.usuario_id for r in activas}),
        "reservas_por_status": [
            {"status": s.value, "count": conteo[s]} for s in StatusReserva if conteo[s]
        ],
        "usuarios_con_reservas": _resumen_usuarios(activas),
    }


def estadisticas_dashboard() -> dict:
    periodos = db.session.execute(
        db.select(PeriodoLibras)
        .options(selectinload(PeriodoLibras.reservas).joinedload(Reserva.usuario))
        .where(PeriodoLibras.activo.is_(True))
        .order_by(PeriodoLibras.fecha_envio, PeriodoLibras.id)
    ).scalars().all()

    stats = [_estadisticas_periodo(p) for p in periodos]
    todas = [r for p in periodos for r in p.reservas if r.status != StatusReserva.CANCELADA]

    return {
        "periodos": stats,
        "total_libras_reservadas": f"{sum((Decimal(s['libras_reservadas']) for s in stats), CERO):.2f}",
        "total_libras_disponibles": f"{sum((Decimal(s['libras_disponibles']) for s in stats), CERO):.2f}",
        "total_reservas": len(todas),
        "total_usuarios_con_reservas": len({r.usuario_id for r in todas}),
        "usuarios_con_reservas": _resumen_usuarios(todas),
    }


def listar_historico(settings: Settings, page: int, limit: int):
    stmt = db.select(HistoricoPeriodo).order_by(
        HistoricoPeriodo.fecha_archivado.desc(), HistoricoPeriodo.id.desc()
    )
    return db.paginate(stmt, page=page, per_page=limit, max_per_page=settings.max_limit, error_out=False)


def reservas_historicas(historico_periodo_id: int, settings: Settings) -> list[HistoricoReserva]:
    historico = db.session.get(HistoricoPeriodo, historico_periodo_id)
    if historico is None:
        raise NotFoundError(settings.mensajes.periodo_not_found)
    return list(historico.reservas)


def _filas_reporte():
    """(usuario_id, nombre, correo, estado, libras) de reservas vivas y archivadas, sin canceladas."""
    vivas = db.session.execute(
        db.select(Reserva)
        .options(selectinload(Reserva.usuario))
        .where(Reserva.status != StatusReserva.CANCELADA)
    ).scalars()
    for r in vivas:
        yield r.usuario_id, r.usuario.nombre, r.usuario.correo, r.estado, Decimal(r.libras)

    archivadas = db.session.execute(
        db.select(HistoricoReserva).where(HistoricoReserva.status != StatusReserva.CANCELADA)
    ).scalars()
    for h in archivadas:
        yield h.usuario_id, h.usuario_nombre, h.usuario_email, h.estado, Decimal(h.libras)


def _acumular():
    por_usuario = defaultdict(lambda: {"total_libras": CERO, "total_reservas": 0})
    por_estado = defaultdict(lambda: {"total_libras": CERO, "total_reservas": 0, "usuarios": set()})
    total = CERO

    for usuario_id, nombre, correo, estado, libras in _filas_reporte():
        total += libras
        u = por_usuario[usuario_id]
        u.update(usuario_id=usuario_id, usuario_nombre=nombre, usuario_email=correo)
        u["total_libras"] += libras
        u["total_reservas"] += 1

        e = por_estado[estado]
        e["total_libras"] += libras
        e["total_reservas"] += 1
        e["usuarios"].add(usuario_id)

    return por_usuario, por_estado, total


def _por_usuario(por_usuario, total) -> list[dict]:
    return [
        {
            **u,
            "total_libras": f"{u['total_libras']:.2f}",
            "porcentaje_del_total": _porcentaje(u["total_libras"], total),
        }
        for u in sorted(por_usuario.values(), key=lambda u: u["total_libras"], reverse=True)
    ]


def _por_estado(por_estado, total) -> list[dict]:
    return [
        {
            "estado": estado,
            "total_libras": f"{e['total_libras']:.2f}",
            "total_reservas": e["total_reservas"],
            "total_usuarios": len(e["usuarios"]),
            "porcentaje_del_total": _porcentaje(e["total_libras"], total),
        }
        for estado, e in sorted(por_estado.items(), key=lambda kv: kv[1]["total_libras"], reverse=True)
    ]


def reporte_por_usuario() -> list[dict]:
    """Libras no canceladas por dueño, vivas y archivadas."""
    por_usuario, _, total = _acumular()
    return _por_usuario(por_usuario, total)


def reporte_por_estado() -> list[dict]:
    """Libras no canceladas por estado destino, vivas y archivadas."""
    _, por_estado, total = _acumular()
    return _por_estado(por_estado, total)


def reportes() -> dict:
    por_usuario, por_estado, total = _acumular()
    return {
        "por_usuario": _por_usuario(por_usuario, total),
        "por_estado": _por_estado(por_estado, total),
        "resumen": {
            "total_libras_global": f"{total:.2f}",
            "total_usuarios_unicos": len(por_usuario),
            "total_reservas_global": sum(u["total_reservas"] for u in por_usuario.values()),
        },
    }
