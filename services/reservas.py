"""
services/reservas.py
Operaciones sobre reservas: alta (con reparto entre periodos), consulta,
edición, borrado y cambio de status.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from config import Settings
from extensions.database import db, unidad_de_trabajo
from models import PeriodoLibras, Reserva, StatusReserva
from services import ledger, planner, status_machine
from services.errors import (
    CapacityExceededError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from services.identidad import Actor, obtener_usuario
from utils.logger import get_logger
from utils.validators import parse_entero_positivo, parse_fecha, parse_libras, parse_texto

logger = get_logger("reservas")

ESTADO_MIN, ESTADO_MAX = 2, 100
OBSERVACIONES_MAX = 1000


def _candidatos(fecha: date, periodo_id: int | None) -> list[planner.CapacidadPeriodo]:
    """
    Periodos activos con fecha de envío >= fecha, del más próximo al más
    lejano. Se bloquean antes de leer su capacidad.
    """
    stmt = db.select(PeriodoLibras.id).where(
        PeriodoLibras.activo.is_(True),
        PeriodoLibras.fecha_envio >= fecha,
    )
    if periodo_id is not None:
        stmt = stmt.where(PeriodoLibras.id == periodo_id)

    ids = list(db.session.execute(stmt).scalars())
    periodos = [p for p in ledger.bloquear_periodos(ids) if p.activo and p.fecha_envio >= fecha]
    periodos.sort(key=lambda p: (p.fecha_envio, p.id))
    return [
        planner.CapacidadPeriodo(
            periodo_id=p.id,
            fecha_envio=p.fecha_envio,
            disponibles=ledger.libras_disponibles(p),
        )
        for p in periodos
    ]


def crear_reserva(actor: Actor, datos: dict, settings: Settings) -> tuple[list[Reserva], str]:
    """
    Devuelve (reservas creadas, mensaje). Más de una reserva significa que el
    pedido se repartió entre varios periodos.
    """
    libras = parse_libras(datos.get("libras"))
    fecha = parse_fecha(datos.get("fecha"))
    estado = parse_texto(datos.get("estado"), "estado", ESTADO_MIN, ESTADO_MAX)
    observaciones = parse_texto(datos.get("observaciones"), "observaciones", 0, OBSERVACIONES_MAX) or None
    periodo_id = datos.get("periodo_id")
    if periodo_id is not None:
        periodo_id = parse_entero_positivo(periodo_id, "periodo_id")

    obtener_usuario(actor.id, settings)

    with unidad_de_trabajo():
        candidatos = _candidatos(fecha, periodo_id)
        plan = planner.planificar(libras, fecha, candidatos, settings.mensajes.sin_periodos)
        reservas = planner.confirmar_plan(plan, actor.id, estado, observaciones)

    if plan.dividido:
        mensaje = plan.describir()
        logger.info("Usuario %s: %s", actor.id, mensaje)
    else:
        mensaje = settings.mensajes.reserva_created
        logger.info(
            "Usuario %s reservó %s lbs en periodo %s", actor.id, libras, plan.entradas[0].periodo_id
        )
    return reservas, mensaje


def listar_reservas(actor: Actor, filtros: dict, settings: Settings, page: int, limit: int):
    stmt = db.select(Reserva).order_by(Reserva.creado_en.desc(), Reserva.id.desc())

    # Un usuario normal solo ve sus reservas
    if not actor.es_admin:
        stmt = stmt.where(Reserva.usuario_id == actor.id)
    elif filtros.get("usuario_id"):
        stmt = stmt.where(Reserva.usuario_id == parse_entero_positivo(filtros["usuario_id"], "usuario_id"))

    if filtros.get("status"):
        stmt = stmt.where(Reserva.status == _parse_status(filtros["status"]))
    if filtros.get("estado"):
        stmt = stmt.where(Reserva.estado == filtros["estado"].strip())
    if filtros.get("periodo_id"):
        stmt = stmt.where(Reserva.periodo_id == parse_entero_positivo(filtros["periodo_id"], "periodo_id"))
    if filtros.get("fecha_desde"):
        stmt = stmt.where(Reserva.fecha >= parse_fecha(filtros["fecha_desde"], "fecha_desde"))
    if filtros.get("fecha_hasta"):
        stmt = stmt.where(Reserva.fecha <= parse_fecha(filtros["fecha_hasta"], "fecha_hasta"))

    return db.paginate(stmt, page=page, per_page=limit, max_per_page=settings.max_limit, error_out=False)


def _obtener(reserva_id: int, settings: Settings, bloquear: bool = False) -> Reserva:
    stmt = db.select(Reserva).where(Reserva.id == reserva_id)
    if bloquear:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    reserva = db.session.execute(stmt).scalar_one_or_none()
    if reserva is None:
        raise NotFoundError(settings.mensajes.reserva_not_found)
    return reserva


def obtener_reserva(actor: Actor, reserva_id: int, settings: Settings) -> Reserva:
    reserva = _obtener(reserva_id, settings)
    if not actor.puede_gestionar(reserva.usuario_id):
        raise PermissionDeniedError(settings.mensajes.no_puede_ver_reserva)
    return reserva


def actualizar_reserva(actor: Actor, reserva_id: int, datos: dict, settings: Settings) -> Reserva:
    """
    Edita libras, fecha, estado u observaciones. Las libras solo se revalidan
    contra el periodo actual de la reserva: una edición nunca reparte entre
    periodos.
    """
    mensajes = settings.mensajes
    if "status" in datos:
        raise ValidationError(mensajes.status_por_endpoint, errors={"status": [mensajes.status_por_endpoint]})

    libras = parse_libras(datos["libras"]) if datos.get("libras") is not None else None
    fecha = parse_fecha(datos["fecha"]) if datos.get("fecha") is not None else None
    estado = (
        parse_texto(datos["estado"], "estado", ESTADO_MIN, ESTADO_MAX)
        if datos.get("estado") is not None
        else None
    )
    observaciones = (
        parse_texto(datos["observaciones"], "observaciones", 0, OBSERVACIONES_MAX)
        if "observaciones" in datos
        else None
    )

    with unidad_de_trabajo():
        reserva = _obtener(reserva_id, settings)
        if not actor.puede_gestionar(reserva.usuario_id):
            raise PermissionDeniedError(mensajes.no_puede_editar_reserva)

        # periodo antes que reserva, el mismo orden que usa el archivado
        periodo = ledger.bloquear_periodos([reserva.periodo_id])[0]
        reserva = _obtener(reserva_id, settings, bloquear=True)
        if reserva.es_terminal:
            raise InvalidTransitionError(mensajes.cannot_modify_final_status, InvalidTransitionError.TERMINAL)
        if not periodo.activo:
            raise ValidationError(mensajes.periodo_cerrado)

        if libras is not None:
            disponibles = ledger.libras_disponibles(periodo, excluir_reserva_id=reserva.id)
            if libras > disponibles:
                raise CapacityExceededError(
                    f"{mensajes.libras_insuficientes}. Disponibles: {disponibles:.2f} lbs",
                    satisfacible=max(disponibles, Decimal("0")),
                    faltante=libras - max(disponibles, Decimal("0")),
                )
            reserva.libras = libras

        if fecha is not None:
            if fecha > periodo.fecha_envio:
                raise ValidationError(mensajes.fecha_fuera_periodo, errors={"fecha": [mensajes.fecha_fuera_periodo]})
            reserva.fecha = fecha

        if estado is not None:
            reserva.estado = estado
        if "observaciones" in datos:
            reserva.observaciones = observaciones or None

    logger.info("Reserva %s actualizada por usuario %s", reserva_id, actor.id)
    return reserva


def eliminar_reserva(actor: Actor, reserva_id: int, settings: Settings) -> None:
    with unidad_de_trabajo():
        reserva = _obtener(reserva_id, settings, bloquear=True)
        if not actor.puede_gestionar(reserva.usuario_id):
            raise PermissionDeniedError(settings.mensajes.no_puede_eliminar_reserva)
        db.session.delete(reserva)

    logger.info("Reserva %s eliminada por usuario %s", reserva_id, actor.id)


def _parse_status(valor) -> StatusReserva:
    try:
        return StatusReserva(str(valor).strip().upper())
    except ValueError:
        raise ValidationError("Status inválido", errors={"status": ["Status inválido"]}) from None


def cambiar_status(actor: Actor, reserva_id: int, datos: dict, settings: Settings,
                   hoy: date | None = None) -> Reserva:
    if not datos.get("status"):
        raise ValidationError("El status es requerido", errors={"status": ["El status es requerido"]})
    nuevo = _parse_status(datos["status"])

    with unidad_de_trabajo():
        reserva = _obtener(reserva_id, settings, bloquear=True)
        anterior = reserva.status
        status_machine.aplicar_transicion(reserva, nuevo, actor.rol, settings.mensajes, hoy=hoy)

    logger.info(
        "Reserva %s: %s -> %s (usuario %s, rol %s)",
        reserva_id, anterior.value, nuevo.value, actor.id, actor.rol.value,
    )
    return reserva
