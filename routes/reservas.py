# routes/reservas.py
from flask import Blueprint, g, request

from routes.auth import actor_required, settings
from routes.responses import cuerpo_json, ok, paginacion, paginado
from services import reservas as reservas_service

bp = Blueprint("reservas", __name__, url_prefix="/api/reservas")

FILTROS = ("usuario_id", "status", "estado", "periodo_id", "fecha_desde", "fecha_hasta")


@bp.post("")
@actor_required
def crear():
    creadas, mensaje = reservas_service.crear_reserva(g.actor, cuerpo_json(), settings())
    data = creadas[0].to_dict() if len(creadas) == 1 else [r.to_dict() for r in creadas]
    return ok(data, mensaje, status=201)


@bp.get("")
@actor_required
def listar():
    s = settings()
    page, limit = paginacion(s)
    filtros = {k: request.args.get(k) for k in FILTROS if request.args.get(k)}
    return paginado(reservas_service.listar_reservas(g.actor, filtros, s, page, limit))


@bp.get("/<int:reserva_id>")
@actor_required
def detalle(reserva_id):
    return ok(reservas_service.obtener_reserva(g.actor, reserva_id, settings()).to_dict())


@bp.patch("/<int:reserva_id>")
@actor_required
def actualizar(reserva_id):
    s = settings()
    reserva = reservas_service.actualizar_reserva(g.actor, reserva_id, cuerpo_json(), s)
    return ok(reserva.to_dict(), s.mensajes.reserva_updated)


@bp.patch("/<int:reserva_id>/status")
@actor_required
def cambiar_status(reserva_id):
    s = settings()
    reserva = reservas_service.cambiar_status(g.actor, reserva_id, cuerpo_json(), s)
    return ok(reserva.to_dict(), s.mensajes.reserva_status_updated)


@bp.delete("/<int:reserva_id>")
@actor_required
def eliminar(reserva_id):
    s = settings()
    reservas_service.eliminar_reserva(g.actor, reserva_id, s)
    return ok(message=s.mensajes.reserva_deleted)
