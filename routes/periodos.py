# routes/periodos.py
from flask import Blueprint, request

from routes.auth import actor_required, admin_required, settings
from routes.responses import cuerpo_json, ok, paginacion, paginado
from services import periodos as periodos_service
from services.errors import ValidationError

bp = Blueprint("periodos", __name__, url_prefix="/api/periodos")


def _filtro_activo():
    valor = request.args.get("activo")
    if valor is None or valor == "":
        return None
    if valor.lower() in ("true", "1"):
        return True
    if valor.lower() in ("false", "0"):
        return False
    raise ValidationError("activo debe ser true o false", errors={"activo": ["Debe ser true o false"]})


@bp.post("")
@admin_required
def crear():
    s = settings()
    periodo = periodos_service.crear_periodo(cuerpo_json(), s)
    return ok(periodo, s.mensajes.periodo_created, status=201)


@bp.get("")
@admin_required
def listar():
    s = settings()
    page, limit = paginacion(s)
    pagina = periodos_service.listar_periodos(s, page, limit, activo=_filtro_activo())
    return paginado(pagina)


@bp.get("/activos")
@actor_required
def activos():
    return ok(periodos_service.listar_activos())


@bp.get("/<int:periodo_id>")
@admin_required
def detalle(periodo_id):
    return ok(periodos_service.obtener_periodo(periodo_id, settings()))


@bp.patch("/<int:periodo_id>")
@admin_required
def actualizar(periodo_id):
    s = settings()
    periodo = periodos_service.actualizar_periodo(periodo_id, cuerpo_json(), s)
    return ok(periodo, s.mensajes.periodo_updated)


@bp.post("/<int:periodo_id>/cerrar")
@admin_required
def cerrar(periodo_id):
    s = settings()
    historico = periodos_service.cerrar_periodo(periodo_id, s)
    return ok(historico.to_dict(), s.mensajes.periodo_closed)
