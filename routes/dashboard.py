# routes/dashboard.py
from flask import Blueprint

from routes.auth import actor_required, settings
from routes.responses import ok, paginacion, paginado
from services import reportes

bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@bp.get("/estadisticas")
@actor_required
def estadisticas():
    return ok(reportes.estadisticas_dashboard())


@bp.get("/historico")
@actor_required
def historico():
    s = settings()
    page, limit = paginacion(s)
    return paginado(reportes.listar_historico(s, page, limit))


@bp.get("/historico/<int:historico_id>/reservas")
@actor_required
def historico_reservas(historico_id):
    filas = reportes.reservas_historicas(historico_id, settings())
    return ok([h.to_dict() for h in filas])


@bp.get("/reportes")
@actor_required
def reportes_generales():
    return ok(reportes.reportes())


@bp.get("/reportes/usuarios")
@actor_required
def reporte_usuarios():
    return ok(reportes.reporte_por_usuario())


@bp.get("/reportes/estados")
@actor_required
def reporte_estados():
    return ok(reportes.reporte_por_estado())
