# routes/auth.py
"""
Actor autenticado por el gateway de identidad.

El gateway valida la sesión y reenvía el usuario en las cabeceras
X-Usuario-Id y X-Usuario-Rol; aquí solo se leen y se confía en ellas.
"""
from functools import wraps

from flask import current_app, g, request

from models import Rol
from services.errors import PermissionDeniedError, UnauthorizedError
from services.identidad import Actor
from utils.validators import ENTERO_MAX

HEADER_ID = "X-Usuario-Id"
HEADER_ROL = "X-Usuario-Rol"


def settings():
    return current_app.config["SETTINGS"]


def _leer_actor() -> Actor:
    mensajes = settings().mensajes
    try:
        usuario_id = int(request.headers.get(HEADER_ID, ""))
        rol = Rol(request.headers.get(HEADER_ROL, "").strip().upper())
    except ValueError:
        raise UnauthorizedError(mensajes.unauthorized) from None
    if not 1 <= usuario_id <= ENTERO_MAX:
        raise UnauthorizedError(mensajes.unauthorized)
    return Actor(id=usuario_id, rol=rol)


def actor_required(view_func):
    """Exige un actor autenticado; queda en g.actor."""
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        g.actor = _leer_actor()
        return view_func(*args, **kwargs)
    return wrapper


def admin_required(view_func):
    """Protege rutas solo para ADMIN_PRINCIPAL."""
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        g.actor = _leer_actor()
        if not g.actor.es_admin:
            raise PermissionDeniedError(settings().mensajes.insufficient_permissions)
        return view_func(*args, **kwargs)
    return wrapper
