"""
services/identidad.py
Frontera con el servicio de identidad: el actor autenticado y el alta mínima
de usuarios (sin contraseñas; la autenticación ocurre aguas arriba).
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError

from config import Settings
from extensions.database import db, unidad_de_trabajo
from models import Rol, Usuario
from services.errors import ConflictError, NotFoundError


@dataclass(frozen=True)
class Actor:
    id: int
    rol: Rol

    @property
    def es_admin(self) -> bool:
        return self.rol == Rol.ADMIN_PRINCIPAL

    def puede_gestionar(self, usuario_id: int) -> bool:
        """Admin o dueño del recurso."""
        return self.es_admin or self.id == usuario_id


def obtener_usuario(usuario_id: int, settings: Settings) -> Usuario:
    usuario = db.session.get(Usuario, usuario_id)
    if usuario is None or not usuario.activo:
        raise NotFoundError(settings.mensajes.usuario_not_found)
    return usuario


def registrar_usuario(nombre: str, correo: str, rol: Rol, settings: Settings) -> Usuario:
    correo = correo.strip().lower()
    existente = db.session.execute(
        db.select(Usuario).where(Usuario.correo == correo)
    ).scalar_one_or_none()
    if existente is not None:
        raise ConflictError(settings.mensajes.email_already_exists)

    try:
        with unidad_de_trabajo():
            usuario = Usuario(nombre=nombre.strip(), correo=correo, rol=rol, activo=True)
            db.session.add(usuario)
    except IntegrityError:
        # otro proceso registró el mismo correo entre la consulta y el insert
        raise ConflictError(settings.mensajes.email_already_exists) from None
    return usuario
