"""
config.py
Configuración de la aplicación, construida una sola vez al arrancar.

Los valores salen de variables de entorno (o de un archivo .env) y quedan
congelados en un objeto Settings que se pasa explícitamente a los servicios.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Mensajes:
    """Textos visibles para el usuario."""

    # Genéricos
    internal_server_error: str = "Error interno del servidor"
    unauthorized: str = "No autorizado"
    insufficient_permissions: str = "Permisos insuficientes"

    # Usuarios
    usuario_not_found: str = "Usuario no encontrado"
    email_already_exists: str = "El correo electrónico ya está registrado"

    # Periodos
    periodo_not_found: str = "Periodo no encontrado"
    periodo_cerrado: str = "El periodo ya está cerrado"
    periodo_fecha_pasada: str = "La fecha de envío debe ser hoy o en el futuro"
    sin_periodos: str = "No hay periodos activos disponibles para esta fecha"
    periodo_created: str = "Periodo creado exitosamente"
    periodo_updated: str = "Periodo actualizado exitosamente"
    periodo_closed: str = "Periodo cerrado y archivado exitosamente"

    # Reservas
    reserva_not_found: str = "Reserva no encontrada"
    libras_insuficientes: str = "Libras insuficientes disponibles"
    fecha_fuera_periodo: str = "La fecha está fuera del periodo de la reserva"
    no_puede_ver_reserva: str = "No tienes permiso para ver esta reserva"
    no_puede_editar_reserva: str = "No tienes permiso para editar esta reserva"
    no_puede_eliminar_reserva: str = "No tienes permiso para eliminar esta reserva"
    status_por_endpoint: str = "El status se cambia con PATCH /api/reservas/<id>/status"
    reserva_created: str = "Reserva creada exitosamente"
    reserva_updated: str = "Reserva actualizada exitosamente"
    reserva_deleted: str = "Reserva eliminada exitosamente"

    # Máquina de estados
    cannot_modify_final_status: str = "No se puede modificar una reserva entregada o cancelada"
    status_already_set: str = "La reserva ya tiene este estado"
    invalid_status_transition: str = "No se puede cambiar de {actual} a {nuevo}"
    cannot_change_status: str = "Solo puedes cambiar reservas confirmadas a enviadas"
    reserva_status_updated: str = "Estado de reserva actualizado exitosamente"


@dataclass(frozen=True)
class Settings:
    secret_key: str = "dev-secret-unsafe"
    database_url: str = "sqlite:///reservas_dev.db"
    log_level: str = "INFO"
    log_file: str | None = None
    sqlite_timeout: float = 30.0

    default_libras_totales: int = 2000
    admin_nombre: str = "Admin Principal"
    admin_correo: str = "admin@paqueteria.com"

    default_limit: int = 20
    max_limit: int = 100

    mensajes: Mensajes = field(default_factory=Mensajes)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            secret_key=os.getenv("SECRET_KEY", "dev-secret-unsafe"),  # solo para desarrollo
            database_url=os.getenv("DATABASE_URL", "sqlite:///reservas_dev.db"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_file=os.getenv("LOG_FILE") or None,
            sqlite_timeout=float(os.getenv("SQLITE_TIMEOUT", "30")),
            default_libras_totales=int(os.getenv("DEFAULT_LIBRAS_TOTALES", "2000")),
            admin_nombre=os.getenv("ADMIN_NAME", "Admin Principal"),
            admin_correo=os.getenv("ADMIN_EMAIL", "admin@paqueteria.com"),
        )

    def with_overrides(self, **changes) -> "Settings":
        return replace(self, **changes)
