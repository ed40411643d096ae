"""
services/status_machine.py
Máquina de estados de la reserva.

    PENDIENTE -> CONFIRMADA -> ENVIADA -> ENTREGADA
        \\            \\            \\
         +-> CANCELADA +-> CANCELADA +-> CANCELADA

La tabla TRANSICIONES es la única fuente de verdad: para cada status, los
destinos legales y los roles que pueden llevar la reserva ahí.
"""

from __future__ import annotations

from datetime import date

from config import Mensajes
from models import Reserva, Rol, StatusReserva
from services.errors import InvalidTransitionError

_ADMIN = frozenset({Rol.ADMIN_PRINCIPAL})
_TODOS = frozenset({Rol.ADMIN_PRINCIPAL, Rol.USUARIO})

TRANSICIONES: dict[StatusReserva, dict[StatusReserva, frozenset[Rol]]] = {
    StatusReserva.PENDIENTE: {
        StatusReserva.CONFIRMADA: _ADMIN,
        StatusReserva.CANCELADA: _ADMIN,
    },
    StatusReserva.CONFIRMADA: {
        StatusReserva.ENVIADA: _TODOS,
        StatusReserva.CANCELADA: _ADMIN,
    },
    StatusReserva.ENVIADA: {
        StatusReserva.ENTREGADA: _ADMIN,
        StatusReserva.CANCELADA: _ADMIN,
    },
    StatusReserva.ENTREGADA: {},
    StatusReserva.CANCELADA: {},
}

# Campo de fecha que se sella al entrar en cada status
FECHA_POR_STATUS = {
    StatusReserva.CONFIRMADA: "confirmada_en",
    StatusReserva.ENVIADA: "enviada_en",
    StatusReserva.ENTREGADA: "entregada_en",
}


def es_terminal(status: StatusReserva) -> bool:
    return not TRANSICIONES[status]


def destinos_permitidos(actual: StatusReserva, rol: Rol) -> list[StatusReserva]:
    return [destino for destino, roles in TRANSICIONES[actual].items() if rol in roles]


def validar_transicion(
    actual: StatusReserva,
    nuevo: StatusReserva,
    rol: Rol,
    mensajes: Mensajes,
) -> None:
    """Lanza InvalidTransitionError si `rol` no puede pasar de `actual` a `nuevo`."""
    if es_terminal(actual):
        raise InvalidTransitionError(
            mensajes.cannot_modify_final_status, InvalidTransitionError.TERMINAL
        )

    if actual == nuevo:
        raise InvalidTransitionError(
            mensajes.status_already_set,
            InvalidTransitionError.SIN_CAMBIO,
            permitidos=[s.value for s in destinos_permitidos(actual, rol)],
        )

    if rol == Rol.ADMIN_PRINCIPAL:
        if nuevo not in TRANSICIONES[actual]:
            raise InvalidTransitionError(
                mensajes.invalid_status_transition.format(actual=actual.value, nuevo=nuevo.value),
                InvalidTransitionError.NO_ADYACENTE,
                permitidos=[s.value for s in destinos_permitidos(actual, rol)],
            )
        return

    if rol not in TRANSICIONES[actual].get(nuevo, frozenset()):
        raise InvalidTransitionError(
            mensajes.cannot_change_status,
            InvalidTransitionError.ROL,
            permitidos=[s.value for s in destinos_permitidos(actual, rol)],
        )


def aplicar_transicion(
    reserva: Reserva,
    nuevo: StatusReserva,
    rol: Rol,
    mensajes: Mensajes,
    hoy: date | None = None,
) -> Reserva:
    """Valida, cambia el status y sella la fecha del destino (una sola vez)."""
    validar_transicion(reserva.status, nuevo, rol, mensajes)

    reserva.status = nuevo
    campo = FECHA_POR_STATUS.get(nuevo)
    if campo and getattr(reserva, campo) is None:
        setattr(reserva, campo, hoy or date.today())
    return reserva
