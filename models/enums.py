# models/enums.py
import enum


class Rol(str, enum.Enum):
    ADMIN_PRINCIPAL = "ADMIN_PRINCIPAL"
    USUARIO = "USUARIO"


class StatusReserva(str, enum.Enum):
    PENDIENTE = "PENDIENTE"
    CONFIRMADA = "CONFIRMADA"
    ENVIADA = "ENVIADA"
    ENTREGADA = "ENTREGADA"
    CANCELADA = "CANCELADA"
