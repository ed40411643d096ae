from models.enums import Rol, StatusReserva
from models.historico import HistoricoPeriodo, HistoricoReserva
from models.periodos import PeriodoLibras
from models.reservas import Reserva
from models.usuarios import Usuario

__all__ = [
    "Rol",
    "StatusReserva",
    "Usuario",
    "PeriodoLibras",
    "Reserva",
    "HistoricoPeriodo",
    "HistoricoReserva",
]
