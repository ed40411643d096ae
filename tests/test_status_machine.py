import unittest
from datetime import date

from config import Mensajes
from models import Reserva, Rol, StatusReserva
from services import status_machine
from services.errors import InvalidTransitionError

ADMIN = Rol.ADMIN_PRINCIPAL
USUARIO = Rol.USUARIO
S = StatusReserva


class TestTablaTransiciones(unittest.TestCase):
    def test_cubre_todos_los_status(self):
        self.assertEqual(set(status_machine.TRANSICIONES), set(StatusReserva))

    def test_terminales(self):
        self.assertTrue(status_machine.es_terminal(S.ENTREGADA))
        self.assertTrue(status_machine.es_terminal(S.CANCELADA))
        self.assertFalse(status_machine.es_terminal(S.PENDIENTE))

    def test_destinos_por_rol(self):
        self.assertEqual(
            status_machine.destinos_permitidos(S.PENDIENTE, ADMIN), [S.CONFIRMADA, S.CANCELADA]
        )
        self.assertEqual(status_machine.destinos_permitidos(S.PENDIENTE, USUARIO), [])
        self.assertEqual(status_machine.destinos_permitidos(S.CONFIRMADA, USUARIO), [S.ENVIADA])


class TestValidarTransicion(unittest.TestCase):
    def setUp(self):
        self.mensajes = Mensajes()

    def assertRechazada(self, actual, nuevo, rol, motivo):
        with self.assertRaises(InvalidTransitionError) as ctx:
            status_machine.validar_transicion(actual, nuevo, rol, self.mensajes)
        self.assertEqual(ctx.exception.motivo, motivo)
        return ctx.exception

    def test_admin_recorre_el_camino_feliz(self):
        for actual, nuevo in [(S.PENDIENTE, S.CONFIRMADA), (S.CONFIRMADA, S.ENVIADA), (S.ENVIADA, S.ENTREGADA)]:
            status_machine.validar_transicion(actual, nuevo, ADMIN, self.mensajes)

    def test_admin_cancela_desde_cualquier_no_terminal(self):
        for actual in (S.PENDIENTE, S.CONFIRMADA, S.ENVIADA):
            status_machine.validar_transicion(actual, S.CANCELADA, ADMIN, self.mensajes)

    def test_usuario_marca_enviada(self):
        status_machine.validar_transicion(S.CONFIRMADA, S.ENVIADA, USUARIO, self.mensajes)

    def test_salto_no_adyacente(self):
        err = self.assertRechazada(S.PENDIENTE, S.ENVIADA, ADMIN, InvalidTransitionError.NO_ADYACENTE)
        self.assertEqual(err.status_code, 400)
        self.assertEqual(err.message, "No se puede cambiar de PENDIENTE a ENVIADA")
        self.assertEqual(err.permitidos, ["CONFIRMADA", "CANCELADA"])

    def test_usuario_sin_permiso(self):
        err = self.assertRechazada(S.PENDIENTE, S.ENVIADA, USUARIO, InvalidTransitionError.ROL)
        self.assertEqual(err.status_code, 403)
        self.assertRechazada(S.PENDIENTE, S.CONFIRMADA, USUARIO, InvalidTransitionError.ROL)
        self.assertRechazada(S.CONFIRMADA, S.CANCELADA, USUARIO, InvalidTransitionError.ROL)
        self.assertRechazada(S.ENVIADA, S.ENTREGADA, USUARIO, InvalidTransitionError.ROL)

    def test_terminal_rechaza_todo(self):
        for nuevo in StatusReserva:
            self.assertRechazada(S.ENTREGADA, nuevo, ADMIN, InvalidTransitionError.TERMINAL)
            self.assertRechazada(S.CANCELADA, nuevo, ADMIN, InvalidTransitionError.TERMINAL)

    def test_sin_cambio(self):
        self.assertRechazada(S.CONFIRMADA, S.CONFIRMADA, ADMIN, InvalidTransitionError.SIN_CAMBIO)
        self.assertRechazada(S.PENDIENTE, S.PENDIENTE, USUARIO, InvalidTransitionError.SIN_CAMBIO)

    def test_hacia_atras(self):
        self.assertRechazada(S.ENVIADA, S.CONFIRMADA, ADMIN, InvalidTransitionError.NO_ADYACENTE)


class TestAplicarTransicion(unittest.TestCase):
    def setUp(self):
        self.mensajes = Mensajes()

    def test_sella_fechas(self):
        reserva = Reserva(status=S.PENDIENTE)
        status_machine.aplicar_transicion(reserva, S.CONFIRMADA, ADMIN, self.mensajes, hoy=date(2026, 10, 1))
        status_machine.aplicar_transicion(reserva, S.ENVIADA, USUARIO, self.mensajes, hoy=date(2026, 10, 2))
        status_machine.aplicar_transicion(reserva, S.ENTREGADA, ADMIN, self.mensajes, hoy=date(2026, 10, 3))

        self.assertEqual(reserva.status, S.ENTREGADA)
        self.assertEqual(reserva.confirmada_en, date(2026, 10, 1))
        self.assertEqual(reserva.enviada_en, date(2026, 10, 2))
        self.assertEqual(reserva.entregada_en, date(2026, 10, 3))

    def test_fecha_se_escribe_una_vez(self):
        reserva = Reserva(status=S.PENDIENTE, confirmada_en=date(2026, 9, 1))
        status_machine.aplicar_transicion(reserva, S.CONFIRMADA, ADMIN, self.mensajes, hoy=date(2026, 10, 1))
        self.assertEqual(reserva.confirmada_en, date(2026, 9, 1))

    def test_cancelar_no_sella_fecha(self):
        reserva = Reserva(status=S.PENDIENTE)
        status_machine.aplicar_transicion(reserva, S.CANCELADA, ADMIN, self.mensajes, hoy=date(2026, 10, 1))
        self.assertEqual(reserva.status, S.CANCELADA)
        self.assertIsNone(reserva.confirmada_en)

    def test_rechazo_no_modifica(self):
        reserva = Reserva(status=S.PENDIENTE)
        with self.assertRaises(InvalidTransitionError):
            status_machine.aplicar_transicion(reserva, S.ENTREGADA, ADMIN, self.mensajes)
        self.assertEqual(reserva.status, S.PENDIENTE)
        self.assertIsNone(reserva.entregada_en)


if __name__ == "__main__":
    unittest.main()
