import unittest
from datetime import date
from decimal import Decimal
from unittest import mock

from sqlalchemy import func
from sqlalchemy.exc import OperationalError

from extensions.database import db
from models import HistoricoPeriodo, HistoricoReserva, PeriodoLibras, StatusReserva
from services import archival
from services.errors import InternalError, NotFoundError, ValidationError
from tests.support import AppTestCase, dias


def contar(modelo):
    return db.session.execute(db.select(func.count()).select_from(modelo)).scalar_one()


class TestResumen(unittest.TestCase):
    def test_canceladas_no_cuentan(self):
        class R:
            def __init__(self, usuario_id, libras, status):
                self.usuario_id, self.libras, self.status = usuario_id, Decimal(libras), status

        resumen = archival.calcular_resumen(
            200,
            [
                R(1, "50.50", StatusReserva.ENTREGADA),
                R(1, "10", StatusReserva.PENDIENTE),
                R(2, "30", StatusReserva.ENVIADA),
                R(3, "99", StatusReserva.CANCELADA),
            ],
        )
        self.assertEqual(resumen.libras_reservadas, Decimal("90.50"))
        self.assertEqual(resumen.libras_disponibles, Decimal("109.50"))
        self.assertEqual(resumen.total_reservas, 3)
        self.assertEqual(resumen.total_usuarios, 2)


class TestCerrarPeriodo(AppTestCase):
    def setUp(self):
        super().setUp()
        self.periodo_id = self.crear_periodo(libras_totales=150, fecha_envio=dias(5))
        self.otro_id = self.crear_periodo(libras_totales=80, fecha_envio=dias(20))
        self.crear_reserva(self.ana, self.periodo_id, 40, status=StatusReserva.ENTREGADA)
        self.crear_reserva(self.ana, self.periodo_id, "10.50", observaciones="frágil")
        self.crear_reserva(self.beto, self.periodo_id, 25, status=StatusReserva.CANCELADA)
        self.crear_reserva(self.beto, self.otro_id, 15)

    def test_archiva_con_fidelidad(self):
        historico = archival.cerrar_periodo(self.periodo_id, self.settings)

        self.assertEqual(historico.periodo_id, self.periodo_id)
        self.assertEqual(historico.libras_totales, 150)
        self.assertEqual(historico.libras_reservadas, Decimal("50.50"))
        self.assertEqual(historico.libras_disponibles, Decimal("99.50"))
        self.assertEqual(historico.fecha_envio, dias(5))
        self.assertEqual(historico.total_reservas, 2)
        self.assertEqual(historico.total_usuarios, 1)

        copias = historico.reservas
        self.assertEqual(len(copias), 3)
        self.assertEqual(
            [(c.usuario_nombre, c.libras, c.status) for c in copias],
            [
                ("Ana López", Decimal("40.00"), StatusReserva.ENTREGADA),
                ("Ana López", Decimal("10.50"), StatusReserva.PENDIENTE),
                ("Beto Ruiz", Decimal("25.00"), StatusReserva.CANCELADA),
            ],
        )
        self.assertEqual(copias[1].observaciones, "frágil")
        self.assertEqual(copias[0].usuario_email, "ana@example.com")
        self.assertTrue(all(c.periodo_fecha_envio == dias(5) for c in copias))

        self.assertEqual(self.reservas_de(self.periodo_id), [])
        self.assertFalse(db.session.get(PeriodoLibras, self.periodo_id).activo)

    def test_otros_periodos_intactos(self):
        archival.cerrar_periodo(self.periodo_id, self.settings)
        self.assertEqual(len(self.reservas_de(self.otro_id)), 1)
        self.assertTrue(db.session.get(PeriodoLibras, self.otro_id).activo)

    def test_periodo_vacio(self):
        vacio = self.crear_periodo(libras_totales=60, fecha_envio=dias(30))
        historico = archival.cerrar_periodo(vacio, self.settings)
        self.assertEqual(historico.libras_reservadas, Decimal("0.00"))
        self.assertEqual(historico.libras_disponibles, Decimal("60.00"))
        self.assertEqual(historico.total_reservas, 0)
        self.assertEqual(historico.reservas, [])

    def test_no_se_cierra_dos_veces(self):
        archival.cerrar_periodo(self.periodo_id, self.settings)
        with self.assertRaises(ValidationError):
            archival.cerrar_periodo(self.periodo_id, self.settings)
        self.assertEqual(contar(HistoricoPeriodo), 1)

    def test_periodo_inexistente(self):
        with self.assertRaises(NotFoundError):
            archival.cerrar_periodo(9999, self.settings)

    def test_fallo_a_mitad_hace_rollback(self):
        fallo = OperationalError("DELETE FROM reservas", {}, Exception("disk I/O error"))
        with mock.patch.object(archival, "_borrar_reservas_vivas", side_effect=fallo):
            with self.assertRaises(InternalError) as ctx:
                archival.cerrar_periodo(self.periodo_id, self.settings)

        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.message, self.settings.mensajes.internal_server_error)
        self.assertEqual(contar(HistoricoPeriodo), 0)
        self.assertEqual(contar(HistoricoReserva), 0)
        self.assertEqual(len(self.reservas_de(self.periodo_id)), 3)
        self.assertTrue(db.session.get(PeriodoLibras, self.periodo_id).activo)

        # el cierre puede reintentarse
        historico = archival.cerrar_periodo(self.periodo_id, self.settings)
        self.assertEqual(len(historico.reservas), 3)

    def test_fechas_selladas_se_copian(self):
        reserva_id = self.crear_reserva(self.beto, self.periodo_id, 5, status=StatusReserva.ENVIADA)
        reserva = self.reservas_de(self.periodo_id)[-1]
        self.assertEqual(reserva.id, reserva_id)
        reserva.confirmada_en = date(2026, 10, 1)
        reserva.enviada_en = date(2026, 10, 2)
        db.session.commit()

        historico = archival.cerrar_periodo(self.periodo_id, self.settings)
        copia = next(c for c in historico.reservas if c.reserva_original_id == reserva_id)
        self.assertEqual(copia.confirmada_en, date(2026, 10, 1))
        self.assertEqual(copia.enviada_en, date(2026, 10, 2))
        self.assertIsNone(copia.entregada_en)


if __name__ == "__main__":
    unittest.main()
