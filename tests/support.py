"""
Base común de las pruebas: app Flask sobre un SQLite temporal.
"""

import os
import tempfile
import unittest
from datetime import date, timedelta
from decimal import Decimal

from app import create_app
from config import Settings
from extensions.database import db
from models import PeriodoLibras, Reserva, Rol, StatusReserva, Usuario
from services.identidad import Actor

HOY = date(2026, 10, 18)


def dias(n: int) -> date:
    return HOY + timedelta(days=n)


class AppTestCase(unittest.TestCase):
    """Cada test arranca con una base vacía y un admin + dos usuarios."""

    def setUp(self):
        fd, self.db_path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        self.settings = Settings.from_env().with_overrides(
            database_url=f"sqlite:///{self.db_path}",
            log_level="WARNING",
            log_file=None,
            admin_correo="admin@paqueteria.com",
        )
        self.app = create_app(self.settings)
        self.app.config["TESTING"] = True
        self.ctx = self.app.app_context()
        self.ctx.push()
        db.create_all()

        self.admin = self.crear_usuario("Admin Principal", "admin@paqueteria.com", Rol.ADMIN_PRINCIPAL)
        self.ana = self.crear_usuario("Ana López", "ana@example.com")
        self.beto = self.crear_usuario("Beto Ruiz", "beto@example.com")
        self.client = self.app.test_client()

    def tearDown(self):
        db.session.remove()
        db.engine.dispose()
        self.ctx.pop()
        os.unlink(self.db_path)

    # ---------- fábricas ----------

    def crear_usuario(self, nombre, correo, rol=Rol.USUARIO) -> Actor:
        usuario = Usuario(nombre=nombre, correo=correo, rol=rol, activo=True)
        db.session.add(usuario)
        db.session.flush()
        actor = Actor(id=usuario.id, rol=rol)
        db.session.commit()
        return actor

    def crear_periodo(self, libras_totales=100, fecha_envio=None, activo=True) -> int:
        periodo = PeriodoLibras(
            libras_totales=libras_totales,
            fecha_envio=fecha_envio or dias(10),
            activo=activo,
        )
        db.session.add(periodo)
        db.session.flush()
        periodo_id = periodo.id
        db.session.commit()
        return periodo_id

    def crear_reserva(self, usuario: Actor, periodo_id, libras, status=StatusReserva.PENDIENTE,
                      estado="Jalisco", fecha=None, observaciones=None) -> int:
        reserva = Reserva(
            usuario_id=usuario.id,
            periodo_id=periodo_id,
            libras=Decimal(str(libras)),
            fecha=fecha or HOY,
            estado=estado,
            observaciones=observaciones,
            status=status,
        )
        db.session.add(reserva)
        db.session.flush()
        reserva_id = reserva.id
        db.session.commit()
        return reserva_id

    # ---------- HTTP ----------

    @staticmethod
    def headers(actor: Actor) -> dict:
        return {"X-Usuario-Id": str(actor.id), "X-Usuario-Rol": actor.rol.value}

    def reservas_de(self, periodo_id):
        db.session.expire_all()
        return list(
            db.session.execute(
                db.select(Reserva).where(Reserva.periodo_id == periodo_id).order_by(Reserva.id)
            ).scalars()
        )
