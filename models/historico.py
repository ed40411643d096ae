# models/historico.py
"""
Instantáneas inmutables escritas una sola vez al cerrar un periodo.

HistoricoReserva copia nombre y correo del dueño (no una FK): el usuario vivo
puede cambiar después del archivado.
"""
from datetime import datetime

from extensions.database import db
from models.enums import StatusReserva
from models.formato import iso


class HistoricoPeriodo(db.Model):
    __tablename__ = "historico_periodos"

    id = db.Column(db.Integer, primary_key=True)
    periodo_id = db.Column(db.Integer, nullable=False, index=True)

    libras_totales = db.Column(db.Integer, nullable=False)
    libras_reservadas = db.Column(db.Numeric(12, 2), nullable=False)
    libras_disponibles = db.Column(db.Numeric(12, 2), nullable=False)
    fecha_envio = db.Column(db.Date, nullable=False)

    total_reservas = db.Column(db.Integer, nullable=False)
    total_usuarios = db.Column(db.Integer, nullable=False)

    fecha_archivado = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    reservas = db.relationship(
        "HistoricoReserva",
        back_populates="historico_periodo",
        order_by="HistoricoReserva.id",
    )

    @property
    def porcentaje_ocupacion(self) -> float:
        if not self.libras_totales:
            return 0.0
        return round(float(self.libras_reservadas) / self.libras_totales * 100, 2)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "periodo_id": self.periodo_id,
            "libras_totales": self.libras_totales,
            "libras_reservadas": f"{self.libras_reservadas:.2f}",
            "libras_disponibles": f"{self.libras_disponibles:.2f}",
            "porcentaje_ocupacion": self.porcentaje_ocupacion,
            "fecha_envio": iso(self.fecha_envio),
            "total_reservas": self.total_reservas,
            "total_usuarios": self.total_usuarios,
            "fecha_archivado": iso(self.fecha_archivado),
        }


class HistoricoReserva(db.Model):
    __tablename__ = "historico_reservas"

    id = db.Column(db.Integer, primary_key=True)
    historico_periodo_id = db.Column(
        db.Integer, db.ForeignKey("historico_periodos.id"), nullable=False, index=True
    )
    reserva_original_id = db.Column(db.Integer, nullable=False)

    usuario_id = db.Column(db.Integer, nullable=False, index=True)
    usuario_nombre = db.Column(db.String(120), nullable=False)
    usuario_email = db.Column(db.String(120), nullable=False)

    libras = db.Column(db.Numeric(10, 2), nullable=False)
    fecha = db.Column(db.Date, nullable=False)
    estado = db.Column(db.String(100), nullable=False)
    observaciones = db.Column(db.Text)
    status = db.Column(db.Enum(StatusReserva, native_enum=False, length=20), nullable=False)

    confirmada_en = db.Column(db.Date)
    enviada_en = db.Column(db.Date)
    entregada_en = db.Column(db.Date)

    periodo_fecha_envio = db.Column(db.Date, nullable=False)
    fecha_archivado = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    historico_periodo = db.relationship("HistoricoPeriodo", back_populates="reservas")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "historico_periodo_id": self.historico_periodo_id,
            "reserva_original_id": self.reserva_original_id,
            "usuario_id": self.usuario_id,
            "usuario_nombre": self.usuario_nombre,
            "usuario_email": self.usuario_email,
            "libras": f"{self.libras:.2f}",
            "fecha": iso(self.fecha),
            "estado": self.estado,
            "observaciones": self.observaciones,
            "status": self.status.value,
            "confirmada_en": iso(self.confirmada_en),
            "enviada_en": iso(self.enviada_en),
            "entregada_en": iso(self.entregada_en),
            "periodo_fecha_envio": iso(self.periodo_fecha_envio),
            "fecha_archivado": iso(self.fecha_archivado),
        }
