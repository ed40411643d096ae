# models/reservas.py
from datetime import datetime

from extensions.database import db
from models.enums import StatusReserva
from models.formato import iso


class Reserva(db.Model):
    __tablename__ = "reservas"

    id = db.Column(db.Integer, primary_key=True)

    usuario_id = db.Column(db.Integer, db.ForeignKey("usuarios.id"), nullable=False, index=True)
    periodo_id = db.Column(db.Integer, db.ForeignKey("periodos.id"), nullable=False, index=True)

    # Libras con 2 decimales
    libras = db.Column(db.Numeric(10, 2), nullable=False)
    fecha = db.Column(db.Date, nullable=False)

    # Destino (estado de la república), texto libre
    estado = db.Column(db.String(100), nullable=False)
    observaciones = db.Column(db.Text)

    status = db.Column(
        db.Enum(StatusReserva, native_enum=False, length=20),
        nullable=False,
        default=StatusReserva.PENDIENTE,
    )

    # Se escriben una sola vez, al entrar al status correspondiente
    confirmada_en = db.Column(db.Date)
    enviada_en = db.Column(db.Date)
    entregada_en = db.Column(db.Date)

    creado_en = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    actualizado_en = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    usuario = db.relationship("Usuario", back_populates="reservas")
    periodo = db.relationship("PeriodoLibras", back_populates="reservas")

    __table_args__ = (
        db.CheckConstraint("libras > 0", name="ck_reservas_libras_positivas"),
        db.Index("idx_reservas_periodo_status", "periodo_id", "status"),
    )

    @property
    def es_terminal(self) -> bool:
        return self.status in (StatusReserva.ENTREGADA, StatusReserva.CANCELADA)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "usuario_id": self.usuario_id,
            "periodo_id": self.periodo_id,
            "libras": f"{self.libras:.2f}",
            "fecha": iso(self.fecha),
            "estado": self.estado,
            "observaciones": self.observaciones,
            "status": self.status.value,
            "confirmada_en": iso(self.confirmada_en),
            "enviada_en": iso(self.enviada_en),
            "entregada_en": iso(self.entregada_en),
            "creado_en": iso(self.creado_en),
            "actualizado_en": iso(self.actualizado_en),
            "usuario": self.usuario.to_resumen() if self.usuario else None,
            "periodo": self.periodo.to_resumen() if self.periodo else None,
        }

    def __repr__(self):
        return f"<Reserva {self.id}: {self.libras} lbs - {self.status.value}>"
