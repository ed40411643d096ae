# models/periodos.py
from datetime import datetime

from extensions.database import db


class PeriodoLibras(db.Model):
    __tablename__ = "periodos"

    id = db.Column(db.Integer, primary_key=True)

    libras_totales = db.Column(db.Integer, nullable=False)
    fecha_envio = db.Column(db.Date, nullable=False, index=True)

    # False solo tras archivar; nunca se borra físicamente
    activo = db.Column(db.Boolean, nullable=False, default=True, index=True)

    creado_en = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    actualizado_en = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    reservas = db.relationship("Reserva", back_populates="periodo")

    __table_args__ = (
        db.CheckConstraint("libras_totales > 0", name="ck_periodos_libras_totales_positivas"),
    )

    def to_resumen(self) -> dict:
        return {
            "id": self.id,
            "libras_totales": self.libras_totales,
            "fecha_envio": self.fecha_envio.isoformat(),
        }

    def to_dict(self) -> dict:
        data = self.to_resumen()
        data.update(
            activo=self.activo,
            creado_en=self.creado_en.isoformat() if self.creado_en else None,
            actualizado_en=self.actualizado_en.isoformat() if self.actualizado_en else None,
        )
        return data

    def __repr__(self):
        return f"<PeriodoLibras {self.id}: {self.libras_totales} lbs - {self.fecha_envio}>"
