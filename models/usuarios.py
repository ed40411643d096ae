# models/usuarios.py
from datetime import datetime

from extensions.database import db
from models.enums import Rol


class Usuario(db.Model):
    """Dueño de reservas. Contraseñas y sesiones viven en el servicio de identidad."""

    __tablename__ = "usuarios"

    id = db.Column(db.Integer, primary_key=True)
    nombre = db.Column(db.String(120), nullable=False)
    correo = db.Column(db.String(120), nullable=False, unique=True)
    rol = db.Column(
        db.Enum(Rol, native_enum=False, length=20),
        nullable=False,
        default=Rol.USUARIO,
    )
    activo = db.Column(db.Boolean, nullable=False, default=True)
    creado_en = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    reservas = db.relationship("Reserva", back_populates="usuario")

    def to_resumen(self) -> dict:
        return {"id": self.id, "nombre": self.nombre, "correo": self.correo}

    def __repr__(self):
        return f"<Usuario {self.id}: {self.correo} - {self.rol.value}>"
