"""
services/errors.py
Taxonomía de errores de dominio.

Todo error de regla de negocio se lanza como subclase de AppError y se
convierte en respuesta JSON en routes/errors.py.
"""

from __future__ import annotations

from decimal import Decimal


class AppError(Exception):
    kind = "Error"
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None, errors: dict | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors

    def to_dict(self) -> dict:
        payload = {"success": False, "kind": self.kind, "message": self.message}
        if self.errors:
            payload["errors"] = self.errors
        return payload


class NotFoundError(AppError):
    kind = "NotFound"
    status_code = 404


class ConflictError(AppError):
    kind = "Conflict"
    status_code = 409


class ValidationError(AppError):
    kind = "ValidationError"
    status_code = 400


class UnauthorizedError(AppError):
    kind = "Unauthorized"
    status_code = 401


class PermissionDeniedError(AppError):
    kind = "PermissionDenied"
    status_code = 403


class CapacityExceededError(AppError):
    """No hay libras suficientes; lleva lo satisfacible y lo que falta."""

    kind = "CapacityExceeded"
    status_code = 400

    def __init__(self, message: str, satisfacible: Decimal, faltante: Decimal):
        super().__init__(message)
        self.satisfacible = satisfacible
        self.faltante = faltante

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["data"] = {
            "satisfacible": f"{self.satisfacible:.2f}",
            "faltante": f"{self.faltante:.2f}",
        }
        return payload


class InvalidTransitionError(AppError):
    """
    Transición de status rechazada. motivo:
      TERMINAL      la reserva ya está entregada o cancelada
      SIN_CAMBIO    el status pedido es el actual
      NO_ADYACENTE  el destino no sigue al status actual
      ROL           el rol no puede hacer esa transición
    """

    kind = "InvalidTransition"
    status_code = 400

    TERMINAL = "TERMINAL"
    SIN_CAMBIO = "SIN_CAMBIO"
    NO_ADYACENTE = "NO_ADYACENTE"
    ROL = "ROL"

    def __init__(self, message: str, motivo: str, permitidos: list[str] | None = None):
        super().__init__(message, status_code=403 if motivo == self.ROL else None)
        self.motivo = motivo
        self.permitidos = permitidos or []

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["data"] = {"motivo": self.motivo, "permitidos": self.permitidos}
        return payload


class InternalError(AppError):
    kind = "Internal"
    status_code = 500
