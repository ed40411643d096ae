"""
services/planner.py
Planificador de asignación de libras entre periodos.

Dos pasos separados:
  1. planificar()     función pura: candidatos -> PlanAsignacion o error
  2. confirmar_plan() crea las reservas del plan (solo si el plan es completo)

Un plan que no cubre todas las libras nunca llega a confirmar_plan(), así que
un fallo no deja reservas parciales.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from extensions.database import db
from models import Reserva, StatusReserva
from services.errors import CapacityExceededError, ValidationError
from utils.validators import redondear_libras

# Por debajo de esto un periodo se considera lleno
MIN_ASIGNACION = Decimal("0.01")


@dataclass(frozen=True)
class CapacidadPeriodo:
    periodo_id: int
    fecha_envio: date
    disponibles: Decimal


@dataclass(frozen=True)
class EntradaPlan:
    periodo_id: int
    fecha_envio: date
    libras: Decimal
    fecha: date


@dataclass(frozen=True)
class PlanAsignacion:
    libras_solicitadas: Decimal
    entradas: list[EntradaPlan] = field(default_factory=list)

    @property
    def dividido(self) -> bool:
        return len(self.entradas) > 1

    def describir(self) -> str:
        detalles = ", ".join(
            f"{e.libras:.2f} lbs en periodo {e.fecha_envio.isoformat()}" for e in self.entradas
        )
        return f"Reserva dividida en {len(self.entradas)} periodos: {detalles}"


def planificar(
    libras: Decimal,
    fecha: date,
    candidatos: list[CapacidadPeriodo],
    sin_periodos_msg: str = "No hay periodos activos disponibles para esta fecha",
) -> PlanAsignacion:
    """
    Reparte `libras` de forma voraz, del periodo más próximo al más lejano.

    `candidatos` ya viene ordenado por fecha_envio ascendente. La primera
    porción conserva la fecha pedida si cae en el primer candidato; las demás
    llevan la fecha de envío de su periodo.
    """
    if not candidatos:
        raise ValidationError(sin_periodos_msg)

    libras = redondear_libras(libras)
    restantes = libras
    primer_periodo_id = candidatos[0].periodo_id
    entradas: list[EntradaPlan] = []

    for candidato in candidatos:
        if restantes <= 0:
            break
        disponibles = redondear_libras(candidato.disponibles)
        if disponibles < MIN_ASIGNACION:
            continue

        porcion = min(restantes, disponibles)
        conserva_fecha = not entradas and candidato.periodo_id == primer_periodo_id
        entradas.append(
            EntradaPlan(
                periodo_id=candidato.periodo_id,
                fecha_envio=candidato.fecha_envio,
                libras=porcion,
                fecha=fecha if conserva_fecha else candidato.fecha_envio,
            )
        )
        restantes -= porcion

    if restantes > 0:
        satisfacible = libras - restantes
        raise CapacityExceededError(
            f"No hay suficientes libras disponibles. Se pueden reservar máximo "
            f"{satisfacible:.2f} lbs distribuidas entre los periodos activos. "
            f"Faltan {restantes:.2f} lbs por asignar.",
            satisfacible=satisfacible,
            faltante=restantes,
        )

    return PlanAsignacion(libras_solicitadas=libras, entradas=entradas)


def _observaciones_parte(observaciones: str | None, indice: int, total: int) -> str | None:
    if indice == 0:
        return observaciones or None
    prefijo = f"Reserva dividida - Parte {indice + 1} de {total}."
    return f"{prefijo} {observaciones}" if observaciones else prefijo


def confirmar_plan(
    plan: PlanAsignacion,
    usuario_id: int,
    estado: str,
    observaciones: str | None = None,
) -> list[Reserva]:
    """Inserta una Reserva PENDIENTE por entrada del plan (sin commit)."""
    total = len(plan.entradas)
    reservas = []
    for indice, entrada in enumerate(plan.entradas):
        reserva = Reserva(
            usuario_id=usuario_id,
            periodo_id=entrada.periodo_id,
            libras=entrada.libras,
            fecha=entrada.fecha,
            estado=estado,
            observaciones=_observaciones_parte(observaciones, indice, total),
            status=StatusReserva.PENDIENTE,
        )
        db.session.add(reserva)
        reservas.append(reserva)
    db.session.flush()
    return reservas
