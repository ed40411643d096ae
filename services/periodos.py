"""
services/periodos.py
Operaciones sobre periodos de libras (solo administradores, salvo consultas
de periodos activos).
"""

from __future__ import annotations

from datetime import date

from config import Settings
from extensions.database import db, unidad_de_trabajo
from models import HistoricoPeriodo, PeriodoLibras
from services import archival, ledger
from services.errors import NotFoundError, ValidationError
from utils.logger import get_logger
from utils.validators import parse_entero_positivo, parse_fecha

logger = get_logger("periodos")


def _con_capacidad(periodo: PeriodoLibras) -> dict:
    comprometidas = ledger.libras_comprometidas(periodo.id)
    disponibles = periodo.libras_totales - comprometidas
    data = periodo.to_dict()
    data.update(
        libras_reservadas=f"{comprometidas:.2f}",
        libras_disponibles=f"{disponibles:.2f}",
        porcentaje_ocupacion=round(float(comprometidas) / periodo.libras_totales * 100, 2),
    )
    return data


def _obtener(periodo_id: int, settings: Settings) -> PeriodoLibras:
    periodo = db.session.get(PeriodoLibras, periodo_id)
    if periodo is None:
        raise NotFoundError(settings.mensajes.periodo_not_found)
    return periodo


def crear_periodo(datos: dict, settings: Settings, hoy: date | None = None) -> dict:
    libras_totales = datos.get("libras_totales")
    if libras_totales is None:
        libras_totales = settings.default_libras_totales
    libras_totales = parse_entero_positivo(libras_totales, "libras_totales")
    fecha_envio = parse_fecha(datos.get("fecha_envio"), "fecha_envio")
    if fecha_envio < (hoy or date.today()):
        raise ValidationError(
            settings.mensajes.periodo_fecha_pasada,
            errors={"fecha_envio": [settings.mensajes.periodo_fecha_pasada]},
        )

    with unidad_de_trabajo():
        periodo = PeriodoLibras(libras_totales=libras_totales, fecha_envio=fecha_envio, activo=True)
        db.session.add(periodo)

    logger.info("Periodo %s creado: %s lbs, envío %s", periodo.id, libras_totales, fecha_envio)
    return _con_capacidad(periodo)


def listar_periodos(settings: Settings, page: int, limit: int, activo: bool | None = None):
    stmt = db.select(PeriodoLibras).order_by(PeriodoLibras.fecha_envio.desc(), PeriodoLibras.id.desc())
    if activo is not None:
        stmt = stmt.where(PeriodoLibras.activo.is_(activo))
    return db.paginate(stmt, page=page, per_page=limit, max_per_page=settings.max_limit, error_out=False)


def listar_activos() -> list[dict]:
    """Periodos abiertos ordenados por fecha de envío, con su capacidad restante."""
    periodos = db.session.execute(
        db.select(PeriodoLibras)
        .where(PeriodoLibras.activo.is_(True))
        .order_by(PeriodoLibras.fecha_envio, PeriodoLibras.id)
    ).scalars()
    return [_con_capacidad(p) for p in periodos]


def obtener_periodo(periodo_id: int, settings: Settings) -> dict:
    return _con_capacidad(_obtener(periodo_id, settings))


def actualizar_periodo(periodo_id: int, datos: dict, settings: Settings) -> dict:
    cambios = {}
    if datos.get("libras_totales") is not None:
        cambios["libras_totales"] = parse_entero_positivo(datos["libras_totales"], "libras_totales")
    if datos.get("fecha_envio") is not None:
        cambios["fecha_envio"] = parse_fecha(datos["fecha_envio"], "fecha_envio")

    with unidad_de_trabajo():
        bloqueados = ledger.bloquear_periodos([periodo_id])
        if not bloqueados:
            raise NotFoundError(settings.mensajes.periodo_not_found)
        periodo = bloqueados[0]
        if not periodo.activo:
            raise ValidationError(settings.mensajes.periodo_cerrado)

        nuevo_total = cambios.get("libras_totales")
        if nuevo_total is not None and nuevo_total < periodo.libras_totales:
            ledger.validar_reduccion(periodo, nuevo_total)

        for campo, valor in cambios.items():
            setattr(periodo, campo, valor)

    logger.info("Periodo %s actualizado: %s", periodo_id, cambios)
    return _con_capacidad(periodo)


def cerrar_periodo(periodo_id: int, settings: Settings) -> HistoricoPeriodo:
    return archival.cerrar_periodo(periodo_id, settings)
