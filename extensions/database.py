"""
extensions/database.py
Instancia de Flask-SQLAlchemy y unidad de trabajo transaccional.
"""

from __future__ import annotations

from contextlib import contextmanager

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event

db = SQLAlchemy()


@contextmanager
def unidad_de_trabajo():
    """
    Ejecuta el bloque como una sola transacción.
    - commit si el bloque termina bien
    - rollback ante cualquier excepción (y la vuelve a lanzar)
    """
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def _sqlite_on_connect(dbapi_connection, connection_record):
    # pysqlite no debe emitir su propio BEGIN; lo hacemos en _sqlite_on_begin
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _sqlite_on_begin(conn):
    # BEGIN IMMEDIATE toma el lock de escritura al abrir la transacción:
    # dos escritores nunca leen la misma capacidad a la vez.
    conn.exec_driver_sql("BEGIN IMMEDIATE")


def configurar_engine(engine) -> None:
    """Ajustes por dialecto; llamar antes de abrir la primera conexión."""
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _sqlite_on_connect)
        event.listen(engine, "begin", _sqlite_on_begin)
