# models/formato.py


def iso(valor):
    """Fecha/fecha-hora en ISO 8601, o None."""
    return valor.isoformat() if valor else None
