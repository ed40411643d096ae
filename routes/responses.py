# routes/responses.py
from flask import jsonify, request

from services.errors import ValidationError
from utils.validators import normalizar_paginacion, total_paginas


def ok(data=None, message=None, status=200):
    payload = {"success": True}
    if data is not None:
        payload["data"] = data
    if message:
        payload["message"] = message
    return jsonify(payload), status


def paginado(pagina, serializar=lambda item: item.to_dict()):
    """Envuelve un flask_sqlalchemy Pagination en la respuesta de lista."""
    return jsonify(
        {
            "success": True,
            "data": [serializar(item) for item in pagina.items],
            "pagination": {
                "page": pagina.page,
                "limit": pagina.per_page,
                "total": pagina.total,
                "totalPages": total_paginas(pagina.total, pagina.per_page),
            },
        }
    ), 200


def paginacion(settings):
    return normalizar_paginacion(
        request.args.get("page"),
        request.args.get("limit"),
        default_limit=settings.default_limit,
        max_limit=settings.max_limit,
    )


def cuerpo_json() -> dict:
    datos = request.get_json(silent=True)
    if not isinstance(datos, dict):
        raise ValidationError("El cuerpo debe ser un objeto JSON")
    return datos
