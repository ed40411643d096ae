# routes/errors.py
from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from services.errors import AppError
from utils.logger import get_logger

logger = get_logger("http")


def register_error_handlers(app):
    mensajes = app.config["SETTINGS"].mensajes

    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        if err.status_code >= 500:
            logger.error("%s %s -> %s: %s", request.method, request.path, err.kind, err.message)
        else:
            logger.info("%s %s -> %s: %s", request.method, request.path, err.kind, err.message)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        if err.code == 404:
            message = f"Ruta no encontrada: {request.method} {request.path}"
        else:
            message = err.description
        return jsonify({"success": False, "kind": err.name, "message": message}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        # nunca se exponen detalles internos al cliente
        logger.exception("Error no controlado en %s %s", request.method, request.path)
        return jsonify({"success": False, "kind": "Internal", "message": mensajes.internal_server_error}), 500
