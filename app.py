import click
from flask import Flask, jsonify

from config import Settings
from extensions.database import configurar_engine, db
from models import Rol, Usuario
from routes import dashboard, periodos, reservas
from routes.errors import register_error_handlers
from services.errors import ConflictError
from services.identidad import registrar_usuario
from utils.logger import configure_logging, get_logger

logger = get_logger("app")


# ==============================
# FÁBRICA DE LA APLICACIÓN
# ==============================
def create_app(settings: Settings | None = None) -> Flask:
    """
    Construye la app. `settings` se crea una sola vez (por defecto desde el
    entorno / .env) y queda en app.config["SETTINGS"].
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level, settings.log_file)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config["SETTINGS"] = settings
    app.config["SQLALCHEMY_DATABASE_URI"] = settings.database_url
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.json.sort_keys = False
    if settings.database_url.startswith("sqlite"):
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {
            "connect_args": {"timeout": settings.sqlite_timeout, "check_same_thread": False},
        }

    db.init_app(app)
    with app.app_context():
        configurar_engine(db.engine)

    app.register_blueprint(periodos.bp)
    app.register_blueprint(reservas.bp)
    app.register_blueprint(dashboard.bp)
    register_error_handlers(app)

    @app.get("/health")
    def health():
        return jsonify({"success": True, "status": "ok"})

    register_commands(app)
    return app


# ==============================
# CLI
# ==============================
def register_commands(app: Flask) -> None:
    @app.cli.command("init-db")
    def init_db():
        """Crea las tablas si no existen."""
        db.create_all()
        click.echo("Tablas creadas.")

    @app.cli.command("crear-admin")
    def crear_admin():
        """Registra el administrador por defecto (ADMIN_NAME / ADMIN_EMAIL)."""
        settings = app.config["SETTINGS"]
        try:
            admin = registrar_usuario(
                settings.admin_nombre, settings.admin_correo, Rol.ADMIN_PRINCIPAL, settings
            )
        except ConflictError:
            admin = db.session.execute(
                db.select(Usuario).where(Usuario.correo == settings.admin_correo.lower())
            ).scalar_one()
            click.echo(f"Admin ya existe: {admin.correo} (id {admin.id})")
            return
        click.echo(f"Admin creado: {admin.correo} (id {admin.id})")


if __name__ == "__main__":
    app = create_app()
    # Crear tablas si no existen (solo desarrollo)
    with app.app_context():
        db.create_all()
    app.run(debug=True)
