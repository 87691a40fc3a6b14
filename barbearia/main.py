import logging

import click
from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError

from .auth import issue_token
from .config import Config, engine_options
from .errors import AgendaError, StoreUnavailable
from .models import db
# Importa os modelos para que create_all conheça todas as tabelas
from .models.appointment import Appointment  # noqa: F401
from .models.blocked_date import BlockedDate  # noqa: F401
from .models.client import Client  # noqa: F401
from .models.service import Service  # noqa: F401
from .models.status_log import StatusLogEntry  # noqa: F401
from .routes.admin import admin_bp
from .routes.client import client_bp
from .schedule import BusinessHours
from .services import Agenda
from .services.clients import ClientDirectory
from .store import SQLAlchemyStore


def configure_logging(app):
    level = getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    logging.getLogger("barbearia").setLevel(level)
    app.logger.setLevel(level)


def register_error_handlers(app):
    @app.errorhandler(AgendaError)
    def handle_agenda_error(error):
        if isinstance(error, StoreUnavailable):
            app.logger.error("Banco de dados indisponível: %s", error.__cause__ or error)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        app.logger.exception("Erro de banco de dados", exc_info=error)
        return jsonify(StoreUnavailable().to_dict()), StoreUnavailable.status_code


def register_commands(app):
    @app.cli.command("init-db")
    def init_db():
        """Cria as tabelas que ainda não existem."""
        db.create_all()
        click.echo("Tabelas criadas (se não existiam).")

    @app.cli.command("gerar-token")
    @click.argument("nome")
    def generate_token(nome):
        """Gera um token bearer para o administrador NOME."""
        click.echo(issue_token(nome))


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)
    app.config.setdefault(
        "SQLALCHEMY_ENGINE_OPTIONS",
        engine_options(app.config["SQLALCHEMY_DATABASE_URI"], app.config["DB_TIMEOUT"]),
    )

    configure_logging(app)
    db.init_app(app)

    store = SQLAlchemyStore(db)
    app.extensions["agenda"] = Agenda(store, BusinessHours.from_config(app.config))
    app.extensions["clientes"] = ClientDirectory(store)

    # Rotas públicas e administrativas compartilham o prefixo /api
    app.register_blueprint(client_bp, url_prefix="/api")
    app.register_blueprint(admin_bp, url_prefix="/api")

    register_error_handlers(app)
    register_commands(app)

    with app.app_context():
        app.logger.info("Criando tabelas do banco de dados...")
        db.create_all()

    return app


if __name__ == "__main__":
    # Em produção rode com debug=False atrás de um servidor WSGI
    create_app().run(host="0.0.0.0", port=5000, debug=True)
