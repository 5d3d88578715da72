import logging

import click
from flask import Flask, render_template, session
from sqlalchemy.exc import SQLAlchemyError

from config.config import Config
from extensions import db, login_manager, migrate

# Route Imports
from routes.public_routes import public_bp
from routes.auth_routes import auth_bp
from routes.admin_routes import admin_bp

# Model Imports
from models import User, AdminUser, Branch, Semester, ExamType, Paper
from services.auth_service import ADMIN_FLAG
from services.sequencer import RequestSequencer
from utils.seed_data import run_seed, create_admin

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    app.logger.setLevel(level)


def register_commands(app):
    @app.cli.command("seed")
    def seed_command():
        """Insert branches, semesters and exam types."""
        run_seed()
        click.echo("Reference data seeded")

    @app.cli.command("create-admin")
    @click.argument("email")
    @click.argument("password")
    def create_admin_command(email, password):
        """Create a login for EMAIL and add it to the admin allow-list."""
        create_admin(email, password)
        click.echo(f"Admin {email} ready")


def create_app(config_class=Config, test_config=None):
    app = Flask(__name__)
    app.config.from_object(config_class)
    if test_config:
        app.config.update(test_config)

    configure_logging(app)

    # Initialize Extensions
    db.init_app(app)
    migrate.init_app(app, db)

    login_manager.init_app(app)
    login_manager.login_view = "auth.login"
    login_manager.login_message_category = "warning"

    @login_manager.user_loader
    def load_user(user_id):
        try:
            return db.session.get(User, int(user_id))
        except SQLAlchemyError:
            db.session.rollback()
            app.logger.error("Could not load user from session", exc_info=True)
            return None

    @app.context_processor
    def inject_admin_hint():
        # Only decides whether the navbar shows a dashboard link
        return {"admin_hint": bool(session.get(ADMIN_FLAG))}

    @app.errorhandler(404)
    def not_found(error):
        return render_template("not_found.html"), 404

    # Register Blueprints
    app.register_blueprint(public_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)

    # Latest search sequence number seen per client
    app.extensions["search_sequencer"] = RequestSequencer(app.config["SEARCH_SEQUENCER_SIZE"])

    register_commands(app)

    return app

if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=True)
