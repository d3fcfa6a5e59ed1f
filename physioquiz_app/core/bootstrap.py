"""Bootstrap helpers for configuring the Flask application."""

from __future__ import annotations

import logging
from typing import Callable

from flask import Flask
from flask_login import current_user
from sqlalchemy import or_

from .error_handlers import register_error_handlers
from .extensions import csrf_protect, db, login_manager, migrate
from .logging_config import setup_logging
from .module_registry import register_default_modules


def configure_logging(app: Flask) -> None:
    """Configure application logging if no handlers are present."""

    if app.logger.handlers:
        return

    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    app.logger.setLevel(level)
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    app.logger.addHandler(handler)
    app.logger.propagate = False

    if app.config.get("LOG_DIR"):
        setup_logging(
            app,
            log_level=app.config.get("LOG_LEVEL", "INFO"),
            log_dir=app.config["LOG_DIR"],
            json_format=app.config.get("LOG_JSON", False),
        )

    app.logger.info("Flask app logger configured successfully.")


def register_extensions(app: Flask) -> None:
    """Initialize shared extensions with the Flask app instance."""

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf_protect.init_app(app)


def register_context_processors(app: Flask) -> None:
    """Register global template context processors."""

    from ..utils.time_utils import today_str

    @login_manager.user_loader
    def load_user(user_id: str):
        from ..models import User

        return db.session.get(User, int(user_id))

    @app.context_processor
    def inject_user() -> dict[str, object]:
        return {"current_user": current_user}

    @app.context_processor
    def inject_quiz_settings() -> dict[str, Callable[..., str] | int]:
        return {
            "today_str": today_str,
            "realtime_poll_interval_ms": app.config.get("REALTIME_POLL_INTERVAL_MS", 5000),
        }


def register_blueprints(app: Flask) -> None:
    """Register all default blueprints with the app."""

    register_default_modules(app)
    register_error_handlers(app)


def initialize_database(app: Flask) -> None:
    """Create database tables and ensure the default admin exists."""

    from ..models import User

    db.create_all()

    username = app.config.get("ADMIN_USERNAME", "admin")
    admin_user = User.query.filter(
        or_(
            User.user_role == User.ROLE_ADMIN,
            User.username == username,
        )
    ).first()
    if admin_user is None:
        admin = User(username=username, user_role=User.ROLE_ADMIN)
        admin.set_password(app.config.get("ADMIN_PASSWORD", "admin"))
        db.session.add(admin)
        db.session.commit()
        app.logger.info("Created the default admin user '%s'.", username)
    else:
        app.logger.info("Admin user already present, skipping default creation.")
