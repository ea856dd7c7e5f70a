"""ReflectAI application factory and bootstrap."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from flask import Flask

from reflectai.config import config_by_name
from reflectai.core.events.event_bus import event_bus
from reflectai.extensions import init_extensions, jwt, login_manager


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the ReflectAI Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(__name__, instance_path=str(instance_root), instance_relative_config=True)
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)
    instance_root.mkdir(parents=True, exist_ok=True)

    # Normalize relative sqlite paths against the project root
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///") and not db_uri.startswith("sqlite:////"):
        abs_path = project_root / db_uri.replace("sqlite:///", "", 1)
        abs_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{abs_path}"

    init_extensions(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_auth_handlers(app)

    app.extensions["event_bus"] = event_bus
    _register_subscriptions(app)

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    from reflectai.scripts.commands import register_commands

    register_commands(app)

    return app


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from reflectai.core.auth.controllers import auth_bp
    from reflectai.domains.challenges.controllers.challenge_api import (
        badge_api_bp,
        challenge_api_bp,
    )
    from reflectai.domains.chat.controllers.chat_api import chat_api_bp
    from reflectai.domains.checkins.controllers.checkin_api import checkin_api_bp
    from reflectai.domains.goals.controllers.goal_api import activity_api_bp, goal_api_bp
    from reflectai.domains.journal.controllers.journal_api import journal_api_bp
    from reflectai.domains.journal.controllers.stats_api import stats_api_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(journal_api_bp, url_prefix="/api/entries")
    app.register_blueprint(stats_api_bp, url_prefix="/api/stats")
    app.register_blueprint(goal_api_bp, url_prefix="/api/goals")
    app.register_blueprint(activity_api_bp, url_prefix="/api/activities")
    app.register_blueprint(checkin_api_bp, url_prefix="/api/check-ins")
    app.register_blueprint(challenge_api_bp, url_prefix="/api/challenges")
    app.register_blueprint(badge_api_bp, url_prefix="/api/badges")
    app.register_blueprint(chat_api_bp, url_prefix="/api/chatbot")


def _register_subscriptions(app: Flask) -> None:
    """Wire in-process handlers for events delivered by the outbox dispatcher."""
    from reflectai.domains.challenges.services.challenge_service import register_subscriptions

    register_subscriptions(app.extensions["event_bus"])


def _register_error_handlers(app: Flask) -> None:
    """JSON error responses for HTTP, domain and unexpected errors."""
    from werkzeug.exceptions import HTTPException

    from reflectai.core.errors import ReflectError

    @app.errorhandler(ReflectError)
    def _domain_error(exc: ReflectError):
        if exc.status_code >= 500:
            app.logger.warning("Upstream failure: %s", exc.message)
        return exc.to_dict(), exc.status_code

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500


def _register_auth_handlers(app: Flask) -> None:
    """Flask-Login user loader and JWT revocation check."""

    @jwt.token_in_blocklist_loader
    def _token_revoked(_header: dict, payload: dict) -> bool:
        from reflectai.core.auth.auth_service import is_token_revoked

        return is_token_revoked(payload.get("jti", ""))

    @login_manager.user_loader
    def _load_user(user_id: str):
        from reflectai.core.users.services import get_user

        return get_user(int(user_id)) if user_id else None
