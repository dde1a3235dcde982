from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, flash, redirect, render_template, request, session, url_for
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .api import session as session_store
from .common.web import current_context
from .container import Container, build_container
from .core.constants import SECTION_ROLES
from .core.exceptions import AuthenticationError, AuthorizationError
from .entries.controller import register as register_entries
from .justifications.controller import register as register_justifications
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, (level_name or "INFO").upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates")

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    api_config = getattr(settings, "API_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["ITEMS_PER_PAGE"] = int(getattr(settings, "ITEMS_PER_PAGE", 5))
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", 7)))

    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info("settings=%s api=%s", settings_module, api_config.get("base_url"))

    container = container or build_container(api_config=api_config)

    @app.errorhandler(AuthenticationError)
    def _session_expired(e: AuthenticationError):
        # The action is not replayed after logging in again.
        session_store.clear(session)
        flash(str(e) or "Sesión expirada, inicia sesión de nuevo", "warning")
        return redirect(url_for("login"))

    @app.errorhandler(AuthorizationError)
    def _forbidden(e: AuthorizationError):
        logger.info("forbidden on %s %s: %s", request.method, request.path, e)
        flash(str(e), "danger")
        return render_template("403.html", ctx=current_context()), 403

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("unhandled error on %s %s", request.method, request.path)
        message = "Error del sistema"
        if app.config["DEBUG"]:
            message = f"{message}: {e}"
        flash(message, "danger")
        if request.endpoint == "home":
            return render_template("error.html", ctx=current_context()), 500
        return redirect(url_for("home"))

    @app.context_processor
    def _navigation():
        ctx = current_context()
        sections = [s for s, roles in SECTION_ROLES.items() if ctx is not None and ctx.role in roles]
        return {"nav_sections": sections}

    register_users(app, container)
    register_students(app, container)
    register_justifications(app, container)
    register_entries(app, container)

    return app
