from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..api.session import SessionContext
from ..common.filters import apply_filters
from ..common.list_controller import ListController
from ..common.web import current_context, login_required, page_from_request, section_required
from ..container import Container
from ..core.constants import SECTION_ROLES
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, RemoteServiceError, ValidationError
from .service import UserFilters

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def profiles(ctx: SessionContext) -> ListController:
        svc = container.user_service
        return ListController(
            fetch=lambda: svc.list_profiles(ctx),
            load_error="Error al cargar los usuarios.",
            create=lambda data: svc.create_profile(ctx, **data),
            update=lambda user_id, data: svc.update_profile(ctx, user_id, **data),
            delete=lambda user_id: svc.delete_profile(ctx, user_id),
        )

    def _form_data() -> dict:
        return {
            "name": request.form.get("nombre", ""),
            "password": request.form.get("password", ""),
            "role": request.form.get("rol", ""),
        }

    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if current_context() is not None:
            return redirect(url_for("home"))

        if request.method == "POST":
            name = request.form.get("nombre", "")
            try:
                ctx = container.auth_service.login(name, request.form.get("contrasena", ""))
                session.permanent = True
                container.auth_service.start(session, ctx)
                return redirect(url_for("home"))
            except (ValidationError, AuthenticationError, AuthorizationError) as e:
                logger.info("login rejected for %r: %s", name, e)
                flash(str(e), "danger")
            except RemoteServiceError as e:
                logger.warning("login unavailable: %s", e)
                flash(str(e) or "Error al iniciar sesión", "danger")
            return render_template("login.html", nombre=name)

        return render_template("login.html", nombre="")

    @app.route("/logout", endpoint="logout")
    def logout():
        container.auth_service.logout(session)
        flash("Sesión cerrada.", "info")
        return redirect(url_for("login"))

    @app.route("/", endpoint="home")
    @login_required
    def home(ctx: SessionContext):
        sections = [name for name, roles in SECTION_ROLES.items() if ctx.role in roles]
        return render_template("home.html", ctx=ctx, sections=sections)

    @app.route("/usuarios", endpoint="users")
    @section_required("users")
    def users(ctx: SessionContext):
        lc = profiles(ctx)
        lc.load()
        filters = UserFilters.from_args(request.args)
        visible = apply_filters(lc.items, filters.predicates())
        page, pages = page_from_request(visible, app.config["ITEMS_PER_PAGE"])
        return render_template(
            "users/list.html",
            ctx=ctx,
            lc=lc,
            page=page,
            pages=pages,
            filters=filters,
            roles=list(Role),
        )

    @app.route("/usuarios/nuevo", methods=["GET", "POST"], endpoint="new_user")
    @section_required("users")
    def new_user(ctx: SessionContext):
        form = {"name": "", "role": Role.MAESTRO.value}
        if request.method == "POST":
            data = _form_data()
            form = {"name": data["name"], "role": data["role"]}
            try:
                lc = profiles(ctx)
                if lc.create(data, error="Error al crear usuario"):
                    flash("Perfil creado.", "success")
                    return redirect(url_for("users"))
                flash(lc.error, "danger")
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")

        return render_template("users/form.html", ctx=ctx, form=form, roles=list(Role), editing=False)

    @app.route("/usuarios/<int:user_id>/editar", methods=["GET", "POST"], endpoint="edit_user")
    @section_required("users")
    def edit_user(ctx: SessionContext, user_id: int):
        lc = profiles(ctx)
        if request.method == "POST":
            data = _form_data()
            try:
                if lc.update(user_id, data, error="Error al actualizar usuario"):
                    flash("Perfil actualizado.", "success")
                    return redirect(url_for("users"))
                flash(lc.error, "danger")
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")
            form = {"name": data["name"], "role": data["role"]}
        else:
            lc.load()
            if lc.failed:
                flash(lc.error, "danger")
                return redirect(url_for("users"))
            profile = next((u for u in lc.items if u.user_id == user_id), None)
            if profile is None:
                flash("El usuario no existe.", "warning")
                return redirect(url_for("users"))
            # The current password is never sent back to the browser.
            form = {"name": profile.name, "role": profile.role.value}

        return render_template("users/form.html", ctx=ctx, form=form, roles=list(Role), editing=True, user_id=user_id)

    @app.route("/usuarios/<int:user_id>/eliminar", methods=["GET", "POST"], endpoint="delete_user")
    @section_required("users")
    def delete_user(ctx: SessionContext, user_id: int):
        if request.method == "GET":
            return render_template(
                "confirm_delete.html",
                ctx=ctx,
                message="¿Estás seguro de que deseas eliminar este usuario?",
                cancel_url=url_for("users"),
            )

        lc = profiles(ctx)
        try:
            if lc.delete(user_id, confirmed=request.form.get("confirm") == "yes", error="Error al eliminar usuario"):
                flash("Usuario eliminado.", "success")
            else:
                flash(lc.error, "danger")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        return redirect(url_for("users"))
