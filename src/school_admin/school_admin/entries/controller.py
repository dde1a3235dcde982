from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..api.session import SessionContext
from ..common.filters import apply_filters
from ..common.list_controller import ListController
from ..common.web import page_from_request, section_required
from ..container import Container
from ..core.constants import REASON_MAX_LENGTH
from ..core.enums import DatePreset, Direction
from ..core.exceptions import AuthorizationError, ValidationError
from .service import EntryFilters


def register(app: Flask, container: Container) -> None:
    svc = container.entry_service

    def entries(ctx: SessionContext) -> ListController:
        return ListController(
            fetch=lambda: svc.list_entries(ctx),
            load_error="Error al cargar las entradas y salidas.",
            create=lambda data: svc.create(ctx, data),
            update=lambda entry_id, data: svc.update(ctx, entry_id, data),
            delete=lambda entry_id: svc.delete(ctx, entry_id),
        )

    def _input_from_form():
        return svc.build_input(
            visitor_name=request.form.get("nombre_visita", ""),
            reason=request.form.get("motivo", ""),
            direction=request.form.get("tipo", ""),
            student_id=request.form.get("alumno_id") or None,
        )

    def _render_form(ctx: SessionContext, form: dict, **extra):
        return render_template(
            "entries/form.html",
            ctx=ctx,
            form=form,
            directions=[d.value for d in Direction],
            students=container.student_service.picker(ctx),
            reason_max=REASON_MAX_LENGTH,
            **extra,
        )

    @app.route("/entradas-salidas", endpoint="entries")
    @section_required("entries")
    def list_entries(ctx: SessionContext):
        lc = entries(ctx)
        lc.load()
        filters = EntryFilters.from_args(request.args)
        visible = apply_filters(lc.items, filters.predicates())
        page, pages = page_from_request(visible, app.config["ITEMS_PER_PAGE"])
        return render_template(
            "entries/list.html",
            ctx=ctx,
            lc=lc,
            page=page,
            pages=pages,
            filters=filters,
            directions=[d.value for d in Direction],
            presets=list(DatePreset),
            hours=range(24),
        )

    @app.route("/entradas-salidas/nuevo", methods=["GET", "POST"], endpoint="new_entry")
    @section_required("entries")
    def new_entry(ctx: SessionContext):
        form = dict(request.form) if request.method == "POST" else {"tipo": Direction.ENTRADA.value}
        if request.method == "POST":
            lc = entries(ctx)
            try:
                if lc.create(_input_from_form(), error="Error al registrar"):
                    flash("Registro guardado.", "success")
                    return redirect(url_for("entries"))
                flash(lc.error, "danger")
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")
        return _render_form(ctx, form, editing=False)

    @app.route("/entradas-salidas/<int:entry_id>/editar", methods=["GET", "POST"], endpoint="edit_entry")
    @section_required("entries")
    def edit_entry(ctx: SessionContext, entry_id: int):
        lc = entries(ctx)
        if request.method == "POST":
            form = dict(request.form)
            try:
                if lc.update(entry_id, _input_from_form(), error="Error al actualizar registro"):
                    flash("Registro actualizado.", "success")
                    return redirect(url_for("entries"))
                flash(lc.error, "danger")
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")
        else:
            lc.load()
            if lc.failed:
                flash(lc.error, "danger")
                return redirect(url_for("entries"))
            entry = next((e for e in lc.items if e.entry_id == entry_id), None)
            if entry is None:
                flash("El registro no existe.", "warning")
                return redirect(url_for("entries"))
            form = {
                "nombre_visita": entry.visitor_name,
                "motivo": entry.reason,
                "tipo": entry.direction,
                "alumno_id": str(entry.student_id or ""),
            }
        return _render_form(ctx, form, editing=True, entry_id=entry_id)

    @app.route("/entradas-salidas/<int:entry_id>/eliminar", methods=["GET", "POST"], endpoint="delete_entry")
    @section_required("entries")
    def delete_entry(ctx: SessionContext, entry_id: int):
        if request.method == "GET":
            return render_template(
                "confirm_delete.html",
                ctx=ctx,
                message="¿Estás seguro de que deseas eliminar este registro?",
                cancel_url=url_for("entries"),
            )

        lc = entries(ctx)
        try:
            if lc.delete(entry_id, confirmed=request.form.get("confirm") == "yes", error="Error al eliminar registro"):
                flash("Registro eliminado.", "success")
            else:
                flash(lc.error, "danger")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        return redirect(url_for("entries"))
