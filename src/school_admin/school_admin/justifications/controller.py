from __future__ import annotations

import io
import logging

from flask import Flask, flash, redirect, render_template, request, send_file, url_for

from ..api.session import SessionContext
from ..common.filters import apply_filters
from ..common.list_controller import ListController
from ..common.web import page_from_request, section_required
from ..container import Container
from ..core.constants import GRADES, OVERLAP_MESSAGE
from ..core.enums import DatePreset, JustificationType, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..reports.pdf import render_justification_list, render_justification_slip, slip_filename
from .service import DATE_FIELDS, JustificationFilters, draft_from_form

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    svc = container.justification_service

    def justifications(ctx: SessionContext) -> ListController:
        return ListController(
            fetch=lambda: svc.list_justifications(ctx),
            load_error="Error al cargar los justificantes.",
            delete=lambda justification_id: svc.delete(ctx, justification_id),
        )

    def _render_form(ctx: SessionContext, lc: ListController, form: dict, **extra):
        return render_template(
            "justifications/form.html",
            ctx=ctx,
            form=form,
            kinds=[k.value for k in JustificationType],
            students=container.student_service.picker(ctx),
            monthly=svc.monthly_counts(lc.items),
            **extra,
        )

    def _save(ctx: SessionContext, lc: ListController, form: dict, justification_id=None):
        """Validate and send one justification; returns a response on success."""
        draft = draft_from_form(form)
        existing = list(lc.items)

        def action():
            if justification_id is None:
                svc.create(ctx, draft, existing)
            else:
                svc.update(ctx, justification_id, draft, existing)

        if justification_id is None:
            error, done = "Error al crear justificante", "Justificante creado."
        else:
            error, done = "Error al actualizar justificante", "Justificante actualizado."
        try:
            if lc.run(action, error=error):
                flash(done, "success")
                return redirect(url_for("justifications"))
            flash(lc.error, "danger")
        except ValidationError as e:
            flash(str(e), "danger")
            if str(e) == OVERLAP_MESSAGE:
                for key in DATE_FIELDS:
                    form.pop(key, None)
        return None

    @app.route("/justificantes", endpoint="justifications")
    @section_required("justifications")
    def list_justifications(ctx: SessionContext):
        lc = justifications(ctx)
        lc.load()
        filters = JustificationFilters.from_args(request.args)
        visible = apply_filters(lc.items, filters.predicates(ctx))
        page, pages = page_from_request(visible, app.config["ITEMS_PER_PAGE"])
        return render_template(
            "justifications/list.html",
            ctx=ctx,
            lc=lc,
            page=page,
            pages=pages,
            filters=filters,
            kinds=[k.value for k in JustificationType],
            departments=sorted({r.department for r in Role}),
            grades=GRADES,
            presets=list(DatePreset),
        )

    @app.route("/justificantes/nuevo", methods=["GET", "POST"], endpoint="new_justification")
    @section_required("justifications")
    def new_justification(ctx: SessionContext):
        lc = justifications(ctx)
        lc.load()
        form = dict(request.form) if request.method == "POST" else {}
        if request.method == "POST":
            if lc.failed:
                flash(lc.error, "danger")
            else:
                response = _save(ctx, lc, form)
                if response is not None:
                    return response
        return _render_form(ctx, lc, form, editing=False)

    @app.route(
        "/justificantes/<int:justification_id>/editar",
        methods=["GET", "POST"],
        endpoint="edit_justification",
    )
    @section_required("justifications")
    def edit_justification(ctx: SessionContext, justification_id: int):
        lc = justifications(ctx)
        lc.load()
        if lc.failed:
            flash(lc.error, "danger")
            return redirect(url_for("justifications"))
        current = next((j for j in lc.items if j.justification_id == justification_id), None)
        if current is None:
            flash("El justificante no existe.", "warning")
            return redirect(url_for("justifications"))

        if request.method == "POST":
            form = dict(request.form)
            response = _save(ctx, lc, form, justification_id)
            if response is not None:
                return response
        else:
            form = {
                "tipo_justificante": current.kind,
                "alumno_id": str(current.student_id),
                "grupo": current.group,
                "tutor": current.tutor,
                "motivo": current.reason,
                "fecha_inicio": current.start_date.isoformat(),
                "fecha_regreso": current.return_date.isoformat(),
            }
        return _render_form(ctx, lc, form, editing=True, justification_id=justification_id)

    @app.route(
        "/justificantes/<int:justification_id>/eliminar",
        methods=["GET", "POST"],
        endpoint="delete_justification",
    )
    @section_required("justifications")
    def delete_justification(ctx: SessionContext, justification_id: int):
        if request.method == "GET":
            return render_template(
                "confirm_delete.html",
                ctx=ctx,
                message="¿Estás seguro de que deseas eliminar este justificante?",
                cancel_url=url_for("justifications"),
            )

        lc = justifications(ctx)
        try:
            confirmed = request.form.get("confirm") == "yes"
            if lc.delete(justification_id, confirmed=confirmed, error="Error al eliminar justificante"):
                flash("Justificante eliminado.", "success")
            else:
                flash(lc.error, "danger")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        return redirect(url_for("justifications"))

    @app.route("/justificantes/<int:justification_id>/pdf", endpoint="justification_pdf")
    @section_required("justifications")
    def justification_pdf(ctx: SessionContext, justification_id: int):
        lc = justifications(ctx)
        lc.load()
        current = next((j for j in lc.items if j.justification_id == justification_id), None)
        if current is None:
            flash(lc.error or "El justificante no existe.", "warning")
            return redirect(url_for("justifications"))
        return send_file(
            io.BytesIO(render_justification_slip(current)),
            mimetype="application/pdf",
            as_attachment=True,
            download_name=slip_filename(current),
        )

    @app.route("/justificantes/lista.pdf", endpoint="justification_list_pdf")
    @section_required("justifications")
    def justification_list_pdf(ctx: SessionContext):
        filters = JustificationFilters.from_args(request.args)
        lc = justifications(ctx)
        lc.load()
        if lc.failed:
            flash(lc.error, "danger")
            return redirect(url_for("justifications", **request.args))
        visible = apply_filters(lc.items, filters.predicates(ctx))
        try:
            data = render_justification_list(visible, filters)
        except ValidationError as e:
            flash(str(e), "warning")
            return redirect(url_for("justifications", **request.args))
        logger.info("justification list printed by user %s (%d rows)", ctx.user_id, len(visible))
        return send_file(
            io.BytesIO(data),
            mimetype="application/pdf",
            as_attachment=True,
            download_name="lista_justificantes.pdf",
        )
