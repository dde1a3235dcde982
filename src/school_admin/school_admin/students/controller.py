from __future__ import annotations

from datetime import date

from flask import Flask, flash, redirect, render_template, request, url_for

from ..api.session import SessionContext
from ..common.filters import apply_filters
from ..common.list_controller import ListController
from ..common.web import page_from_request, section_required, selected_ids
from ..container import Container
from ..core.constants import GRADES, SHIFT_LETTERS
from ..core.enums import SchoolShift
from ..core.exceptions import AuthorizationError, ValidationError
from .service import StudentFilters


def _enrollment_years() -> list[int]:
    year = date.today().year
    return [year - i for i in range(4)]


def register(app: Flask, container: Container) -> None:
    svc = container.student_service

    def students(ctx: SessionContext) -> ListController:
        return ListController(
            fetch=lambda: svc.list_students(ctx),
            load_error="Error al cargar los alumnos.",
            create=lambda data: svc.create_student(ctx, data),
            update=lambda student_id, data: svc.update_student(ctx, student_id, data),
            delete=lambda student_id: svc.delete_student(ctx, student_id),
        )

    def _choices() -> dict:
        return {
            "grades": GRADES,
            "shift_letters": SHIFT_LETTERS,
            "shifts": [s.value for s in SchoolShift],
            "years": _enrollment_years(),
        }

    def _input_from_form():
        return svc.build_input(
            name=request.form.get("nombre", ""),
            grade=request.form.get("grado", ""),
            letter=request.form.get("grupo", ""),
            shift=request.form.get("turno", ""),
            enrollment_year=request.form.get("ingreso", ""),
        )

    def _back_to_list(filters: StudentFilters):
        args = {
            "q": filters.search,
            "grado": filters.grade,
            "grupo": filters.letter,
            "turno": filters.shift,
        }
        return redirect(url_for("students", **{k: v for k, v in args.items() if v}))

    @app.route("/alumnos", endpoint="students")
    @section_required("students")
    def list_students(ctx: SessionContext):
        lc = students(ctx)
        lc.load()
        filters = StudentFilters.from_args(request.args)
        visible = apply_filters(lc.items, filters.predicates())
        page, pages = page_from_request(visible, app.config["ITEMS_PER_PAGE"])
        return render_template(
            "students/list.html",
            ctx=ctx,
            lc=lc,
            page=page,
            pages=pages,
            filters=filters,
            visible=visible,
            **_choices(),
        )

    @app.route("/alumnos/nuevo", methods=["GET", "POST"], endpoint="new_student")
    @section_required("students")
    def new_student(ctx: SessionContext):
        form = dict(request.form) if request.method == "POST" else {}
        if request.method == "POST":
            try:
                lc = students(ctx)
                if lc.create(_input_from_form(), error="Error al crear alumno"):
                    flash("Alumno creado.", "success")
                    return redirect(url_for("students"))
                flash(lc.error, "danger")
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")
        return render_template("students/form.html", ctx=ctx, form=form, editing=False, **_choices())

    @app.route("/alumnos/<int:student_id>/editar", methods=["GET", "POST"], endpoint="edit_student")
    @section_required("students")
    def edit_student(ctx: SessionContext, student_id: int):
        lc = students(ctx)
        if request.method == "POST":
            form = dict(request.form)
            try:
                if lc.update(student_id, _input_from_form(), error="Error al actualizar alumno"):
                    flash("Alumno actualizado.", "success")
                    return redirect(url_for("students"))
                flash(lc.error, "danger")
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")
        else:
            lc.load()
            if lc.failed:
                flash(lc.error, "danger")
                return redirect(url_for("students"))
            student = next((s for s in lc.items if s.student_id == student_id), None)
            if student is None:
                flash("El alumno no existe.", "warning")
                return redirect(url_for("students"))
            form = {
                "nombre": student.name,
                "grado": student.grade,
                "grupo": student.letter,
                "turno": student.shift,
                "ingreso": str(student.enrollment_year or ""),
            }
        return render_template(
            "students/form.html", ctx=ctx, form=form, editing=True, student_id=student_id, **_choices()
        )

    @app.route("/alumnos/<int:student_id>/eliminar", methods=["GET", "POST"], endpoint="delete_student")
    @section_required("students")
    def delete_student(ctx: SessionContext, student_id: int):
        if request.method == "GET":
            return render_template(
                "confirm_delete.html",
                ctx=ctx,
                message="¿Estás seguro de que deseas eliminar este alumno?",
                cancel_url=url_for("students"),
            )

        lc = students(ctx)
        try:
            if lc.delete(student_id, confirmed=request.form.get("confirm") == "yes", error="Error al eliminar alumno"):
                flash("Alumno eliminado.", "success")
            else:
                flash(lc.error, "danger")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        return redirect(url_for("students"))

    @app.route("/alumnos/masivo", methods=["GET", "POST"], endpoint="bulk_students")
    @section_required("students")
    def bulk_students(ctx: SessionContext):
        form = dict(request.form) if request.method == "POST" else {}
        if request.method == "POST":
            lc = students(ctx)
            names_text = request.form.get("nombres", "")
            try:
                ok = lc.run(
                    lambda: svc.bulk_create(
                        ctx,
                        grade=request.form.get("grado", ""),
                        letter=request.form.get("grupo", ""),
                        shift=request.form.get("turno", ""),
                        enrollment_year=request.form.get("ingreso", ""),
                        names_text=names_text,
                    ),
                    error="Error en alta masiva",
                )
                if ok:
                    added = sum(1 for n in names_text.splitlines() if n.strip())
                    flash(f"Grupo de alumnos agregado con éxito ({added}).", "success")
                    return redirect(url_for("students"))
                flash(lc.error, "danger")
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")
        return render_template("students/bulk.html", ctx=ctx, form=form, **_choices())

    @app.route("/alumnos/grupo/editar", methods=["POST"], endpoint="edit_group")
    @section_required("students")
    def edit_group(ctx: SessionContext):
        filters = StudentFilters.from_args(request.form)
        lc = students(ctx)
        try:
            lc.load()
            if lc.failed:
                flash(lc.error, "danger")
                return _back_to_list(filters)
            visible_ids = [s.student_id for s in apply_filters(lc.items, filters.group_scope().predicates())]
            ok = lc.run(
                lambda: svc.bulk_update_group(
                    ctx,
                    filters=filters,
                    visible_ids=visible_ids,
                    selected_ids=selected_ids(),
                    new_grade=request.form.get("nuevo_grado", ""),
                    new_letter=request.form.get("nuevo_grupo", ""),
                    new_year=request.form.get("nuevo_ingreso", ""),
                ),
                error="Error al editar el grupo.",
            )
            if ok:
                flash("Grupo de alumnos editado con éxito.", "success")
                return redirect(url_for("students"))
            flash(lc.error, "danger")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        return _back_to_list(filters)

    @app.route("/alumnos/grupo/eliminar", methods=["POST"], endpoint="delete_group")
    @section_required("students")
    def delete_group(ctx: SessionContext):
        filters = StudentFilters.from_args(request.form)
        if request.form.get("confirm") != "yes":
            flash("Confirma la eliminación del grupo antes de continuar.", "warning")
            return _back_to_list(filters)

        lc = students(ctx)
        try:
            lc.load()
            if lc.failed:
                flash(lc.error, "danger")
                return _back_to_list(filters)
            visible_ids = [s.student_id for s in apply_filters(lc.items, filters.group_scope().predicates())]
            ok = lc.run(
                lambda: svc.bulk_delete_group(
                    ctx, filters=filters, visible_ids=visible_ids, selected_ids=selected_ids()
                ),
                error="Error al eliminar el grupo.",
            )
            if ok:
                flash("Grupo de alumnos eliminado.", "success")
                return redirect(url_for("students"))
            flash(lc.error, "danger")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        return _back_to_list(filters)
