from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import flash, redirect, render_template, request, session, url_for

from ..api.session import SessionContext
from ..core.constants import SECTION_ROLES
from .pagination import paginate, visible_pages


def current_context() -> Optional[SessionContext]:
    return SessionContext.from_mapping(session)


def login_required(view):
    """Rebuild the SessionContext and hand it to the view as ``ctx``."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        ctx = current_context()
        if ctx is None:
            flash("Inicia sesión para continuar.", "warning")
            return redirect(url_for("login"))
        return view(*args, ctx=ctx, **kwargs)

    return wrapper


def section_required(section: str):
    roles = SECTION_ROLES[section]

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            ctx = current_context()
            if ctx is None:
                return redirect(url_for("login"))
            if ctx.role not in roles:
                return render_template("403.html", ctx=ctx), 403
            return view(*args, ctx=ctx, **kwargs)

        return wrapper

    return decorator


def page_from_request(items, default_per_page: int):
    page = request.args.get("page", "1")
    per_page = request.args.get("per_page", str(default_per_page))
    p = paginate(
        items,
        int(page) if page.isdigit() else 1,
        int(per_page) if per_page.isdigit() else default_per_page,
    )
    return p, visible_pages(p.page, p.total_pages)


def selected_ids(field: str = "seleccion") -> list[int]:
    return [int(v) for v in request.form.getlist(field) if v.isdigit()]
