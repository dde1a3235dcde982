"""Export the filtered justification list to PDF without the web UI.

Run from the repo root: ``python -m scripts.export_justifications --fecha mes``.
Credentials come from ``SCHOOL_API_USER`` / ``SCHOOL_API_PASSWORD`` (a ``.env``
file works too).
"""

from __future__ import annotations

import argparse
import importlib
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from config import get_settings_module

from src.school_admin.school_admin.api.session import SessionContext
from src.school_admin.school_admin.common.filters import apply_filters
from src.school_admin.school_admin.container import Container, build_container
from src.school_admin.school_admin.justifications.service import JustificationFilters
from src.school_admin.school_admin.reports.pdf import render_justification_list

logger = logging.getLogger(__name__)


def export_list(
    container: Container,
    ctx: SessionContext,
    filters: JustificationFilters,
    out_dir: Path,
    *,
    now: Optional[datetime] = None,
) -> Path:
    now = now or datetime.now()
    items = container.justification_service.list_justifications(ctx)
    visible = apply_filters(items, filters.predicates(ctx))
    data = render_justification_list(visible, filters, now=now)

    out_dir.mkdir(parents=True, exist_ok=True)
    out_file = out_dir / f"justificantes_{now.strftime('%Y%m%d_%H%M%S')}.pdf"
    out_file.write_bytes(data)
    logger.info("exported %d justifications to %s", len(visible), out_file)
    return out_file


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--q", default="", help="nombre del alumno")
    parser.add_argument("--tipo", default="")
    parser.add_argument("--departamento", default="")
    parser.add_argument("--grado", default="")
    parser.add_argument("--grupo", default="")
    parser.add_argument("--fecha", default="", help="hoy, ayer, semana, mes o año")
    parser.add_argument("--mios", action="store_true", help="solo los creados por mí")
    parser.add_argument("--out", default=str(Path(__file__).resolve().parents[1] / "reports"))
    return parser.parse_args(argv)


def main(argv=None) -> None:
    load_dotenv(override=False)
    args = _parse_args(argv)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(api_config=settings.API_CONFIG)
    ctx = container.auth_service.login(
        os.getenv("SCHOOL_API_USER", ""),
        os.getenv("SCHOOL_API_PASSWORD", ""),
    )
    filters = JustificationFilters.from_args(
        {
            "q": args.q,
            "tipo": args.tipo,
            "departamento": args.departamento,
            "grado": args.grado,
            "grupo": args.grupo,
            "fecha": args.fecha,
            "mios": "1" if args.mios else "",
        }
    )
    out_file = export_list(container, ctx, filters, Path(args.out))
    print(f"OK: {out_file}")


if __name__ == "__main__":
    main()
