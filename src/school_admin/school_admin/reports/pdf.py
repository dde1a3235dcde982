"""Printable justification documents (reportlab)."""
from __future__ import annotations

import io
from datetime import datetime
from typing import Iterable, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..common.datetime_utils import format_dmy, format_long_es, now_local
from ..common.text import normalize
from ..core.exceptions import ValidationError
from ..justifications.model import Justification
from ..justifications.service import JustificationFilters

SCHOOL_HEADER = (
    "SECRETARÍA DE EDUCACIÓN Y CULTURA SUBSECRETARÍA DE EDUCACIÓN BÁSICA",
    "DIRECCIÓN DE EDUCACIÓN SECUNDARIA ESTATAL",
    "ESC. SECUNDARIA NO.22 MIGUEL HIDALGO Y COSTILLA CLAVE 26EES00221, ZONA ESCOLAR 01",
)

SIGNATURE_ROWS = 8

LIST_COLUMNS = ("ID", "Tipo", "Departamento", "Nombre alumno", "Grupo", "Fecha inicio", "Fecha regreso", "Días")


def slip_filename(j: Justification) -> str:
    return f"Justificante_{j.id}.pdf"


def slip_lines(j: Justification) -> list[str]:
    return [
        f"Nombre del alumno(a): {j.student_name}",
        f"Tipo de justificante: {j.kind}",
        f"Departamento: {j.department}",
        f"Tutor: {j.tutor}",
        f"Motivo: {j.reason}",
        f"Fecha de inicio: {j.start_date.strftime('%d-%m-%Y')}",
        f"Fecha de regreso: {j.return_date.strftime('%d-%m-%Y')}",
        f"Dias de justificación: {j.duration_days}",
    ]


def render_justification_slip(j: Justification) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    width, height = A4
    margin = 15 * mm
    y = height - margin

    c.setFont("Helvetica-Bold", 11)
    for line in SCHOOL_HEADER:
        c.drawCentredString(width / 2, y, line)
        y -= 14
    y -= 8
    c.setFont("Helvetica", 11)
    c.drawCentredString(width / 2, y, "JUSTIFICANTE")
    y -= 28

    c.setFont("Helvetica", 10)
    for line in slip_lines(j):
        c.drawString(margin, y, line)
        y -= 18

    y -= 10
    c.drawString(margin, y, "Nombre del maestro (a)")
    c.drawString(margin + 95 * mm, y, "Materia")
    c.drawString(margin + 150 * mm, y, "Firma")
    c.setLineWidth(0.5)
    for _ in range(SIGNATURE_ROWS):
        y -= 28
        c.drawString(margin, y, "Profr(a)")
        c.line(margin + 15 * mm, y - 2, margin + 70 * mm, y - 2)
        c.line(margin + 80 * mm, y - 2, margin + 130 * mm, y - 2)
        c.line(margin + 140 * mm, y - 2, width - margin, y - 2)

    c.showPage()
    c.save()
    return buf.getvalue()


def list_rows(items: Iterable[Justification]) -> list[list[str]]:
    """Table body sorted by student name, accents and case ignored."""
    ordered = sorted(items, key=lambda j: normalize(j.student_name))
    return [
        [
            str(j.id),
            j.kind,
            j.department,
            j.student_name,
            j.group,
            format_dmy(j.start_date),
            format_dmy(j.return_date),
            str(j.duration_days),
        ]
        for j in ordered
    ]


def generated_label(now: datetime) -> str:
    return f"Generado el: {format_long_es(now)}, {now.hour:02d}h"


def render_justification_list(
    items: Iterable[Justification],
    filters: JustificationFilters,
    *,
    now: Optional[datetime] = None,
) -> bytes:
    """Print the filtered list. Printing everything unfiltered is refused."""
    if not filters.is_active():
        raise ValidationError("Aplica al menos un filtro antes de imprimir la lista", fields=("fecha",))

    now = now or now_local()
    styles = getSampleStyleSheet()
    story = [
        Paragraph("Lista de Justificantes", styles["Title"]),
        Paragraph(generated_label(now), styles["Normal"]),
        Paragraph("Filtros: " + (" | ".join(filters.describe()) or "Ninguno"), styles["Normal"]),
        Spacer(1, 6 * mm),
    ]

    table = Table([list(LIST_COLUMNS)] + list_rows(items), repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("GRID", (0, 0), (-1, -1), 0.4, colors.grey),
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2ECC71")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
            ]
        )
    )
    story.append(table)

    buf = io.BytesIO()
    SimpleDocTemplate(buf, pagesize=A4, title="Lista de Justificantes").build(story)
    return buf.getvalue()
