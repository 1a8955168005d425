"""
src/tools/exports.py - export run results as JSON and the optimized resume as PDF.

Provides:
- export_json(obj, path): write JSON to file
- export_resume_pdf(resume, path): render an optimized resume to PDF (ReportLab)

Notes:
- JSON export keeps full fidelity of the payload dicts.
- PDF layout is a single-column template: header, summary, experience, education, skills.
"""


import json
from pathlib import Path
from typing import Any, Dict, List, Union
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import ListFlowable, ListItem, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from tools.resume_extraction import ResumeData


# --- JSON ----------------------------------------------------------------------
def export_json(obj: Any, path: Union[str, Path]) -> str:
    """
    Export any serialisable object as JSON.

    Args:
        obj: Python dict/list/primitive
        path: file path for saving

    Returns: path
    """

    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)

    return str(path)


# --- PDF -----------------------------------------------------------------------
def _contact_line(resume: ResumeData) -> str:

    c = resume.contactInfo
    parts = [c.email, c.phone, c.location, c.linkedin, c.github, c.website]

    return " | ".join(escape(p) for p in parts if p)


def _dates(start: str, end: Union[str, None]) -> str:

    return f"{start} - {end or 'Present'}"


def _section(title: str, styles) -> List[Any]:

    return [Spacer(1, 10), Paragraph(f"<b>{escape(title.upper())}</b>", styles["Heading3"])]


def export_resume_pdf(resume: Union[ResumeData, Dict[str, Any]], path: Union[str, Path]) -> str:
    """
    Export an optimized resume to PDF.

    Args:
        resume: ResumeData or a dict in the optimizedResumeData shape
        path: file path for saving

    Returns: path

    Raises:
        pydantic.ValidationError: when a dict does not match the resume shape.
    """

    if not isinstance(resume, ResumeData):
        resume = ResumeData.model_validate(resume)

    doc = SimpleDocTemplate(str(path), pagesize=A4, topMargin=36, bottomMargin=36)
    styles = getSampleStyleSheet()
    elements: List[Any] = []

    elements.append(Paragraph(f"<b>{escape(resume.contactInfo.name)}</b>", styles["Title"]))
    contact = _contact_line(resume)
    if contact:
        elements.append(Paragraph(contact, styles["Normal"]))

    if resume.summary:
        elements += _section("Summary", styles)
        elements.append(Paragraph(escape(resume.summary), styles["Normal"]))

    if resume.experience:
        elements += _section("Experience", styles)
        for exp in resume.experience:
            heading = f"<b>{escape(exp.title)}</b>, {escape(exp.company)}"
            if exp.location:
                heading += f" ({escape(exp.location)})"
            elements.append(Paragraph(heading, styles["Normal"]))
            elements.append(Paragraph(f"<i>{escape(_dates(exp.startDate, exp.endDate))}</i>", styles["Normal"]))
            if exp.description:
                elements.append(Paragraph(escape(exp.description), styles["Normal"]))
            if exp.achievements:
                elements.append(ListFlowable(
                    [ListItem(Paragraph(escape(a), styles["Normal"])) for a in exp.achievements],
                    bulletType="bullet",
                ))
            elements.append(Spacer(1, 6))

    if resume.education:
        elements += _section("Education", styles)
        for edu in resume.education:
            line = f"<b>{escape(edu.degree)}</b>, {escape(edu.institution)}"
            if edu.graduationDate:
                line += f" ({escape(edu.graduationDate)})"
            elements.append(Paragraph(line, styles["Normal"]))

    if resume.skills:
        elements += _section("Skills", styles)
        by_category: Dict[str, List[str]] = {}
        for s in resume.skills:
            by_category.setdefault(s.category or "Other", []).append(s.name)

        data = [[cat, Paragraph(escape(", ".join(names)), styles["Normal"])] for cat, names in by_category.items()]
        table = Table(data, colWidths=[110, 400])
        table.setStyle(TableStyle([
            ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LINEBELOW", (0, 0), (-1, -2), 0.25, colors.lightgrey),
        ]))
        elements.append(table)

    doc.build(elements)

    return str(path)
