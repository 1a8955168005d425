"""
src/context/documents.py

Turn an uploaded resume or job description file into plain text.
"""


from pathlib import Path
from typing import Union

import pdfplumber


TEXT_SUFFIXES = {".txt", ".md", ".markdown"}


def pdf_to_text(path: Path) -> str:
    """Concatenate the text of every page, one blank line between pages."""

    with pdfplumber.open(path) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]

    return "\n\n".join(p.strip() for p in pages if p.strip())


def load_document_text(path: Union[str, Path]) -> str:

    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Document not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".pdf":
        text = pdf_to_text(path)
    elif suffix in TEXT_SUFFIXES:
        text = path.read_text(encoding="utf-8")
    else:
        raise ValueError(f"Unsupported document type '{suffix}' (expected .pdf, .txt or .md)")

    # Sanity check
    if not text.strip():
        raise ValueError(f"No text could be extracted from {path.name}")

    return text.strip()
