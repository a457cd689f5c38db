from typing import Optional

from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt


def set_cell_text(
        cell,
        text: str,
        bold: bool = False,
        align: Optional[WD_ALIGN_PARAGRAPH] = None,
        size: Optional[float] = None,
) -> None:
    """
    Replace the text of a python-docx table cell with a single run.
    """
    p = cell.paragraphs[0]
    for run in p.runs:
        run.text = ""
    run = p.add_run(text)
    run.bold = bold
    if size:
        run.font.size = Pt(size)
    if align is not None:
        p.alignment = align


def add_label_value(doc, label: str, value: str, align: Optional[WD_ALIGN_PARAGRAPH] = None):
    """Paragraph with a bold label followed by a plain value."""
    p = doc.add_paragraph()
    p.add_run(f"{label} ").bold = True
    p.add_run(value)
    if align is not None:
        p.alignment = align
    return p
