
# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Serialises rendered pages to PDF with the reportlab canvas.
"""

import logging
from pathlib import Path

from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from jobpulse.layout import Link, RenderedDocument, Rule, TextRun

logger = logging.getLogger(__name__)


def _draw_text(pdf: canvas.Canvas, run: TextRun, page_height: float):
    x = run.x * mm
    y = page_height - run.y * mm
    pdf.setFont(run.font, run.size)
    pdf.setFillColor(run.color)

    if run.align == "right":
        pdf.drawRightString(x, y, run.text)
    elif run.align == "justify":
        gaps = run.text.count(" ")
        natural = pdfmetrics.stringWidth(run.text, run.font, run.size)
        # Word spacing is graphics state: scope it to this line only
        pdf.saveState()
        text = pdf.beginText(x, y)
        text.setFont(run.font, run.size)
        if gaps:
            text.setWordSpace(max(0.0, (run.width * mm - natural) / gaps))
        text.textOut(run.text)
        pdf.drawText(text)
        pdf.restoreState()
    else:
        pdf.drawString(x, y, run.text)


def write_pdf(document: RenderedDocument, target) -> None:
    """
    Writes `document` to `target` (a path or a binary file object).
    Each rendered page becomes one PDF page.
    """
    page_width = document.geometry.width * mm
    page_height = document.geometry.height * mm
    pdf = canvas.Canvas(target, pagesize=(page_width, page_height))

    for page in document.pages:
        for op in page.ops:
            if isinstance(op, TextRun):
                _draw_text(pdf, op, page_height)
            elif isinstance(op, Rule):
                pdf.setStrokeColor(op.color)
                pdf.setLineWidth(op.line_width * mm)
                y = page_height - op.y * mm
                pdf.line(op.x1 * mm, y, op.x2 * mm, y)
            elif isinstance(op, Link):
                x1 = op.x * mm
                y1 = page_height - (op.y + op.height) * mm
                pdf.linkURL(op.url, (x1, y1, x1 + op.width * mm, y1 + op.height * mm), relative=0)
        pdf.showPage()

    pdf.save()


def save_document(document: RenderedDocument, output_dir) -> Path:
    """Writes the document under its own file name and returns the path."""
    output_dir = Path(output_dir)
    if not output_dir.exists():
        output_dir.mkdir(parents=True)
        logger.info(f"Created output directory: {output_dir}")

    path = output_dir / document.filename
    write_pdf(document, str(path))
    logger.info(f"PDF generated successfully: {path} ({document.page_count} page(s))")
    return path
