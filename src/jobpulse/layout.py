
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
Page geometry, draw instructions and the layout cursor shared by the CV and
cover letter renderers.

Coordinates are millimetres from the top-left corner of the page with `y`
growing downwards; `y` is always a text baseline. Nothing here touches a PDF:
renderers produce pages of draw instructions and `pdf_writer` serialises them.
Pagination is computed ahead of drawing, block by block, top-down, in a
single pass.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from reportlab.lib.colors import Color, HexColor
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

COLOR_PRIMARY = HexColor("#1E3A8A")
COLOR_ACCENT = HexColor("#4F46E5")
COLOR_TEXT = HexColor("#1E293B")
COLOR_SUBTLE = HexColor("#64748B")
COLOR_BLACK = HexColor("#0F172A")
COLOR_RULE = HexColor("#E2E8F0")

# Line-height factors, multiplied by the font size
CV_LINE_HEIGHT = 1.1
LETTER_LINE_HEIGHT = 1.35

SECTION_HEADER_SPACE = 12


@dataclass(frozen=True)
class PageGeometry:
    width: float
    height: float
    margin: float

    @property
    def content_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def right_edge(self) -> float:
        return self.width - self.margin


A4_WIDTH = 210.0
A4_HEIGHT = 297.0


# --- Draw instructions ----------------------------------------------------

@dataclass(frozen=True)
class TextRun:
    """
    A single line of text. `x` is the left edge, or the right edge when
    align is "right". Justified runs are stretched to `width`.
    """
    text: str
    x: float
    y: float
    font: str
    size: float
    color: Color
    align: str = "left"
    width: float = 0.0


@dataclass(frozen=True)
class Rule:
    x1: float
    x2: float
    y: float
    color: Color
    line_width: float


@dataclass(frozen=True)
class Link:
    """A clickable URL area; (x, y) is the top-left corner."""
    url: str
    x: float
    y: float
    width: float
    height: float


@dataclass
class Page:
    ops: list = field(default_factory=list)

    def text_runs(self) -> List[TextRun]:
        return [op for op in self.ops if isinstance(op, TextRun)]

    def texts(self) -> List[str]:
        return [run.text for run in self.text_runs()]

    def links(self) -> List[Link]:
        return [op for op in self.ops if isinstance(op, Link)]


@dataclass
class RenderedDocument:
    """An ordered sequence of pages plus the file name it is saved under."""
    pages: List[Page]
    filename: str
    geometry: PageGeometry

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def texts(self) -> List[str]:
        return [text for page in self.pages for text in page.texts()]

    def find(self, text: str) -> List[tuple]:
        """(page index, run) for every run whose text equals `text`."""
        return [
            (index, run)
            for index, page in enumerate(self.pages)
            for run in page.text_runs()
            if run.text == text
        ]


# --- Text shaping ---------------------------------------------------------

def clean_text(value) -> str:
    """Drops markdown emphasis and heading markers left by generated text."""
    if not value:
        return ""
    text = str(value).replace("**", "").replace("__", "")
    text = re.sub(r"^#+\s", "", text, flags=re.MULTILINE)
    return text.strip()


def measure_width(text: str, font: str, size: float) -> float:
    """Width of `text` in millimetres."""
    if not text:
        return 0.0
    return pdfmetrics.stringWidth(text, font, size) / mm


def line_advance(size: float, factor: float) -> float:
    """Vertical advance per line, in millimetres."""
    return size * factor / mm


def wrap(text: str, max_width: float, font: str, size: float) -> List[str]:
    """
    Greedy word wrap. Explicit line breaks are kept; a word wider than
    `max_width` gets a line of its own rather than being split.
    """
    if not text:
        return []
    lines = []
    for raw_line in text.split("\n"):
        words = raw_line.split()
        if not words:
            lines.append("")
            continue
        current = words[0]
        for word in words[1:]:
            candidate = f"{current} {word}"
            if measure_width(candidate, font, size) <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = word
        lines.append(current)
    return lines


# --- Cursor ---------------------------------------------------------------

class LayoutCursor:
    """
    Tracks the write position on the current page and owns the page list.
    The first page exists from construction; further pages are only ever
    appended, never merged or reordered.
    """
    def __init__(self, geometry: PageGeometry, top: Optional[float] = None):
        self.geometry = geometry
        self.pages: List[Page] = [Page()]
        self.y = geometry.margin if top is None else top

    @property
    def page(self) -> Page:
        return self.pages[-1]

    @property
    def page_index(self) -> int:
        return len(self.pages) - 1

    def would_overflow(self, height: float) -> bool:
        return self.y + height > self.geometry.height - self.geometry.margin

    def ensure_space(self, height: float) -> bool:
        """Starts a new page if `height` does not fit; True when it did."""
        if self.would_overflow(height):
            self.new_page()
            return True
        return False

    def new_page(self, y: Optional[float] = None) -> None:
        self.pages.append(Page())
        self.y = self.geometry.margin if y is None else y

    def advance(self, dy: float) -> None:
        self.y += dy

    # Drawing. Every helper draws at the current y unless told otherwise
    # and leaves the cursor where it was.

    def text(self, text: str, x: float, font: str, size: float, color: Color,
             y: Optional[float] = None) -> TextRun:
        run = TextRun(text, x, self.y if y is None else y, font, size, color)
        self.page.ops.append(run)
        return run

    def text_right(self, text: str, font: str, size: float, color: Color,
                   y: Optional[float] = None, right: Optional[float] = None) -> TextRun:
        """Text whose right edge sits on `right` (the right margin by default)."""
        right = self.geometry.right_edge if right is None else right
        run = TextRun(text, right, self.y if y is None else y, font, size, color, align="right")
        self.page.ops.append(run)
        return run

    def paragraph(self, lines: List[str], x: float, font: str, size: float, color: Color,
                  factor: float, justify_width: Optional[float] = None) -> float:
        """
        Draws pre-wrapped lines from the current y. With `justify_width`
        every line but the last is stretched to that width.
        Returns the block height; the caller advances.
        """
        step = line_advance(size, factor)
        for index, line in enumerate(lines):
            y = self.y + index * step
            is_last = index == len(lines) - 1
            if justify_width and not is_last and " " in line:
                run = TextRun(line, x, y, font, size, color, align="justify", width=justify_width)
            else:
                run = TextRun(line, x, y, font, size, color)
            self.page.ops.append(run)
        return len(lines) * step

    def rule(self, x1: float, x2: float, color: Color = COLOR_RULE, line_width: float = 0.2) -> None:
        self.page.ops.append(Rule(x1, x2, self.y, color, line_width))

    def link(self, url: str, x: float, y: float, width: float, height: float) -> None:
        self.page.ops.append(Link(url, x, y, width, height))

    def section_header(self, title: str) -> None:
        """
        Upper-cased title and a full-width rule. Only the header's own
        height is reserved: the body that follows checks its space again
        and may land on the next page.
        """
        self.ensure_space(SECTION_HEADER_SPACE)
        self.y += 3
        margin = self.geometry.margin
        self.text(title.upper(), margin, FONT_BOLD, 10, COLOR_PRIMARY)
        self.y += 1
        self.rule(margin, margin + self.geometry.content_width)
        self.y += 4

    def finish(self, filename: str) -> RenderedDocument:
        return RenderedDocument(pages=self.pages, filename=filename, geometry=self.geometry)
