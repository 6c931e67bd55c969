
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
Lays out the cover letter: sender, recipient, place and date, subject,
justified body and a fixed closing.

The body comes from the generation service, which sometimes echoes the
subject, the recipient or a signature despite being told not to; those are
stripped before layout so the fixed skeleton is not duplicated.
"""

import logging
import re
from datetime import date
from typing import Optional

from jobpulse.layout import (
    A4_HEIGHT,
    A4_WIDTH,
    COLOR_BLACK,
    COLOR_TEXT,
    FONT_BOLD,
    FONT_REGULAR,
    LETTER_LINE_HEIGHT,
    LayoutCursor,
    PageGeometry,
    RenderedDocument,
    clean_text,
    line_advance,
    wrap,
)
from jobpulse.models import ProfileRecord, format_phone, safe_file_stem

logger = logging.getLogger(__name__)

LETTER_GEOMETRY = PageGeometry(A4_WIDTH, A4_HEIGHT, margin=20)

SENDER_TOP = 15
RECIPIENT_TOP = 40
RECIPIENT_X = 110
BODY_SIZE = 10.5
BLANK_LINE_GAP = 6
PARAGRAPH_GAP = 2

# Manual page breaks, checked after each paragraph and before the closing
BODY_BREAK_Y = 270
BODY_RESUME_Y = 20
CLOSING_BREAK_Y = 275
CLOSING_RESUME_Y = 30

DEFAULT_CITY = "Paris"
RECIPIENT_LINE = "À l'attention du Responsable Recrutement"
CLOSING = "Cordialement,"

SIGNATURE_KEYWORDS = [
    "Cordialement",
    "Sincèrement",
    "Bien à vous",
    "Je vous prie d'agréer",
    "Salutations",
]

FRENCH_MONTHS = [
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
]

_SUBJECT_RE = re.compile(r"^Objet\s*:.*", re.IGNORECASE | re.MULTILINE)
_RECIPIENT_RE = re.compile(r"^À l['’]attention.*", re.IGNORECASE | re.MULTILINE)


def letter_filename(full_name: str) -> str:
    return f"Lettre_Motivation_{safe_file_stem(full_name)}.pdf"


def french_date(day: date) -> str:
    return f"{day.day} {FRENCH_MONTHS[day.month - 1]} {day.year}"


def letter_city(location: str) -> str:
    return (location or "").split(",")[0].strip() or DEFAULT_CITY


def sanitize_letter_body(content: str, full_name: str) -> str:
    """
    Best-effort removal of what the letter skeleton already provides:
      1. markdown markers and surrounding whitespace
      2. echoed "Objet :" lines
      3. echoed "À l'attention ..." lines
      4. a valediction and everything after it
      5. a trailing line holding just one part of the sender's name
    """
    text = clean_text(content)
    text = _SUBJECT_RE.sub("", text)
    text = _RECIPIENT_RE.sub("", text).strip()

    for keyword in SIGNATURE_KEYWORDS:
        pattern = r"\n\s*" + re.escape(keyword) + r".*$"
        text = re.sub(pattern, "", text, count=1, flags=re.IGNORECASE | re.DOTALL)

    for part in (full_name or "").split(" "):
        if len(part) > 2:
            pattern = r"\n\s*" + re.escape(part) + r"\s*\Z"
            text = re.sub(pattern, "", text, count=1, flags=re.IGNORECASE)

    return text.strip()


def render_letter(profile: ProfileRecord, company: str, job_title: str, content: str,
                  today: Optional[date] = None) -> RenderedDocument:
    today = today or date.today()
    cursor = LayoutCursor(LETTER_GEOMETRY, top=SENDER_TOP)
    margin = LETTER_GEOMETRY.margin
    content_width = LETTER_GEOMETRY.content_width

    # Sender
    cursor.text(clean_text(profile.full_name), margin, FONT_BOLD, 10, COLOR_BLACK)
    cursor.advance(4.5)
    cursor.text(clean_text(profile.location), margin, FONT_REGULAR, 10, COLOR_BLACK)
    cursor.advance(4.5)
    cursor.text(format_phone(profile.phone), margin, FONT_REGULAR, 10, COLOR_BLACK)
    cursor.advance(4.5)
    cursor.text(profile.email.lower(), margin, FONT_REGULAR, 10, COLOR_BLACK)

    # Recipient, place and date
    cursor.y = RECIPIENT_TOP
    cursor.text(RECIPIENT_LINE, RECIPIENT_X, FONT_BOLD, 10, COLOR_BLACK)
    cursor.advance(5)
    cursor.text(clean_text(company).upper(), RECIPIENT_X, FONT_BOLD, 10, COLOR_BLACK)
    cursor.advance(15)
    city = letter_city(profile.location)
    cursor.text(f"À {city}, le {french_date(today)}", RECIPIENT_X, FONT_REGULAR, 10, COLOR_BLACK)
    cursor.advance(20)

    cursor.text(f"Objet : Candidature au poste de {clean_text(job_title)}",
                margin, FONT_BOLD, 10, COLOR_BLACK)
    cursor.advance(12)

    # Body
    step = line_advance(BODY_SIZE, LETTER_LINE_HEIGHT)
    for paragraph in sanitize_letter_body(content, profile.full_name).split("\n"):
        text = paragraph.strip()
        if not text:
            cursor.advance(BLANK_LINE_GAP)
            continue
        lines = wrap(text, content_width, FONT_REGULAR, BODY_SIZE)
        cursor.paragraph(lines, margin, FONT_REGULAR, BODY_SIZE, COLOR_TEXT,
                         LETTER_LINE_HEIGHT, justify_width=content_width)
        cursor.advance(len(lines) * step + PARAGRAPH_GAP)
        if cursor.y > BODY_BREAK_Y:
            cursor.new_page(BODY_RESUME_Y)

    # Closing is always added, whatever the sanitizer removed
    cursor.advance(10)
    if cursor.y > CLOSING_BREAK_Y:
        cursor.new_page(CLOSING_RESUME_Y)
    cursor.text(CLOSING, RECIPIENT_X, FONT_BOLD, BODY_SIZE, COLOR_TEXT)
    cursor.advance(7)
    cursor.text(clean_text(profile.full_name), RECIPIENT_X, FONT_BOLD, BODY_SIZE, COLOR_TEXT)

    document = cursor.finish(letter_filename(profile.full_name))
    logger.debug(f"Cover letter laid out on {document.page_count} page(s)")
    return document
