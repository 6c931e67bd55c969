
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
Lays out the one-column CV as pages of draw instructions.

Sections, in order: header, profile summary, education, experience, skills,
projects, certifications, languages & interests. Empty sections are skipped,
except skills and languages & interests which always render.
"""

import logging
import re
from typing import List, Tuple

from jobpulse.layout import (
    A4_HEIGHT,
    A4_WIDTH,
    COLOR_ACCENT,
    COLOR_BLACK,
    COLOR_TEXT,
    CV_LINE_HEIGHT,
    FONT_BOLD,
    FONT_REGULAR,
    LayoutCursor,
    PageGeometry,
    RenderedDocument,
    clean_text,
    line_advance,
    measure_width,
    wrap,
)
from jobpulse.models import ProfileRecord, format_phone, safe_file_stem

logger = logging.getLogger(__name__)

CV_GEOMETRY = PageGeometry(A4_WIDTH, A4_HEIGHT, margin=12)

BODY_TOP = 40  # First section starts below the header block
BULLET = "•"
BULLET_PREFIX = re.compile(r"^[•\-\*]\s*")

SKILL_COLUMNS = 3
SKILL_ROW_HEIGHT = 4
MAX_PROJECTS = 3

# Space reserved before each entry so its title line and the line below
# always share a page
EDUCATION_BLOCK = 10
EXPERIENCE_BLOCK = 18
PROJECT_BLOCK = 12
CERTIFICATION_BLOCK = 8
LANGUAGES_BLOCK = 12


def cv_filename(full_name: str) -> str:
    return f"CV_{safe_file_stem(full_name)}_Elite.pdf"


def skill_grid(skills: List[str], columns: int = SKILL_COLUMNS) -> List[Tuple[str, int, int]]:
    """(skill, row, column) for each skill, filled row by row."""
    return [(skill, index // columns, index % columns) for index, skill in enumerate(skills)]


def render_cv(profile: ProfileRecord, target_job_title: str) -> RenderedDocument:
    """
    Renders the CV for `profile`, titled with the targeted job.
    Pure: the profile is only read.
    """
    cursor = LayoutCursor(CV_GEOMETRY)

    _draw_header(cursor, profile, target_job_title)
    cursor.y = BODY_TOP

    _draw_summary(cursor, profile)
    _draw_education(cursor, profile)
    _draw_experience(cursor, profile)
    _draw_skills(cursor, profile)
    _draw_projects(cursor, profile)
    _draw_certifications(cursor, profile)
    _draw_languages(cursor, profile)

    document = cursor.finish(cv_filename(profile.full_name))
    logger.debug(f"CV laid out on {document.page_count} page(s)")
    return document


def _draw_header(cursor: LayoutCursor, profile: ProfileRecord, target_job_title: str):
    margin = cursor.geometry.margin
    top = cursor.y

    cursor.text(clean_text(profile.full_name).upper(), margin, FONT_BOLD, 22, COLOR_BLACK, y=top + 5)
    cursor.text(clean_text(target_job_title), margin, FONT_BOLD, 11, COLOR_ACCENT, y=top + 10)

    # Contact block, right-aligned against the margin
    github_user = profile.github.rstrip("/").split("/")[-1]
    contacts = [
        ("email", profile.email, None),
        ("tél", format_phone(profile.phone), None),
        ("adresse", profile.location, None),
        ("linkedin", profile.full_name, profile.linkedin),
        ("github", github_user, profile.github),
    ]
    contact_y = top + 1.5
    for label, value, url in contacts:
        if not value:
            continue
        line = f"{label.lower()} : {value.lower()}"
        cursor.text_right(line, FONT_REGULAR, 8, COLOR_ACCENT if url else COLOR_TEXT, y=contact_y)
        if url:
            width = measure_width(line, FONT_REGULAR, 8)
            cursor.link(url, cursor.geometry.right_edge - width, contact_y - 3, width, 4)
        contact_y += 3.5


def _draw_summary(cursor: LayoutCursor, profile: ProfileRecord):
    if not profile.bio:
        return
    cursor.section_header("Profil Professionnel")
    width = cursor.geometry.content_width
    lines = wrap(clean_text(profile.bio), width, FONT_REGULAR, 9)
    height = len(lines) * line_advance(9, CV_LINE_HEIGHT)
    cursor.ensure_space(height)
    cursor.paragraph(lines, cursor.geometry.margin, FONT_REGULAR, 9, COLOR_TEXT,
                     CV_LINE_HEIGHT, justify_width=width)
    cursor.advance(height + 1)


def _draw_education(cursor: LayoutCursor, profile: ProfileRecord):
    if not profile.education:
        return
    margin = cursor.geometry.margin
    cursor.section_header("Formation")
    for edu in profile.education:
        cursor.ensure_space(EDUCATION_BLOCK)
        cursor.text(clean_text(edu.school), margin, FONT_BOLD, 9.5, COLOR_BLACK)
        cursor.text_right(edu.date_range, FONT_REGULAR, 8, COLOR_BLACK)
        cursor.advance(3.8)
        cursor.text(clean_text(edu.degree), margin, FONT_REGULAR, 9, COLOR_ACCENT)
        cursor.advance(5)


def _draw_experience(cursor: LayoutCursor, profile: ProfileRecord):
    if not profile.experiences:
        return
    margin = cursor.geometry.margin
    bullet_width = cursor.geometry.content_width - 4
    step = line_advance(9, CV_LINE_HEIGHT)

    cursor.section_header("Expérience Professionnelle")
    for exp in profile.experiences:
        cursor.ensure_space(EXPERIENCE_BLOCK)
        cursor.text(clean_text(exp.company).upper(), margin, FONT_BOLD, 10, COLOR_BLACK)
        cursor.text_right(exp.date_range, FONT_REGULAR, 8, COLOR_BLACK)
        cursor.advance(3.8)
        cursor.text(clean_text(exp.role), margin, FONT_BOLD, 9, COLOR_ACCENT)
        cursor.advance(4.5)

        for line in clean_text(exp.description).split("\n"):
            if not line.strip():
                continue
            bullet = f"{BULLET} {BULLET_PREFIX.sub('', line.strip())}"
            wrapped = wrap(bullet, bullet_width, FONT_REGULAR, 9)
            height = len(wrapped) * step
            cursor.ensure_space(height)
            cursor.paragraph(wrapped, margin + 3, FONT_REGULAR, 9, COLOR_TEXT, CV_LINE_HEIGHT)
            cursor.advance(height)
        cursor.advance(1)


def _draw_skills(cursor: LayoutCursor, profile: ProfileRecord):
    margin = cursor.geometry.margin
    column_width = cursor.geometry.content_width / SKILL_COLUMNS

    cursor.section_header("Compétences Techniques")
    current_row = None
    for skill, row, column in skill_grid(profile.skill_list()):
        if row != current_row:
            if current_row is not None:
                cursor.advance(SKILL_ROW_HEIGHT)
            cursor.ensure_space(SKILL_ROW_HEIGHT)
            current_row = row
        cursor.text(f"{BULLET} {skill}", margin + column * column_width, FONT_REGULAR, 9, COLOR_TEXT)
    if current_row is not None:
        cursor.advance(SKILL_ROW_HEIGHT)
    cursor.advance(3)


def _draw_projects(cursor: LayoutCursor, profile: ProfileRecord):
    if not profile.projects:
        return
    margin = cursor.geometry.margin
    text_width = cursor.geometry.content_width - 3
    step = line_advance(8.5, CV_LINE_HEIGHT)

    cursor.section_header("Projets Réalisés")
    for project in profile.projects[:MAX_PROJECTS]:
        cursor.ensure_space(PROJECT_BLOCK)
        cursor.text(clean_text(project.name), margin, FONT_BOLD, 9.5, COLOR_BLACK)
        if project.technologies:
            cursor.text_right(f"[ {project.technologies} ]", FONT_REGULAR, 7.5, COLOR_BLACK)
        cursor.advance(3.8)

        lines = wrap(clean_text(project.description), text_width, FONT_REGULAR, 8.5)
        height = len(lines) * step
        cursor.ensure_space(height)
        cursor.paragraph(lines, margin, FONT_REGULAR, 8.5, COLOR_TEXT, CV_LINE_HEIGHT)
        cursor.advance(height + 1.5)


def _draw_certifications(cursor: LayoutCursor, profile: ProfileRecord):
    if not profile.certifications:
        return
    margin = cursor.geometry.margin
    cursor.section_header("Certifications")
    for cert in profile.certifications:
        cursor.ensure_space(CERTIFICATION_BLOCK)
        cursor.text(clean_text(cert.name), margin, FONT_BOLD, 9, COLOR_BLACK)
        cursor.text_right(cert.date, FONT_REGULAR, 8, COLOR_BLACK)
        cursor.advance(3.5)
        cursor.text(clean_text(cert.issuer), margin, FONT_REGULAR, 8.5, COLOR_ACCENT)
        cursor.advance(4)


def _draw_languages(cursor: LayoutCursor, profile: ProfileRecord):
    margin = cursor.geometry.margin
    cursor.section_header("Langues & Intérêts")
    cursor.ensure_space(LANGUAGES_BLOCK)
    for index, (label, value) in enumerate([("Langues : ", profile.languages),
                                            ("Intérêts : ", profile.interests)]):
        if index:
            cursor.advance(4.5)
        cursor.text(label, margin, FONT_BOLD, 9, COLOR_BLACK)
        value_x = margin + measure_width(label, FONT_BOLD, 9)
        cursor.text(clean_text(value), value_x, FONT_REGULAR, 9, COLOR_TEXT)
