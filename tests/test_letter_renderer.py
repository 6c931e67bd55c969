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

import unittest
from datetime import date

from jobpulse.letter_renderer import (
    CLOSING,
    RECIPIENT_LINE,
    SIGNATURE_KEYWORDS,
    french_date,
    letter_city,
    letter_filename,
    render_letter,
    sanitize_letter_body,
)
from jobpulse.models import ProfileRecord

TODAY = date(2026, 10, 19)


def make_profile(**overrides):
    data = dict(full_name="Jean Dupont", email="Jean.Dupont@Example.com",
                phone="0605961489", location="Lyon, France")
    data.update(overrides)
    return ProfileRecord(**data)


class TestSanitizeLetterBody(unittest.TestCase):
    def test_removes_subject_line(self):
        body = "Objet : Candidature\nMadame, Monsieur,\nJe postule."
        self.assertEqual(sanitize_letter_body(body, "Jean Dupont"), "Madame, Monsieur,\nJe postule.")

    def test_removes_recipient_lines(self):
        for line in ("À l'attention du recruteur", "À l’attention de Mme X", "à l'attention RH"):
            body = f"{line}\nMadame, Monsieur,"
            self.assertEqual(sanitize_letter_body(body, "Jean Dupont"), "Madame, Monsieur,", line)

    def test_removes_markdown(self):
        body = "## Lettre\n**Madame**, Monsieur,"
        self.assertEqual(sanitize_letter_body(body, ""), "Lettre\nMadame, Monsieur,")

    def test_each_valediction_truncates_the_rest(self):
        for keyword in SIGNATURE_KEYWORDS:
            body = f"Madame, Monsieur,\nJe postule.\n{keyword} blabla\nJean Dupont\nPS"
            self.assertEqual(sanitize_letter_body(body, "Jean Dupont"), "Madame, Monsieur,\nJe postule.", keyword)

    def test_valediction_case_insensitive(self):
        body = "Je postule.\n  CORDIALEMENT,\nJean"
        self.assertEqual(sanitize_letter_body(body, ""), "Je postule.")

    def test_keyword_on_first_line_is_kept(self):
        body = "Sincèrement motivé par votre offre."
        self.assertEqual(sanitize_letter_body(body, ""), body)

    def test_trailing_name_line_removed(self):
        body = "Je postule.\nDupont"
        self.assertEqual(sanitize_letter_body(body, "Jean Dupont"), "Je postule.")

    def test_short_name_parts_ignored(self):
        body = "Je postule.\nLe"
        self.assertEqual(sanitize_letter_body(body, "Le Du"), body)

    def test_clean_body_unchanged(self):
        body = "Madame, Monsieur,\n\nJe souhaite rejoindre votre équipe.\n\nJe reste disponible."
        once = sanitize_letter_body(body, "Jean Dupont")
        self.assertEqual(once, body)
        self.assertEqual(sanitize_letter_body(once, "Jean Dupont"), once)


class TestLetterHelpers(unittest.TestCase):
    def test_filename(self):
        self.assertEqual(letter_filename("Jean Dupont"), "Lettre_Motivation_Jean_Dupont.pdf")

    def test_french_date(self):
        self.assertEqual(french_date(TODAY), "19 octobre 2026")
        self.assertEqual(french_date(date(2027, 2, 1)), "1 février 2027")

    def test_city(self):
        self.assertEqual(letter_city("Lyon, France"), "Lyon")
        self.assertEqual(letter_city(""), "Paris")
        self.assertEqual(letter_city(" , France"), "Paris")


class TestRenderLetter(unittest.TestCase):
    def test_skeleton(self):
        document = render_letter(make_profile(), "Acme", "Data Engineer", "Madame, Monsieur,\nJe postule.",
                                 today=TODAY)
        texts = document.texts()
        self.assertEqual(document.page_count, 1)
        self.assertEqual(document.filename, "Lettre_Motivation_Jean_Dupont.pdf")
        for expected in ("Jean Dupont", "Lyon, France", "+33 605961489", "jean.dupont@example.com",
                         RECIPIENT_LINE, "ACME", "À Lyon, le 19 octobre 2026",
                         "Objet : Candidature au poste de Data Engineer", "Je postule.", CLOSING):
            self.assertIn(expected, texts)
        self.assertEqual(texts[-2:], [CLOSING, "Jean Dupont"])

    def test_subject_drawn_once(self):
        body = "Objet : Candidature spontanée\nMadame, Monsieur,"
        texts = render_letter(make_profile(), "Acme", "Dev", body, today=TODAY).texts()
        self.assertEqual(sum(t.startswith("Objet") for t in texts), 1)

    def test_closing_present_when_body_had_its_own(self):
        body = "Madame, Monsieur,\nCordialement,\nJean Dupont"
        texts = render_letter(make_profile(), "Acme", "Dev", body, today=TODAY).texts()
        self.assertEqual(texts.count(CLOSING), 1)
        self.assertEqual(texts.count("Jean Dupont"), 2)

    def test_long_body_paginates(self):
        paragraph = "Je souhaite mettre mes compétences au service de votre équipe. " * 8
        body = "\n\n".join([paragraph] * 12)
        document = render_letter(make_profile(), "Acme", "Dev", body, today=TODAY)
        self.assertGreaterEqual(document.page_count, 2)
        self.assertEqual(document.pages[-1].texts()[-2:], [CLOSING, "Jean Dupont"])

    def test_continuation_page_resumes_near_top(self):
        paragraph = "Je souhaite mettre mes compétences au service de votre équipe. " * 8
        body = "\n".join([paragraph] * 10)
        document = render_letter(make_profile(), "Acme", "Dev", body, today=TODAY)
        self.assertGreaterEqual(document.page_count, 2)
        first = min(run.y for run in document.pages[1].text_runs())
        self.assertGreaterEqual(first, 20)

    def test_body_lines_justified_except_last(self):
        paragraph = "Je souhaite mettre mes compétences au service de votre équipe. " * 4
        document = render_letter(make_profile(), "Acme", "Dev", paragraph.strip(), today=TODAY)
        body_runs = [r for r in document.pages[0].text_runs() if r.size == 10.5 and r.text != CLOSING
                     and r.text != "Jean Dupont"]
        self.assertGreater(len(body_runs), 1)
        self.assertTrue(all(r.align == "justify" for r in body_runs[:-1]))
        self.assertEqual(body_runs[-1].align, "left")

    def test_default_city(self):
        texts = render_letter(make_profile(location=""), "Acme", "Dev", "Bonjour", today=TODAY).texts()
        self.assertIn("À Paris, le 19 octobre 2026", texts)


if __name__ == '__main__':
    unittest.main()
