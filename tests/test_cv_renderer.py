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

from jobpulse.cv_renderer import CV_GEOMETRY, MAX_PROJECTS, cv_filename, render_cv, skill_grid
from jobpulse.layout import A4_HEIGHT, TextRun
from jobpulse.models import Certification, Education, Experience, ProfileRecord, Project


def make_profile(**overrides):
    data = dict(
        full_name="Jean Dupont",
        email="Jean.Dupont@Example.com",
        phone="0605961489",
        location="Paris, France",
        linkedin="https://www.linkedin.com/in/jeandupont",
        github="https://github.com/jdupont/",
        bio="Développeur passionné par la donnée. " * 6,
        skills="Python, SQL, Docker, Kubernetes, Git",
        languages="Français, Anglais",
        interests="Escalade",
        experiences=[Experience(id="exp-1", company="Acme", role="Data Engineer", start_date="2024",
                                end_date="2025", description="- Pipelines\n* Tableaux de bord\n\nMise en prod")],
        projects=[Project(id="proj-1", name="JobPulse", description="Générateur de CV", technologies="Python")],
        education=[Education(id="edu-1", school="INSA", degree="Master", start_date="2022", end_date="2024")],
        certifications=[Certification(id="cert-1", name="AWS", issuer="Amazon", date="2024")],
    )
    data.update(overrides)
    return ProfileRecord(**data)


def many_experiences(count):
    return [
        Experience(id=f"exp-{i}", company=f"Entreprise {i}", role=f"Rôle {i}", start_date="2020",
                   end_date="2021", description="\n".join(f"Réalisation {i}.{j}" for j in range(4)))
        for i in range(count)
    ]


class TestCvHelpers(unittest.TestCase):
    def test_filename(self):
        self.assertEqual(cv_filename("Jean Dupont"), "CV_Jean_Dupont_Elite.pdf")

    def test_skill_grid(self):
        grid = skill_grid(["a", "b", "c", "d", "e"])
        self.assertEqual(grid, [("a", 0, 0), ("b", 0, 1), ("c", 0, 2), ("d", 1, 0), ("e", 1, 1)])


class TestRenderCv(unittest.TestCase):
    def test_header(self):
        document = render_cv(make_profile(), "Data Engineer")
        texts = document.pages[0].texts()
        self.assertIn("JEAN DUPONT", texts)
        self.assertIn("Data Engineer", texts)
        self.assertIn("email : jean.dupont@example.com", texts)
        self.assertIn("tél : +33 605961489", texts)
        self.assertIn("github : jdupont", texts)
        self.assertIn("linkedin : jean dupont", texts)
        self.assertEqual(document.filename, "CV_Jean_Dupont_Elite.pdf")

    def test_contact_links(self):
        links = render_cv(make_profile(), "Dev").pages[0].links()
        urls = [link.url for link in links]
        self.assertEqual(urls, ["https://www.linkedin.com/in/jeandupont", "https://github.com/jdupont/"])

    def test_empty_contacts_are_skipped(self):
        document = render_cv(make_profile(phone="", github=""), "Dev")
        texts = document.texts()
        self.assertFalse(any(t.startswith("tél") for t in texts))
        self.assertFalse(any(t.startswith("github") for t in texts))
        self.assertEqual(len(document.pages[0].links()), 1)

    def test_section_order(self):
        texts = render_cv(make_profile(), "Dev").texts()
        headers = ["PROFIL PROFESSIONNEL", "FORMATION", "EXPÉRIENCE PROFESSIONNELLE",
                   "COMPÉTENCES TECHNIQUES", "PROJETS RÉALISÉS", "CERTIFICATIONS", "LANGUES & INTÉRÊTS"]
        positions = [texts.index(h) for h in headers]
        self.assertEqual(positions, sorted(positions))

    def test_empty_sections_skipped_but_skills_and_languages_kept(self):
        profile = ProfileRecord(full_name="Jean Dupont")
        texts = render_cv(profile, "").texts()
        for header in ("PROFIL PROFESSIONNEL", "FORMATION", "EXPÉRIENCE PROFESSIONNELLE",
                       "PROJETS RÉALISÉS", "CERTIFICATIONS"):
            self.assertNotIn(header, texts)
        self.assertIn("COMPÉTENCES TECHNIQUES", texts)
        self.assertIn("LANGUES & INTÉRÊTS", texts)

    def test_empty_profile_renders(self):
        document = render_cv(ProfileRecord(), "")
        self.assertEqual(document.page_count, 1)
        self.assertEqual(document.filename, "CV__Elite.pdf")

    def test_current_experience_shows_present(self):
        experience = Experience(id="exp-1", company="Acme", role="Dev", start_date="Sept 2024",
                                end_date="Juin 2025", is_current=True)
        texts = render_cv(make_profile(experiences=[experience]), "Dev").texts()
        self.assertIn("Sept 2024 - Présent", texts)
        self.assertFalse(any("Juin 2025" in t for t in texts))

    def test_description_lines_are_rebulleted(self):
        texts = render_cv(make_profile(), "Dev").texts()
        self.assertIn("• Pipelines", texts)
        self.assertIn("• Tableaux de bord", texts)
        self.assertIn("• Mise en prod", texts)
        self.assertFalse(any(t.startswith("• -") or t.startswith("• *") for t in texts))

    def test_skills_laid_out_in_three_columns(self):
        document = render_cv(make_profile(), "Dev")
        runs = {}
        for skill in ("Python", "SQL", "Docker", "Kubernetes"):
            (_, run), = document.find(f"• {skill}")
            runs[run.text] = run
        column_width = CV_GEOMETRY.content_width / 3
        self.assertAlmostEqual(runs["• SQL"].x - runs["• Python"].x, column_width)
        self.assertAlmostEqual(runs["• Docker"].x - runs["• Python"].x, 2 * column_width)
        self.assertEqual(runs["• Kubernetes"].x, runs["• Python"].x)
        self.assertEqual(runs["• Python"].y, runs["• Docker"].y)
        self.assertGreater(runs["• Kubernetes"].y, runs["• Python"].y)

    def test_at_most_three_projects(self):
        projects = [Project(id=f"p{i}", name=f"Projet {i}", description="d") for i in range(5)]
        texts = render_cv(make_profile(projects=projects), "Dev").texts()
        self.assertEqual(sum(t.startswith("Projet ") for t in texts), MAX_PROJECTS)

    def test_project_without_technologies_has_no_brackets(self):
        projects = [Project(id="p", name="Solo", description="d", technologies="")]
        texts = render_cv(make_profile(projects=projects), "Dev").texts()
        self.assertFalse(any(t.startswith("[") for t in texts))

    def test_languages_line(self):
        document = render_cv(make_profile(), "Dev")
        (_, label), = document.find("Langues : ")
        (_, value), = document.find("Français, Anglais")
        self.assertEqual(label.y, value.y)
        self.assertGreater(value.x, label.x)

    def test_profile_is_not_mutated(self):
        profile = make_profile()
        before = profile.to_dict()
        render_cv(profile, "Dev")
        self.assertEqual(profile.to_dict(), before)


class TestCvPagination(unittest.TestCase):
    def setUp(self):
        self.profile = make_profile(experiences=many_experiences(14))
        self.document = render_cv(self.profile, "Dev")

    def test_overflows_onto_more_pages(self):
        self.assertGreaterEqual(self.document.page_count, 2)

    def test_company_and_role_share_a_page(self):
        for exp in self.profile.experiences:
            (company_page, company), = self.document.find(exp.company.upper())
            (role_page, role), = self.document.find(exp.role)
            self.assertEqual(company_page, role_page)
            self.assertGreater(role.y, company.y)

    def test_nothing_drawn_below_bottom_margin(self):
        limit = A4_HEIGHT - CV_GEOMETRY.margin
        for page in self.document.pages:
            for op in page.ops:
                if isinstance(op, TextRun):
                    self.assertLessEqual(op.y, limit, op.text)

    def test_continuation_pages_start_at_margin(self):
        for page in self.document.pages[1:]:
            first = min(run.y for run in page.text_runs())
            self.assertGreaterEqual(first, CV_GEOMETRY.margin)

    def test_same_input_same_layout(self):
        again = render_cv(self.profile, "Dev")
        self.assertEqual([p.ops for p in again.pages], [p.ops for p in self.document.pages])


if __name__ == '__main__':
    unittest.main()
