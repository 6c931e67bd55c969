
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
Client for the generation service that tailors a profile to a job offer.
Supports Google AI Studio (Gemini) and OpenAI.

The service's JSON answer is never trusted as-is: it is parsed field by
field, the sections the model must not touch are restored from the master
profile, and the skill list is rebuilt around the missing skills.
"""

import json
import logging
import os
import re
from typing import List

import openai
from google import genai

from jobpulse.config import configure_ssl_env
from jobpulse.errors import GenerationError
from jobpulse.models import ApplicationPackage, ProfileRecord

# Logger is configured in main.py
logger = logging.getLogger(__name__)

GENERATION_MODELS = ["gemini-3-pro-preview", "gemini-2.5-pro", "gemini-2.5-flash"]
OPENAI_MODEL = "gpt-4o-mini"

APPLICATION_TYPES = ("alternance", "stage")
MAX_SKILLS = 12

# Copied back from the master profile after generation
PROTECTED_FIELDS = ("experiences", "education", "projects", "certifications", "languages", "interests")

TARGET_PHRASES = {
    "alternance": "alternance de 24 mois avec un rythme de 3 mois / 3 mois à partir de septembre 2026",
    "stage": "stage de 3 mois à partir de fin mai 2026",
}

# Contract mentions the model tends to shout
CONTRACT_PHRASES = [
    "alternance de 24 mois",
    "rythme de 3 mois / 3 mois",
    "stage de 3 mois",
    "fin mai 2026",
    "septembre 2026",
]

GENERIC_ERROR = "Erreur lors de la génération. Le texte de l'offre est-il trop court ou mal formaté ?"


def normalize_contract_text(text: str) -> str:
    """Lower-cases the contract phrases wherever they appear."""
    for phrase in CONTRACT_PHRASES:
        text = re.sub(re.escape(phrase), phrase, text, flags=re.IGNORECASE)
    return text


def merge_missing_skills(skills, missing_skills: List[str], limit: int = MAX_SKILLS) -> str:
    """
    Puts every missing skill that is not already listed (case-insensitive)
    at the front of the list, then caps it at `limit`.
    `skills` may be the comma-joined string or a list.
    """
    if isinstance(skills, str):
        final = [s.strip() for s in skills.split(",")]
    elif isinstance(skills, list):
        final = [str(s).strip() for s in skills]
    else:
        final = []
    final = [s for s in final if s]

    for skill in missing_skills or []:
        if not isinstance(skill, str) or not skill.strip():
            continue
        skill = skill.strip()
        if not any(s.lower() == skill.lower() for s in final):
            final.insert(0, skill)

    return ", ".join(final[:limit])


def _as_str(value) -> str:
    return value if isinstance(value, str) else ""


def _as_score(value) -> int:
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError):
        logger.warning(f"Invalid match score from generation service: {value!r}")
        return 0
    return max(0, min(100, score))


def build_application_package(raw, profile: ProfileRecord) -> ApplicationPackage:
    """
    Turns the service's decoded JSON into an ApplicationPackage built on a
    fresh copy of `profile`. Only the bio, the contact fields and the skills
    are taken from the answer.
    """
    if not isinstance(raw, dict):
        raise GenerationError(GENERIC_ERROR)
    optimized = raw.get("optimizedProfile")
    if not isinstance(optimized, dict):
        logger.error("Generation response has no optimizedProfile object")
        raise GenerationError(GENERIC_ERROR)

    editable = {k: v for k, v in optimized.items() if k not in PROTECTED_FIELDS and k != "skills"}
    optimized_profile = ProfileRecord.from_dict(editable, defaults=profile)

    missing = raw.get("missingSkills")
    missing = [s for s in missing if isinstance(s, str)] if isinstance(missing, list) else []

    optimized_profile.bio = normalize_contract_text(optimized_profile.bio)
    optimized_profile.skills = merge_missing_skills(optimized.get("skills"), missing)

    return ApplicationPackage(
        match_score=_as_score(raw.get("matchScore")),
        missing_skills=missing,
        extracted_job_title=_as_str(raw.get("extractedJobTitle")),
        extracted_company=_as_str(raw.get("extractedCompany")),
        optimized_profile=optimized_profile,
        cover_letter=normalize_contract_text(_as_str(raw.get("coverLetter"))),
        analysis=_as_str(raw.get("analysis")),
    )


class LLMClient:
    """
    Abstraction layer for LLM providers.
    An `sk-` key selects OpenAI, any other key Google GenAI.
    """
    def __init__(self, api_key: str = None):
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY") or os.environ.get("OPENAI_API_KEY")
        if not self.api_key:
            logger.warning("No API key found. Generation is unavailable.")

    @property
    def provider(self) -> str:
        return "openai" if self.api_key and self.api_key.startswith("sk-") else "gemini"

    def _call_llm(self, prompt: str) -> str:
        """Sends the prompt and returns the raw text answer."""
        if not self.api_key:
            raise GenerationError("Aucune clé API configurée (GEMINI_API_KEY ou OPENAI_API_KEY).")

        # Ensure custom CA bundle is visible to httpx-based SDKs
        configure_ssl_env()

        if self.provider == "openai":
            try:
                client = openai.OpenAI(api_key=self.api_key)
                response = client.chat.completions.create(
                    model=OPENAI_MODEL,
                    messages=[{"role": "user", "content": prompt}],
                    response_format={"type": "json_object"},
                    temperature=0.1,
                )
                return response.choices[0].message.content or ""
            except openai.OpenAIError as e:
                logger.error(f"OpenAI call failed: {e}")
                raise GenerationError(GENERIC_ERROR) from e

        client = genai.Client(api_key=self.api_key)
        last_exception = None
        for model_name in GENERATION_MODELS:
            try:
                logger.info(f"Attempting model: {model_name}")
                response = client.models.generate_content(
                    model=model_name,
                    contents=prompt,
                    config={"response_mime_type": "application/json", "temperature": 0.1},
                )
                return response.text or ""
            except Exception as e:
                logger.warning(f"Model {model_name} failed: {e}")
                last_exception = e

        raise GenerationError(GENERIC_ERROR) from last_exception

    def _build_prompt(self, profile: ProfileRecord, job_text: str, application_type: str) -> str:
        target_phrase = TARGET_PHRASES[application_type]
        return f"""
        ROLE: Expert Recruteur Tech & Spécialiste ATS.
        OBJECTIF: Adapter le profil pour une candidature de type {application_type.upper()}.

        OFFRE D'EMPLOI :
        \"\"\"
        {job_text}
        \"\"\"

        PROFIL MASTER ORIGINAL :
        {json.dumps(profile.to_dict(), ensure_ascii=False)}

        CONSIGNES :
        1. bio : adapte le texte à l'offre et inclus exactement "{target_phrase}" en minuscules.
        2. skills : les 10 compétences les plus stratégiques, en incluant toutes les compétences manquantes.
        3. N'explique jamais les abréviations techniques.
        4. Ne modifie pas les expériences, projets, formations, certifications, langues et intérêts.
        5. coverLetter : uniquement le corps de la lettre, 250 mots maximum, mentionne "{target_phrase}".
           Pas d'objet, pas de formule de politesse finale, pas de signature.

        Return ONLY valid JSON in this format:
        {{
            "matchScore": 0,
            "missingSkills": ["Skill"],
            "extractedJobTitle": "Title",
            "extractedCompany": "Company",
            "optimizedProfile": {{ "bio": "...", "skills": "Skill 1, Skill 2" }},
            "coverLetter": "Madame, Monsieur, ...",
            "analysis": "..."
        }}
        """

    def generate_application_package(self, profile: ProfileRecord, job_text: str,
                                     application_type: str = "alternance") -> ApplicationPackage:
        """
        Tailors `profile` to the job offer. The stored profile is never
        modified; the package carries its own copy.
        """
        if application_type not in APPLICATION_TYPES:
            raise GenerationError(f"Type de candidature inconnu : {application_type}")
        if not job_text or not job_text.strip():
            raise GenerationError("Veuillez coller la description de l'offre d'emploi.")

        answer = self._call_llm(self._build_prompt(profile, job_text, application_type))
        json_str = self._clean_json(answer)
        if not json_str:
            raise GenerationError("Réponse vide.")

        try:
            raw = json.loads(json_str)
        except json.JSONDecodeError as e:
            logger.error("Failed to decode generation response")
            logger.debug(f"Raw response: {json_str}")
            raise GenerationError(GENERIC_ERROR) from e

        package = build_application_package(raw, profile)
        logger.info(f"    > Match score: {package.match_score}/100")
        if package.missing_skills:
            logger.info(f"    > Missing skills: {', '.join(package.missing_skills)}")
        return package

    def _clean_json(self, text: str) -> str:
        """Helper to strip code fences from LLM output"""
        if "```json" in text:
            text = text.split("```json")[1].split("```")[0]
        elif "```" in text:
            text = text.split("```")[1].split("```")[0]
        return text.strip()
