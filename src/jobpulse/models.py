
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
Data models for the JobPulse application.

The JSON shape (camelCase keys) is the one used by the profile export files,
so exported profiles stay interchangeable with the browser version.
"""

import re
import uuid
from dataclasses import dataclass, field, fields, replace
from typing import List, Optional

PRESENT_LABEL = "Présent"


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def _str(value) -> str:
    if value is None:
        return ""
    return str(value)


def parse_flag(value) -> bool:
    """Only True or the string "true" (any case) count as set."""
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


def attr_name(key: str) -> str:
    """Export-file key to attribute name: startDate -> start_date."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


@dataclass
class Experience:
    """A single professional experience entry."""
    id: str
    company: str = ""
    role: str = ""
    start_date: str = ""
    end_date: str = ""
    is_current: bool = False
    description: str = ""  # One bullet per line
    location: Optional[str] = None

    @property
    def date_range(self) -> str:
        end = PRESENT_LABEL if self.is_current else self.end_date
        return f"{self.start_date} - {end}"

    @classmethod
    def from_dict(cls, data: dict) -> "Experience":
        return cls(
            id=_str(data.get("id")) or new_id("exp"),
            company=_str(data.get("company")),
            role=_str(data.get("role")),
            start_date=_str(data.get("startDate")),
            end_date=_str(data.get("endDate")),
            is_current=parse_flag(data.get("isCurrent")),
            description=_str(data.get("description")),
            location=data.get("location"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "company": self.company,
            "role": self.role,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "isCurrent": self.is_current,
            "description": self.description,
            "location": self.location,
        }


@dataclass
class Project:
    """A technical project."""
    id: str
    name: str = ""
    description: str = ""
    technologies: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Project":
        return cls(
            id=_str(data.get("id")) or new_id("proj"),
            name=_str(data.get("name")),
            description=_str(data.get("description")),
            technologies=_str(data.get("technologies")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "technologies": self.technologies,
        }


@dataclass
class Education:
    id: str
    school: str = ""
    degree: str = ""
    start_date: str = ""
    end_date: str = ""

    @property
    def date_range(self) -> str:
        return f"{self.start_date} - {self.end_date}"

    @classmethod
    def from_dict(cls, data: dict) -> "Education":
        return cls(
            id=_str(data.get("id")) or new_id("edu"),
            school=_str(data.get("school")),
            degree=_str(data.get("degree")),
            start_date=_str(data.get("startDate")),
            end_date=_str(data.get("endDate")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "school": self.school,
            "degree": self.degree,
            "startDate": self.start_date,
            "endDate": self.end_date,
        }


@dataclass
class Certification:
    id: str
    name: str = ""
    issuer: str = ""
    date: str = ""
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Certification":
        return cls(
            id=_str(data.get("id")) or new_id("cert"),
            name=_str(data.get("name")),
            issuer=_str(data.get("issuer")),
            date=_str(data.get("date")),
            description=data.get("description"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "issuer": self.issuer,
            "date": self.date,
            "description": self.description,
        }


# section name -> record class
SECTIONS = {
    "experiences": Experience,
    "projects": Project,
    "education": Education,
    "certifications": Certification,
}


def entry_changes(section: str, values: dict) -> dict:
    """
    Turns export-file keys for a child record (startDate, isCurrent, ...)
    into keyword changes for update_entry. The id cannot be changed.
    """
    if section not in SECTIONS:
        raise KeyError(f"Unknown section: {section}")
    allowed = {f.name for f in fields(SECTIONS[section])} - {"id"}
    changes = {}
    for key, value in values.items():
        attr = attr_name(key)
        if attr not in allowed:
            raise KeyError(f"Unknown field for {section}: {key}")
        changes[attr] = parse_flag(value) if attr == "is_current" else value
    return changes


_SCALAR_FIELDS = [
    ("full_name", "fullName"),
    ("email", "email"),
    ("phone", "phone"),
    ("location", "location"),
    ("linkedin", "linkedin"),
    ("github", "github"),
    ("portfolio", "portfolio"),
    ("bio", "bio"),
    ("availability", "availability"),
    ("skills", "skills"),
    ("languages", "languages"),
    ("interests", "interests"),
]


@dataclass
class ProfileRecord:
    """
    The master profile: the user's structured career data.
    This is the single source of truth that both renderers consume.
    """
    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""
    portfolio: str = ""
    bio: str = ""
    availability: str = ""
    skills: str = ""  # Comma-joined
    languages: str = ""
    interests: str = ""
    experiences: List[Experience] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    certifications: List[Certification] = field(default_factory=list)

    def skill_list(self) -> List[str]:
        """Canonical skill list: comma split, trimmed, empties dropped."""
        return [s.strip() for s in self.skills.split(",") if s.strip()]

    def copy(self) -> "ProfileRecord":
        return ProfileRecord.from_dict(self.to_dict())

    # --- id-addressed editing -------------------------------------------

    def _section(self, section: str) -> list:
        if section not in SECTIONS:
            raise KeyError(f"Unknown section: {section}")
        return getattr(self, section)

    def add_entry(self, section: str, entry) -> None:
        entries = self._section(section)
        if any(e.id == entry.id for e in entries):
            raise KeyError(f"Duplicate id in {section}: {entry.id}")
        entries.append(entry)

    def update_entry(self, section: str, entry_id: str, **changes) -> None:
        entries = self._section(section)
        for index, entry in enumerate(entries):
            if entry.id == entry_id:
                entries[index] = replace(entry, **changes)
                return
        raise KeyError(f"No entry '{entry_id}' in {section}")

    def remove_entry(self, section: str, entry_id: str) -> None:
        entries = self._section(section)
        for index, entry in enumerate(entries):
            if entry.id == entry_id:
                del entries[index]
                return
        raise KeyError(f"No entry '{entry_id}' in {section}")

    def set_field(self, key: str, value: str) -> None:
        """Sets a top-level text field by export key or attribute name."""
        attr = attr_name(key)
        if attr not in dict(_SCALAR_FIELDS):
            raise KeyError(f"Unknown profile field: {key}")
        setattr(self, attr, value)

    # --- JSON mapping ---------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict, defaults: "ProfileRecord" = None) -> "ProfileRecord":
        """
        Builds a profile from its JSON shape. Absent fields take the value
        from `defaults` (or the empty profile).
        Child collections must be lists of objects.
        """
        base = defaults.to_dict() if defaults else cls().to_dict()
        merged = {**base, **data}

        kwargs = {}
        for attr, key in _SCALAR_FIELDS:
            kwargs[attr] = _str(merged.get(key))
        for section, record_cls in SECTIONS.items():
            kwargs[section] = [record_cls.from_dict(item) for item in merged.get(section) or []]
        return cls(**kwargs)

    def to_dict(self) -> dict:
        data = {key: getattr(self, attr) for attr, key in _SCALAR_FIELDS}
        for section in SECTIONS:
            data[section] = [entry.to_dict() for entry in getattr(self, section)]
        return data


@dataclass
class ApplicationPackage:
    """The generation service's tailored output for one job offer."""
    match_score: int
    missing_skills: List[str]
    extracted_job_title: str
    extracted_company: str
    optimized_profile: ProfileRecord
    cover_letter: str
    analysis: str = ""


def format_phone(phone: str) -> str:
    """
    Normalises a French phone number: whitespace removed and a leading
    "0" replaced by the "+33 " prefix.
    """
    if not phone:
        return ""
    p = re.sub(r"\s", "", phone)
    return "+33 " + p[1:] if p.startswith("0") else p


def safe_file_stem(name: str) -> str:
    """Every character outside [A-Za-z0-9] becomes an underscore."""
    return re.sub(r"[^A-Za-z0-9]", "_", name or "")
