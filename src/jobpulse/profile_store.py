
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
Local persistence for the master profile.

The store is a small JSON document used as a key-value map; the profile
lives under a fixed key so other state can share the same file.
"""

import json
import logging
from pathlib import Path

from jobpulse.errors import ProfileImportError
from jobpulse.models import ProfileRecord, SECTIONS

logger = logging.getLogger(__name__)

PROFILE_KEY = "jobpulse_master_profile"
EXPORT_FILENAME = "mon_profil_jobpulse.json"

DEFAULT_PROFILE = ProfileRecord()


class ProfileStore:
    def __init__(self, path, key: str = PROFILE_KEY, defaults: ProfileRecord = None):
        self.path = Path(path)
        self.key = key
        self.defaults = defaults or DEFAULT_PROFILE

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable store {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def has_profile(self) -> bool:
        return self.key in self._read_all()

    def load(self) -> ProfileRecord:
        """
        Returns the saved profile. Anything missing or invalid falls back
        to the defaults; loading never fails.
        """
        raw = self._read_all().get(self.key)
        if raw is None:
            return self.defaults.copy()
        try:
            parsed = json.loads(raw) if isinstance(raw, str) else raw
            if not isinstance(parsed, dict):
                raise ValueError("profile is not an object")
            if not isinstance(parsed.get("certifications"), list):
                parsed = {**parsed, "certifications": [c.to_dict() for c in self.defaults.certifications]}
            return ProfileRecord.from_dict(parsed, defaults=self.defaults)
        except (ValueError, TypeError, AttributeError) as e:
            logger.error(f"Failed to parse stored profile: {e}")
            return self.defaults.copy()

    def save(self, profile: ProfileRecord) -> None:
        data = self._read_all()
        data[self.key] = json.dumps(profile.to_dict(), ensure_ascii=False)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        logger.debug(f"Profile saved to {self.path}")

    def export_profile(self, profile: ProfileRecord, path) -> Path:
        path = Path(path)
        if path.is_dir():
            path = path / EXPORT_FILENAME
        with open(path, "w", encoding="utf-8") as f:
            json.dump(profile.to_dict(), f, indent=2, ensure_ascii=False)
        logger.info(f"Profile exported to {path}")
        return path

    def import_profile(self, path) -> ProfileRecord:
        """
        Loads a profile from an exported JSON file, merges in defaults and
        saves it. Raises ProfileImportError (store untouched) on a bad file.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                parsed = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error parsing JSON from {path}: {e}")
            raise ProfileImportError("Erreur lors de la lecture du fichier.") from e

        if not parsed or not isinstance(parsed, dict):
            raise ProfileImportError("Le fichier JSON semble invalide.")

        if not isinstance(parsed.get("certifications"), list):
            parsed = {**parsed, "certifications": []}

        for section in SECTIONS:
            value = parsed.get(section)
            if value is None:
                continue
            if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
                raise ProfileImportError("Le fichier JSON semble invalide.")

        profile = ProfileRecord.from_dict(parsed, defaults=self.defaults)
        self.save(profile)
        logger.info(f"Profile imported from {path}")
        return profile
