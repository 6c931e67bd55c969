
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
Runtime settings, read from the environment.

Environment variables:
  GEMINI_API_KEY / OPENAI_API_KEY   generation service credentials
  JOBPULSE_HOME                     working directory for profile, logs and output
  JOBPULSE_SCRAPER_URL              base URL of the scraping helper
  JOBPULSE_OUTPUT_DIR               where generated PDFs are written

CA bundle resolution for proxy environments checks (in priority order):
  1. Explicit override via --ca-bundle CLI arg
  2. REQUESTS_CA_BUNDLE, CURL_CA_BUNDLE, SSL_CERT_FILE
  3. System defaults (True)
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_HOME = "user_content"
DEFAULT_SCRAPER_URL = "https://jobpulse-helper.onrender.com"

# Checked in order after the --ca-bundle flag
CA_BUNDLE_ENV_VARS = ("REQUESTS_CA_BUNDLE", "CURL_CA_BUNDLE", "SSL_CERT_FILE")
# Set by the CLI --ca-bundle flag
_ca_bundle_override: str | None = None


@dataclass
class Settings:
    api_key: str | None
    home: Path
    scraper_url: str
    output_dir: Path

    @property
    def store_path(self) -> Path:
        return self.home / "storage.json"

    @property
    def log_dir(self) -> Path:
        return self.home / "logs"

    @classmethod
    def from_env(cls) -> "Settings":
        home = Path(os.environ.get("JOBPULSE_HOME", DEFAULT_HOME))
        output_dir = os.environ.get("JOBPULSE_OUTPUT_DIR")
        return cls(
            api_key=os.environ.get("GEMINI_API_KEY") or os.environ.get("OPENAI_API_KEY"),
            home=home,
            scraper_url=os.environ.get("JOBPULSE_SCRAPER_URL", DEFAULT_SCRAPER_URL).rstrip("/"),
            output_dir=Path(output_dir) if output_dir else home / "generated",
        )


def set_ca_bundle_override(path: str | None) -> None:
    """--ca-bundle flag; an empty value clears it."""
    global _ca_bundle_override
    _ca_bundle_override = path or None
    if _ca_bundle_override:
        logger.info(f"Outbound HTTPS will trust {_ca_bundle_override}")


def get_ca_bundle() -> str | bool:
    """The `verify=` value for requests calls: a bundle path, or True."""
    if _ca_bundle_override:
        return _ca_bundle_override
    found = next(((var, os.environ[var]) for var in CA_BUNDLE_ENV_VARS if os.environ.get(var)), None)
    if found is None:
        return True
    logger.debug(f"{found[0]} supplies the CA bundle: {found[1]}")
    return found[1]


def configure_ssl_env() -> str | bool:
    """
    The LLM SDKs build their own httpx clients and only read SSL_CERT_FILE,
    so a bundle chosen here is mirrored into it. Returns the bundle.
    """
    bundle = get_ca_bundle()
    if isinstance(bundle, str) and os.environ.get("SSL_CERT_FILE") != bundle:
        os.environ["SSL_CERT_FILE"] = bundle
        logger.debug(f"SSL_CERT_FILE={bundle} for the LLM client")
    return bundle
