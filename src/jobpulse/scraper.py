
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
Client for the scraping helper service.

  GET  /ping                          liveness
  POST /api/scrape {"url": ...}   ->  {"extracted_text": ...} or {"error": ...}

The helper runs on a free hosting tier that sleeps when idle; the first call
after a pause can take close to a minute.
"""

import logging

import requests

from jobpulse.config import get_ca_bundle
from jobpulse.errors import ScrapeError

logger = logging.getLogger(__name__)

PING_TIMEOUT = 10
SCRAPE_TIMEOUT = 90

UNREACHABLE_DIAGNOSTIC = (
    "IMPOSSIBLE DE JOINDRE LE SERVEUR.\n\n"
    "Diagnostic possible :\n"
    "1. Le serveur est en train de se réveiller (environ 50 secondes pour le premier appel).\n"
    "2. L'URL du backend est incorrecte.\n"
    "3. CORS bloque la requête (vérifie que flask_cors est bien actif sur le serveur)."
)


class ScraperClient:
    def __init__(self, base_url: str, timeout: float = SCRAPE_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def ping(self) -> bool:
        """True when the helper answers /ping in time."""
        try:
            response = requests.get(f"{self.base_url}/ping", timeout=PING_TIMEOUT, verify=get_ca_bundle())
        except requests.exceptions.RequestException as e:
            logger.warning(f"Scraper ping failed: {e}")
            return False
        logger.info(f"Scraper ping: HTTP {response.status_code}")
        return response.ok

    def scrape(self, url: str) -> str:
        """
        Asks the helper to extract the job offer text at `url`.
        Raises ScrapeError with a displayable message.
        """
        endpoint = f"{self.base_url}/api/scrape"
        logger.info(f"Calling scraper: {endpoint}")
        try:
            response = requests.post(endpoint, json={"url": url}, timeout=self.timeout, verify=get_ca_bundle())
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.error(f"Scraper unreachable: {e}")
            raise ScrapeError("Erreur de connexion au serveur.", diagnostic=UNREACHABLE_DIAGNOSTIC) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Scraper request failed: {e}")
            raise ScrapeError(str(e)) from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not response.ok:
            raise ScrapeError(data.get("error") or f"Erreur serveur: {response.status_code}")

        text = data.get("extracted_text")
        if not isinstance(text, str) or not text.strip():
            raise ScrapeError("Aucun texte extrait de la page.")

        logger.info(f"    > Extracted {len(text)} characters")
        return text
