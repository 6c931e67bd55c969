
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
Reads job descriptions from local files (text, DOCX, PDF) or straight from a
job board URL when the scraping helper is not used.
"""

import logging

import requests
import urllib3
from bs4 import BeautifulSoup
from docx import Document
from pypdf import PdfReader

from jobpulse.config import get_ca_bundle

urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36"
)


def read_docx(file_path: str) -> str:
    try:
        doc = Document(file_path)
        return '\n'.join(para.text for para in doc.paragraphs)
    except Exception as e:
        logger.error(f"Error reading {file_path}: {e}")
        return ""


def read_pdf(file_path: str) -> str:
    try:
        reader = PdfReader(file_path)
        return '\n'.join(page.extract_text() or "" for page in reader.pages)
    except Exception as e:
        logger.error(f"Error reading PDF {file_path}: {e}")
        return ""


def read_text(file_path: str) -> str:
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read {file_path}: {e}")
        return ""


def _extract_text_from_html(html) -> str:
    """Visible text of a page, one non-empty chunk per line."""
    soup = BeautifulSoup(html, 'html.parser')

    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()

    lines = (line.strip() for line in soup.get_text().splitlines())
    # Break multi-headlines into a line each
    chunks = (phrase.strip() for line in lines for phrase in line.split("  "))
    return '\n'.join(chunk for chunk in chunks if chunk)


def read_url(url: str) -> str:
    """
    Fetches a job offer page and extracts its text. Pages rendered with
    JavaScript come back mostly empty; use the scraping helper for those.
    """
    headers = {'User-Agent': USER_AGENT}
    try:
        try:
            response = requests.get(url, headers=headers, timeout=10, verify=get_ca_bundle())
            response.raise_for_status()
        except requests.exceptions.SSLError:
            logger.warning(f"SSL verification failed for {url}. Retrying without verification (Unsafe)...")
            response = requests.get(url, headers=headers, timeout=10, verify=False)
            response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.error(f"Failed to fetch {url}: {e}")
        return ""

    text = _extract_text_from_html(response.content)
    if len(text) < 50:
        logger.warning("Static fetch returned minimal content. The page probably needs the scraping helper.")
    return text


def read_job_text(source: str) -> str:
    """Dispatches on the source: URL, .docx, .pdf, or plain text."""
    if source.startswith(("http://", "https://")):
        return read_url(source)
    lowered = source.lower()
    if lowered.endswith(".docx"):
        return read_docx(source)
    if lowered.endswith(".pdf"):
        return read_pdf(source)
    return read_text(source)
