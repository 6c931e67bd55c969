
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
Main entry point for the JobPulse CLI.
"""

import argparse
import json
import logging
import sys
from collections import deque
from pathlib import Path

from rich.console import Console
from rich.live import Live
from rich.text import Text

from jobpulse.config import Settings, set_ca_bundle_override
from jobpulse.cv_renderer import render_cv
from jobpulse.errors import JobPulseError, ScrapeError
from jobpulse.ingest import read_job_text, read_text
from jobpulse.letter_renderer import render_letter
from jobpulse.llm_client import APPLICATION_TYPES, LLMClient
from jobpulse.models import SECTIONS, entry_changes
from jobpulse.pdf_writer import save_document
from jobpulse.profile_store import ProfileStore
from jobpulse.scraper import ScraperClient

logger = logging.getLogger(__name__)

console = Console()


class StatusLogHandler(logging.Handler):
    """
    Keeps the last N log lines for a scrolling status display.
    """
    def __init__(self, console, maxlen=5):
        super().__init__()
        self.console = console
        self.logs = deque(maxlen=maxlen)
        self.live = None

    def emit(self, record):
        try:
            self.logs.append(self.format(record))
            if self.live:
                self.live.update(self.get_renderable())
        except Exception:
            self.handleError(record)

    def get_renderable(self):
        return Text("\n".join(self.logs), style="dim grey50")


def setup_logging(verbosity: int, log_dir: Path, quiet: bool = False, custom_handler: logging.Handler = None):
    """
    Configures logging:
    - File: <home>/logs/jobpulse.log (DEBUG)
    - Console: -q=ERROR, default=INFO, -v=WARNING..DEBUG
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    file_handler = logging.FileHandler(log_dir / "jobpulse.log")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    root.addHandler(file_handler)

    if quiet:
        level = logging.ERROR
    elif verbosity == 1:
        level = logging.WARNING
    elif verbosity >= 3:
        level = logging.DEBUG
    else:
        level = logging.INFO

    handler = custom_handler or logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter('%(message)s'))
    root.addHandler(handler)

    # Silence some noisy libs if not in super debug
    if verbosity < 3:
        for name in ("httpx", "httpcore", "urllib3", "google_genai"):
            logging.getLogger(name).setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobpulse", description="Tailored CV and cover letter generator")
    parser.add_argument("--home", help="Working directory for profile, logs and output (default: $JOBPULSE_HOME or user_content)")
    parser.add_argument("--output-dir", help="Where generated PDFs are written")
    parser.add_argument("--scraper-url", help="Base URL of the scraping helper")
    parser.add_argument("--ca-bundle", help="Path to a custom CA certificate bundle for HTTPS verification (proxy environments)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase output verbosity (-v=WARNING, -vv=INFO, -vvv=DEBUG)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress status output (ERROR only)")

    commands = parser.add_subparsers(dest="command", required=True)

    profile = commands.add_parser("profile", help="Show, export, import or edit the master profile")
    profile_commands = profile.add_subparsers(dest="action", required=True)
    profile_commands.add_parser("show", help="Print the stored profile as JSON")
    export = profile_commands.add_parser("export", help="Write the profile to a JSON file")
    export.add_argument("file")
    imp = profile_commands.add_parser("import", help="Replace the profile with a JSON file")
    imp.add_argument("file")
    remove = profile_commands.add_parser("remove", help="Remove an entry by id")
    remove.add_argument("section", choices=sorted(SECTIONS))
    remove.add_argument("entry_id")
    add = profile_commands.add_parser("add", help="Add an entry, e.g. experiences company=Acme isCurrent=true")
    add.add_argument("section", choices=sorted(SECTIONS))
    add.add_argument("values", nargs="+", metavar="FIELD=VALUE")
    update = profile_commands.add_parser("update", help="Change fields of an entry by id")
    update.add_argument("section", choices=sorted(SECTIONS))
    update.add_argument("entry_id")
    update.add_argument("values", nargs="+", metavar="FIELD=VALUE")
    set_cmd = profile_commands.add_parser("set", help="Set a top-level field, e.g. bio or fullName")
    set_cmd.add_argument("field")
    set_cmd.add_argument("value")

    commands.add_parser("ping", help="Check that the scraping helper is awake")

    scrape = commands.add_parser("scrape", help="Extract a job offer's text through the scraping helper")
    scrape.add_argument("url")
    scrape.add_argument("--save", help="Also write the text to this file")

    generate = commands.add_parser("generate", help="Tailor the profile to a job offer and render both PDFs")
    source = generate.add_mutually_exclusive_group(required=True)
    source.add_argument("--jd", help="URL or file path (txt, docx, pdf) of the job description")
    source.add_argument("--scrape", metavar="URL", help="Job offer URL extracted through the scraping helper")
    generate.add_argument("--type", choices=APPLICATION_TYPES, default="alternance", help="Application type")

    render_cv_cmd = commands.add_parser("render-cv", help="Render the stored profile as a CV")
    render_cv_cmd.add_argument("--title", default="", help="Target job title shown under the name")

    render_letter_cmd = commands.add_parser("render-letter", help="Render a cover letter from a body text file")
    render_letter_cmd.add_argument("--company", required=True)
    render_letter_cmd.add_argument("--title", required=True, help="Job title for the subject line")
    render_letter_cmd.add_argument("--body", required=True, help="Text file holding the letter body")

    # Also accepted after the subcommand; SUPPRESS keeps the global value when absent
    for sub in (generate, render_cv_cmd, render_letter_cmd):
        sub.add_argument("--output-dir", default=argparse.SUPPRESS, help="Where generated PDFs are written")

    return parser


def resolve_settings(args) -> Settings:
    settings = Settings.from_env()
    if args.home:
        settings.home = Path(args.home)
        if not args.output_dir:
            settings.output_dir = settings.home / "generated"
    if args.output_dir:
        settings.output_dir = Path(args.output_dir)
    if args.scraper_url:
        settings.scraper_url = args.scraper_url.rstrip("/")
    return settings


def main(argv=None):
    try:
        sys.exit(_main_cli(argv))
    except KeyboardInterrupt:
        # Use stderr so it captures attention even if stdout is redirected or rich
        sys.stderr.write("\n\033[31m[-] Cancelled by user\033[0m\n")
        sys.exit(130)


def _main_cli(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.ca_bundle:
        set_ca_bundle_override(args.ca_bundle)
    settings = resolve_settings(args)

    if args.quiet:
        setup_logging(0, settings.log_dir, quiet=True)
    elif args.verbose == 0 and args.command == "generate":
        # Long-running: stream the latest log lines in place
        status_handler = StatusLogHandler(console)
        setup_logging(2, settings.log_dir, custom_handler=status_handler)
        with Live(status_handler.get_renderable(), refresh_per_second=4, console=console) as live:
            status_handler.live = live
            logger.info("--- JobPulse ---")
            code = run_command(args, settings)
        return code
    else:
        setup_logging(args.verbose or 2, settings.log_dir)

    return run_command(args, settings)


def run_command(args, settings: Settings) -> int:
    """Runs the parsed command; user-visible failures become exit code 1."""
    handlers = {
        "profile": _profile,
        "ping": _ping,
        "scrape": _scrape,
        "generate": _generate,
        "render-cv": _render_cv,
        "render-letter": _render_letter,
    }
    try:
        return handlers[args.command](args, settings)
    except ScrapeError as e:
        logger.error(str(e))
        if e.diagnostic:
            logger.error(e.diagnostic)
        return 1
    except JobPulseError as e:
        logger.error(str(e))
        return 1


def _pairs(values) -> dict:
    pairs = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise JobPulseError(f"Expected FIELD=VALUE, got '{item}'")
        pairs[key] = value
    return pairs


def _profile(args, settings: Settings) -> int:
    store = ProfileStore(settings.store_path)

    if args.action == "show":
        console.print_json(json.dumps(store.load().to_dict(), ensure_ascii=False))
        return 0
    if args.action == "export":
        store.export_profile(store.load(), args.file)
        return 0
    if args.action == "import":
        profile = store.import_profile(args.file)
        logger.info(f"Profile of {profile.full_name or '(no name)'} imported")
        return 0

    profile = store.load()
    try:
        if args.action == "remove":
            profile.remove_entry(args.section, args.entry_id)
            logger.info(f"Removed {args.entry_id} from {args.section}")
        elif args.action == "add":
            values = _pairs(args.values)
            entry_changes(args.section, values)
            entry = SECTIONS[args.section].from_dict(values)
            profile.add_entry(args.section, entry)
            logger.info(f"Added {entry.id} to {args.section}")
        elif args.action == "update":
            profile.update_entry(args.section, args.entry_id, **entry_changes(args.section, _pairs(args.values)))
            logger.info(f"Updated {args.entry_id} in {args.section}")
        elif args.action == "set":
            profile.set_field(args.field, args.value)
            logger.info(f"Set {args.field}")
    except KeyError as e:
        logger.error(e.args[0])
        return 1
    store.save(profile)
    return 0


def _ping(args, settings: Settings) -> int:
    online = ScraperClient(settings.scraper_url).ping()
    logger.info(f"Scraper {settings.scraper_url}: {'online' if online else 'offline'}")
    return 0 if online else 1


def _scrape(args, settings: Settings) -> int:
    text = ScraperClient(settings.scraper_url).scrape(args.url)
    if args.save:
        Path(args.save).write_text(text, encoding="utf-8")
        logger.info(f"Job description saved to {args.save}")
    console.print(text, markup=False)
    return 0


def _load_saved_profile(settings: Settings):
    store = ProfileStore(settings.store_path)
    if not store.has_profile():
        raise JobPulseError("Profil manquant ! Complétez ou importez d'abord votre profil (jobpulse profile import).")
    return store.load()


def _generate(args, settings: Settings) -> int:
    if args.scrape:
        logger.info(f"Scraping job offer: {args.scrape}")
        job_text = ScraperClient(settings.scraper_url).scrape(args.scrape)
    else:
        logger.info(f"Ingesting Job Description from: {args.jd}")
        job_text = read_job_text(args.jd)

    profile = _load_saved_profile(settings)

    logger.info(f"Tailoring profile for an application ({args.type})...")
    package = LLMClient(settings.api_key).generate_application_package(profile, job_text, args.type)
    logger.info(f"    > Target: {package.extracted_job_title} @ {package.extracted_company}")

    cv = render_cv(package.optimized_profile, package.extracted_job_title)
    save_document(cv, settings.output_dir)

    letter = render_letter(package.optimized_profile, package.extracted_company,
                           package.extracted_job_title, package.cover_letter)
    save_document(letter, settings.output_dir)

    logger.info("Done!")
    return 0


def _render_cv(args, settings: Settings) -> int:
    profile = _load_saved_profile(settings)
    save_document(render_cv(profile, args.title), settings.output_dir)
    return 0


def _render_letter(args, settings: Settings) -> int:
    profile = _load_saved_profile(settings)
    body = read_text(args.body)
    if not body:
        raise JobPulseError(f"Letter body is empty or unreadable: {args.body}")
    save_document(render_letter(profile, args.company, args.title, body), settings.output_dir)
    return 0


if __name__ == "__main__":
    main()
