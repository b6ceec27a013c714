"""
utgen CLI

Generates unit tests that raise the line coverage of a source file:

    utgen --source-file-path app/calc.py --test-file-path tests/test_calc.py \
          --test-command "pytest --cov=app --cov-report=xml" \
          --coverage-report-path coverage.xml

Without --source-file-path every file reported below 100% coverage is processed.
"""

import argparse
import logging
import signal
import sys
import threading
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from . import __version__
from .agent import UnitTestGenerator
from .core.config import GenSettings
from .core.logging import log_error, log_info, log_warning, setup_logging
from .tools.coverage import SUPPORTED_FORMATS
from .utils.exceptions import GenerationCancelled, UTGenException

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELLED = 130

# argparse dest -> GenSettings field
SETTINGS_FLAGS = (
    "source_file_path",
    "test_file_path",
    "test_command",
    "test_dir",
    "coverage_report_path",
    "coverage_format",
    "desired_coverage",
    "max_iterations",
    "model",
    "api_base_url",
    "api_key",
    "llm_timeout",
    "additional_prompt",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="utgen",
        description="Generate unit tests until a source file reaches the desired coverage",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--source-file-path", "-s", help="Source file to generate tests for")
    parser.add_argument("--test-file-path", "-t", help="Test file new tests are written to")
    parser.add_argument("--test-command", "-c", help="Command that runs the tests and writes the coverage report")
    parser.add_argument("--test-dir", "-d", help="Directory the test command runs in (default: .)")
    parser.add_argument("--coverage-report-path", help="Coverage report written by the test command")
    parser.add_argument("--coverage-format", choices=SUPPORTED_FORMATS, help="Coverage report format")
    parser.add_argument("--desired-coverage", type=float, help="Target line coverage in percent (default: 80)")
    parser.add_argument("--max-iterations", type=int, help="Generation rounds per file (default: 5)")
    parser.add_argument("--model", help="Model id sent to the chat-completion endpoint")
    parser.add_argument("--api-base-url", help="Base URL of an OpenAI-compatible API")
    parser.add_argument("--api-key", help="API key (prefer UTGEN_API_KEY)")
    parser.add_argument("--llm-timeout", type=int, help="Model request timeout in seconds")
    parser.add_argument("--additional-prompt", help="Extra instructions appended to the generation prompt")
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress ticker")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def settings_from_args(args: argparse.Namespace) -> GenSettings:
    overrides = {
        name: getattr(args, name)
        for name in SETTINGS_FLAGS
        if getattr(args, name, None) is not None
    }
    if args.no_progress:
        overrides["show_progress"] = False
    return GenSettings(**overrides)


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = settings_from_args(args)
    except ValidationError as e:
        log_error(f"Invalid configuration: {e}", source="cli")
        return EXIT_ERROR

    if not settings.api_key:
        log_warning("No API key configured (UTGEN_API_KEY); requests are sent without authorization", source="cli")
    log_info(f"Using model {settings.model} at {settings.api_base_url}", source="cli")

    cancel_event = threading.Event()

    def _on_interrupt(signum, frame):
        cancel_event.set()

    previous_handler = signal.signal(signal.SIGINT, _on_interrupt)
    try:
        generator = UnitTestGenerator(settings)
        generator.start(cancel_event)
    except GenerationCancelled as e:
        log_error(e.message, source="cli")
        return EXIT_CANCELLED
    except UTGenException as e:
        log_error(e.message if not e.details else f"{e.message} ({e.details})", source="cli")
        return EXIT_ERROR
    finally:
        signal.signal(signal.SIGINT, previous_handler)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
