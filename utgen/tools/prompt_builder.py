import logging
from pathlib import Path
from typing import List, Optional

from ..models import Prompt
from ..prompts import prompt_loader

logger = logging.getLogger(__name__)

PROMPT_FILE = "utgen.yml"
PROMPT_KINDS = ("test_generation", "indentation", "insert_line")
MAX_SOURCE_CHARS = 12000
MAX_TEST_CHARS = 12000
MAX_REPORT_CHARS = 6000
DEFAULT_MAX_TESTS = 4


def _read(path: str) -> str:
    file_path = Path(path)
    if not file_path.exists():
        return ""
    return file_path.read_text(encoding="utf-8", errors="replace")


def _numbered(content: str) -> str:
    return "\n".join(f"{i} {line}" for i, line in enumerate(content.split("\n"), start=1))


class PromptBuilder:
    """Render the generator prompts from the templates in ``prompts/utgen.yml``.

    Files are read on every build so the prompt always reflects the test file
    as modified by previously accepted tests.
    """

    def __init__(
        self,
        src_path: str,
        test_path: str,
        code_coverage_report: str,
        language: str,
        additional_instructions: str = "",
        installed_packages: Optional[List[str]] = None,
        max_tests: int = DEFAULT_MAX_TESTS,
    ):
        self.src_path = src_path
        self.test_path = test_path
        self.code_coverage_report = code_coverage_report
        self.language = language
        self.additional_instructions = additional_instructions
        self.installed_packages = installed_packages or []
        self.max_tests = max_tests

    def build_prompt(self, kind: str, failed_test_runs: str = "") -> Prompt:
        if kind not in PROMPT_KINDS:
            raise ValueError(f"unknown prompt kind: {kind}")

        source_file = _read(self.src_path)[:MAX_SOURCE_CHARS]
        test_file = _read(self.test_path)[:MAX_TEST_CHARS]

        failed_tests_section = ""
        if failed_test_runs:
            failed_tests_section = (
                "## Previous iterations failed tests\n"
                "The tests below were generated before and were rejected. Do not repeat them; "
                "use the error messages to avoid the same mistakes.\n\n"
                f"{failed_test_runs}"
            )

        additional_instructions = ""
        if self.additional_instructions:
            additional_instructions = f"## Additional instructions\n{self.additional_instructions}"

        values = {
            "language": self.language,
            "source_file_name": Path(self.src_path).name,
            "source_file_numbered": _numbered(source_file),
            "test_file_name": Path(self.test_path).name,
            "test_file": test_file,
            "test_file_numbered": _numbered(test_file),
            "code_coverage_report": self.code_coverage_report[:MAX_REPORT_CHARS],
            "installed_packages": "\n".join(self.installed_packages),
            "failed_tests_section": failed_tests_section,
            "additional_instructions": additional_instructions,
            "max_tests": self.max_tests,
        }
        system = prompt_loader.get_prompt(PROMPT_FILE, f"{kind}_system").format(**values)
        user = prompt_loader.get_prompt(PROMPT_FILE, f"{kind}_user").format(**values)
        logger.debug(f"Built '{kind}' prompt ({len(system) + len(user)} chars)")
        return Prompt(system=system, user=user)
