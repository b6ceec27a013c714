import logging
import re
from typing import Callable, List, Optional, Tuple

from ..constants import DEFAULT_TEST_COMMENT
from ..models import CommandResult
from ..tools.run_command import run_command
from ..utils.exceptions import LibraryInstallError

COMMENT_PREFIX_SLASH = "//"
COMMENT_PREFIX_HASH = "#"

Runner = Callable[..., CommandResult]


class BaseHandler:
    """Shared behaviour for language handlers.

    Subclasses provide the package manager commands, the comment syntax and
    the import merge for one language. Handlers keep no state besides the
    logger, the command runner and its working directory.
    """

    language = ""
    comment_prefix = COMMENT_PREFIX_SLASH
    install_verbs = ("install", "add", "get", "i")

    def __init__(self, runner: Optional[Runner] = None, cwd: Optional[str] = None, logger: Optional[logging.Logger] = None):
        self.runner = runner or run_command
        self.cwd = cwd
        self.logger = logger or logging.getLogger(f"{__name__}.{self.language or 'base'}")

    # -- dependencies -----------------------------------------------------

    def library_installed(self) -> List[str]:
        raise NotImplementedError

    def uninstall_command(self, package: str) -> str:
        raise NotImplementedError

    def uninstall_libraries(self, installed_packages: List[str]) -> None:
        for package in installed_packages:
            uninstall_command = self.uninstall_command(package)
            self.logger.info(f"Uninstalling library with command: {uninstall_command}")
            result = self.runner(uninstall_command, self.cwd)
            if result.returncode != 0:
                self.logger.warning(f"Failed to uninstall library: {uninstall_command} ({result.stderr.strip()[:200]})")

    def package_name(self, install_command: str) -> str:
        fields = install_command.split()
        for idx, field in enumerate(fields):
            if field not in self.install_verbs:
                continue
            for candidate in fields[idx + 1:]:
                if not candidate.startswith("-"):
                    return self.normalize_package(self.strip_version(candidate))
            break
        if len(fields) < 3:
            return ""
        return self.normalize_package(self.strip_version(fields[2]))

    def strip_version(self, package: str) -> str:
        return package

    def normalize_package(self, package: str) -> str:
        return package.strip().strip("'\"")

    def _run_listing(self, command: str) -> str:
        result = self.runner(command, self.cwd)
        if result.returncode != 0 and not result.stdout.strip():
            raise LibraryInstallError(
                f"failed to get {self.language} dependencies with '{command}'",
                details=result.stderr.strip()[:500],
            )
        return result.stdout

    def extract_string(self, output: str) -> List[str]:
        dependencies = []
        for line in output.split("\n"):
            trimmed = line.strip()
            if trimmed:
                dependencies.append(trimmed)
        return dependencies

    # -- source text --------------------------------------------------------

    def merge_imports(self, content: str, new_imports: List[str]) -> str:
        raise NotImplementedError

    def update_imports(self, content: str, new_imports: List[str]) -> Tuple[str, int]:
        """Merge ``new_imports`` into ``content``.

        Returns the updated content and the number of lines the file grew by
        (never negative).
        """
        new_imports = [imp.strip() for imp in new_imports]
        new_imports = [imp for imp in new_imports if imp and imp != '""']
        if not new_imports:
            return content, 0
        updated_content = self.merge_imports(content, new_imports)
        import_length = updated_content.count("\n") - content.count("\n")
        return updated_content, max(import_length, 0)

    def add_comment_to_test(self, test_code: str) -> str:
        return self.generate_comment(test_code, self.comment_prefix, DEFAULT_TEST_COMMENT)

    def generate_comment(self, test_code: str, comment_prefix: str, description: str) -> str:
        indent = re.match(r"[ \t]*", test_code).group(0)
        comment = f"{indent}{comment_prefix} {description}"
        return f"{comment}\n{test_code}"
