import logging
from pathlib import Path
from typing import List, Optional

from .lang import HANDLERS, BaseHandler
from .lang.handler import Runner
from .tools.run_command import run_command
from .utils.exceptions import LibraryInstallError, UnsupportedLanguageError

logger = logging.getLogger(__name__)


class Injector:
    """Language-specific source and dependency manipulation for the test file.

    The handler is chosen once from the language tag; every operation after
    that goes through the handler.
    """

    def __init__(self, language: str, runner: Optional[Runner] = None, cwd: Optional[str] = None):
        self.language = language.lower()
        self.runner = runner or run_command
        self.cwd = cwd
        self.lang_handler = self._get_lang_handler(self.language)

    def _get_lang_handler(self, language: str) -> BaseHandler:
        handler_cls = HANDLERS.get(language)
        if handler_cls is None:
            raise UnsupportedLanguageError(language)
        return handler_cls(runner=self.runner, cwd=self.cwd)

    def library_installed(self) -> List[str]:
        return self.lang_handler.library_installed()

    def install_libraries(self, library_commands: str, installed_packages: List[str]) -> List[str]:
        """Run each install command whose package is not installed yet.

        Returns the packages this call installed. A failing command raises
        ``LibraryInstallError`` whose ``installed`` lists the packages
        installed before the failure.
        """
        new_installed_packages: List[str] = []
        library_commands = library_commands.strip()
        if not library_commands or library_commands == '""':
            return new_installed_packages

        installed = set(installed_packages)
        for command in library_commands.split("\n"):
            command = command.strip()
            if not command or command.startswith("```"):
                continue
            package_name = self.lang_handler.package_name(command)
            if package_name and package_name in installed:
                continue

            logger.info(f"Installing library with command: {command}")
            result = self.runner(command, self.cwd)
            if result.returncode != 0:
                raise LibraryInstallError(
                    f"failed to install library: {command}",
                    installed=new_installed_packages,
                    details=(result.stderr or result.stdout).strip()[:500],
                )
            if package_name:
                installed.add(package_name)
                new_installed_packages.append(package_name)
        return new_installed_packages

    def uninstall_libraries(self, installed_packages: List[str]) -> None:
        self.lang_handler.uninstall_libraries(installed_packages)

    def update_imports(self, file_path: str, imports: str) -> int:
        """Merge ``imports`` into the file at ``file_path`` and return the line delta."""
        new_imports = [imp.strip() for imp in imports.split("\n") if not imp.strip().startswith("```")]
        path = Path(file_path)
        content = path.read_bytes().decode("utf-8")
        updated_content, import_length = self.lang_handler.update_imports(content, new_imports)
        if updated_content != content:
            path.write_bytes(updated_content.encode("utf-8"))
        return import_length

    def add_comment_to_test(self, test_code: str) -> str:
        return self.lang_handler.add_comment_to_test(test_code)
