import re
from typing import Dict, List, Optional, Tuple

from .handler import BaseHandler, COMMENT_PREFIX_HASH
from ..constants import PYTHON_KEEP_MARKER

FROM_IMPORT_RE = re.compile(r'^from\s+(\S+)\s+import\s+(.+)$')
PLAIN_IMPORT_RE = re.compile(r'^import\s+\S')
VERSION_SPLIT_RE = re.compile(r'[<>=!~\[;@ ]')


class _ModuleImports:
    def __init__(self, marked: bool = False, anchor: Optional[int] = None):
        self.symbols: Dict[str, None] = {}
        self.marked = marked
        self.anchor = anchor

    def render(self, module: str) -> str:
        return f"from {module} import {', '.join(sorted(self.symbols))}"


class PythonHandler(BaseHandler):
    language = "python"
    comment_prefix = COMMENT_PREFIX_HASH

    def library_installed(self) -> List[str]:
        result = self.runner("pip freeze", self.cwd)
        if result.returncode != 0:
            self.logger.info("Error getting Python dependencies with `pip` command, trying `pip3` command")
            return self.extract_python_packages(self._run_listing("pip3 freeze"))
        return self.extract_python_packages(result.stdout)

    def extract_python_packages(self, output: str) -> List[str]:
        packages = []
        for line in self.extract_string(output):
            if line.startswith(("-e", "#")):
                continue
            packages.append(self.normalize_package(line.split(" @ ", 1)[0].split("==", 1)[0]))
        return packages

    def uninstall_command(self, package: str) -> str:
        return f"pip uninstall -y {package}"

    def strip_version(self, package: str) -> str:
        return VERSION_SPLIT_RE.split(package, 1)[0]

    def normalize_package(self, package: str) -> str:
        return super().normalize_package(package).lower().replace("_", "-")

    def merge_imports(self, content: str, new_imports: List[str]) -> str:
        lines = content.split("\n")
        modules: Dict[str, _ModuleImports] = {}
        from_lines: Dict[int, str] = {}
        existing_plain = set()
        first_import_idx = None

        for idx, line in enumerate(lines):
            if line != line.lstrip():
                continue
            parsed = self._parse_from_import(line)
            if parsed:
                module, symbols = parsed
                marked = PYTHON_KEEP_MARKER in line
                entry = modules.setdefault(module, _ModuleImports())
                if marked and not entry.marked:
                    entry.marked = True
                    entry.anchor = idx
                for symbol in symbols:
                    entry.symbols[symbol] = None
                from_lines[idx] = module
            elif PLAIN_IMPORT_RE.match(line):
                existing_plain.add(self._normalize_plain(line))
            else:
                continue
            if first_import_idx is None:
                first_import_idx = idx

        changed = False
        new_plain = []
        for imp in new_imports:
            parsed = self._parse_from_import(imp)
            if parsed:
                module, symbols = parsed
                entry = modules.get(module)
                if entry is None:
                    entry = modules[module] = _ModuleImports()
                for symbol in symbols:
                    if symbol not in entry.symbols:
                        entry.symbols[symbol] = None
                        changed = True
            elif PLAIN_IMPORT_RE.match(imp):
                normalized = self._normalize_plain(imp)
                if normalized not in existing_plain:
                    existing_plain.add(normalized)
                    new_plain.append(normalized)
                    changed = True

        if not changed:
            return content

        top_block = [entry.render(module) for module, entry in modules.items() if not entry.marked and entry.symbols]
        top_block.extend(new_plain)
        insert_at = first_import_idx if first_import_idx is not None else 0

        updated_lines = []
        for idx, line in enumerate(lines):
            if idx == insert_at:
                updated_lines.extend(top_block)
            module = from_lines.get(idx)
            if module is None:
                updated_lines.append(line)
                continue
            entry = modules[module]
            if entry.marked and entry.anchor == idx:
                updated_lines.append(f"{entry.render(module)} {PYTHON_KEEP_MARKER}")
        return "\n".join(updated_lines)

    def _parse_from_import(self, line: str) -> Optional[Tuple[str, List[str]]]:
        statement = line.split("#", 1)[0].strip()
        match = FROM_IMPORT_RE.match(statement)
        if not match:
            return None
        names = match.group(2).strip()
        if names.startswith("("):
            if not names.endswith(")"):
                return None
            names = names[1:-1]
        elif names.endswith("\\"):
            return None
        symbols = [" ".join(name.split()) for name in names.split(",")]
        symbols = [name for name in symbols if name]
        if not symbols:
            return None
        return match.group(1), symbols

    def _normalize_plain(self, line: str) -> str:
        return " ".join(line.split("#", 1)[0].split())
