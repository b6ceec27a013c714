import re
from typing import List

from .handler import BaseHandler
from ..utils.exceptions import ImportMergeError

IMPORT_BLOCK_RE = re.compile(r'^import\s*(\([\s\S]*?\)|(?:[\w.]+\s+)?"[^"]+")', re.MULTILINE)
PACKAGE_RE = re.compile(r'^package\s+\w+', re.MULTILINE)


class GoHandler(BaseHandler):
    language = "go"

    def library_installed(self) -> List[str]:
        out = self._run_listing("go list -m all")
        return [line.split()[0] for line in self.extract_string(out)]

    def uninstall_command(self, package: str) -> str:
        return f"go mod edit -droprequire {package} && go mod tidy"

    def strip_version(self, package: str) -> str:
        return package.split("@", 1)[0]

    def merge_imports(self, content: str, new_imports: List[str]) -> str:
        match = IMPORT_BLOCK_RE.search(content)
        new_entries = [e for e in self.extract_go_imports(new_imports) if e]

        if match:
            existing = self._block_entries(match.group(1))
            existing_set = {e for e in existing if e}
            all_imports = list(existing)
            for entry in new_entries:
                if entry not in existing_set:
                    existing_set.add(entry)
                    all_imports.append(entry)
            if len(all_imports) == len(existing):
                return content
            import_block = self.create_go_import_block(all_imports)
            return content[:match.start()] + import_block + content[match.end():]

        pkg_match = PACKAGE_RE.search(content)
        if pkg_match is None:
            raise ImportMergeError("could not find package declaration")
        unique = list(dict.fromkeys(new_entries))
        if not unique:
            return content
        import_block = self.create_go_import_block(unique)
        insert_pos = pkg_match.end()
        return content[:insert_pos] + "\n\n" + import_block + content[insert_pos:]

    def _block_entries(self, block: str) -> List[str]:
        if not block.startswith("("):
            return [self._normalize_entry(block)]
        entries = [self._normalize_entry(line) for line in block[1:-1].split("\n")]
        while entries and not entries[0]:
            entries.pop(0)
        while entries and not entries[-1]:
            entries.pop()
        return entries

    def extract_go_imports(self, import_lines: List[str]) -> List[str]:
        imports = []
        for line in import_lines:
            line = line.strip()
            if line in ("import (", "import(", "(", ")"):
                continue
            imports.append(self._normalize_entry(line))
        return imports

    def _normalize_entry(self, line: str) -> str:
        line = line.strip()
        if line.startswith("import"):
            line = line[len("import"):].strip()
        line = line.split("//", 1)[0].strip()
        if not line:
            return ""
        if '"' not in line:
            parts = line.split()
            if len(parts) == 2:
                return f'{parts[0]} "{parts[1]}"'
            return f'"{line}"'
        return " ".join(line.split())

    def create_go_import_block(self, imports: List[str]) -> str:
        import_block = "import (\n"
        for import_line in imports:
            if not import_line:
                import_block += "\n"
                continue
            import_block += f"\t{import_line}\n"
        import_block += ")"
        return import_block
