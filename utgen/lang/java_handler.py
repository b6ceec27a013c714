import re
from typing import List

from .handler import BaseHandler

IMPORT_RE = re.compile(r'^import\s+.*?;', re.MULTILINE)
PACKAGE_RE = re.compile(r'^package\s+.*?;', re.MULTILINE)
DEPENDENCY_RE = re.compile(r'^\[INFO\]\s*[+|\\\-]{0,2}\s*([\w.\-]+:[\w.\-]+):jar:([\w.\-]+):([\w.\-]+)')
ARTIFACT_RE = re.compile(r'-Dartifact=([\w.\-]+):([\w.\-]+)')


class JavaHandler(BaseHandler):
    language = "java"

    def library_installed(self) -> List[str]:
        out = self._run_listing("mvn dependency:list -DincludeScope=compile -Dstyle.color=never -B")
        return self.extract_java_dependencies(out)

    def uninstall_command(self, package: str) -> str:
        return f"mvn dependency:purge-local-repository -DreResolve=false -Dinclude={package}"

    def package_name(self, install_command: str) -> str:
        match = ARTIFACT_RE.search(install_command)
        if match:
            return f"{match.group(1)}:{match.group(2)}"
        return super().package_name(install_command)

    def merge_imports(self, content: str, new_imports: List[str]) -> str:
        existing_matches = list(IMPORT_RE.finditer(content))
        existing_imports_set = {self._normalize(m.group(0)) for m in existing_matches}

        imports_to_add = []
        for import_statement in new_imports:
            import_statement = import_statement.strip().lstrip("-*").strip().strip('"').strip()
            if not IMPORT_RE.match(import_statement):
                continue
            normalized = self._normalize(import_statement)
            if normalized in existing_imports_set:
                continue
            existing_imports_set.add(normalized)
            imports_to_add.append(normalized)

        if not imports_to_add:
            return content

        imported_content = "\n".join(imports_to_add)
        if existing_matches:
            insert_pos = existing_matches[-1].end()
            return content[:insert_pos] + "\n" + imported_content + content[insert_pos:]

        pkg_match = PACKAGE_RE.search(content)
        if pkg_match:
            insert_pos = pkg_match.end()
            return content[:insert_pos] + "\n\n" + imported_content + content[insert_pos:]

        return imported_content + "\n\n" + content

    def _normalize(self, statement: str) -> str:
        return " ".join(statement.split())

    def extract_java_dependencies(self, output: str) -> List[str]:
        dependencies = []
        in_dependency_section = False

        for line in output.split("\n"):
            cleaned_line = line.strip()
            if cleaned_line.startswith("[INFO]"):
                cleaned_line = "[INFO] " + cleaned_line[6:].strip()
            if "maven-dependency-plugin" in cleaned_line and ":list" in cleaned_line:
                in_dependency_section = True
                continue

            if in_dependency_section and ("BUILD SUCCESS" in cleaned_line or "---" in cleaned_line):
                in_dependency_section = False
                continue

            if not in_dependency_section or not cleaned_line.startswith("[INFO]"):
                continue

            match = DEPENDENCY_RE.match(cleaned_line)
            if match:
                dependencies.append(match.group(1))
                continue

            cleaned_line = cleaned_line[len("[INFO]"):].strip()
            for prefix in ("+-", "\\-", "|"):
                if cleaned_line.startswith(prefix):
                    cleaned_line = cleaned_line[len(prefix):]
            dep_parts = cleaned_line.strip().split(":")
            if len(dep_parts) >= 5:
                dependencies.append(f"{dep_parts[0]}:{dep_parts[1]}")
        return dependencies
