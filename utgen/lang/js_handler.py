import re
from typing import List

from .handler import BaseHandler

IMPORT_LINE_RE = re.compile(
    r"""^(import\s+.*?from\s+['"].*?['"]\s*;?"""
    r"""|import\s+['"].*?['"]\s*;?"""
    r"""|(?:const|let|var)\s+.*?=\s*require\(\s*['"].*?['"]\s*\)\s*;?)\s*$"""
)


class JsHandler(BaseHandler):
    language = "javascript"
    import_pattern = IMPORT_LINE_RE

    def library_installed(self) -> List[str]:
        out = self._run_listing("npm list --depth=0 --parseable")
        packages = []
        for line in self.extract_string(out):
            line = line.replace("\\", "/")
            if "node_modules/" not in line:
                continue
            packages.append(line.rsplit("node_modules/", 1)[1])
        return packages

    def uninstall_command(self, package: str) -> str:
        return f"npm uninstall {package}"

    def strip_version(self, package: str) -> str:
        at = package.find("@", 1)
        if at == -1:
            return package
        return package[:at]

    def merge_imports(self, content: str, new_imports: List[str]) -> str:
        all_imports = []
        existing_imports_set = set()
        body = []
        for line in content.split("\n"):
            if self.import_pattern.match(line):
                statement = line.strip()
                if statement not in existing_imports_set:
                    existing_imports_set.add(statement)
                    all_imports.append(statement)
            else:
                body.append(line)

        added = False
        for imp in new_imports:
            if self.import_pattern.match(imp) and imp not in existing_imports_set:
                existing_imports_set.add(imp)
                all_imports.append(imp)
                added = True
        if not added:
            return content

        while body and not body[0].strip():
            body.pop(0)
        return "\n".join(all_imports) + "\n\n" + "\n".join(body)
