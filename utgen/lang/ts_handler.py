import re

from .js_handler import JsHandler

TS_IMPORT_LINE_RE = re.compile(
    r"""^(import\s+(?:type\s+)?.*?from\s+['"].*?['"]\s*;?"""
    r"""|import\s+['"].*?['"]\s*;?"""
    r"""|import\s+\w+\s*=\s*require\(\s*['"].*?['"]\s*\)\s*;?"""
    r"""|(?:const|let|var)\s+.*?=\s*require\(\s*['"].*?['"]\s*\)\s*;?)\s*$"""
)


class TsHandler(JsHandler):
    language = "typescript"
    import_pattern = TS_IMPORT_LINE_RE
