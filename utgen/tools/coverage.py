"""Coverage report processing.

Reads the report produced by the project's test command and turns it into a
coverage fraction for one source file (or for the whole report when no file
is targeted, together with the list of files that are not fully covered).

Supported formats:
    cobertura - coverage.py ``coverage xml``, gocov-xml, istanbul ``cobertura`` reporter
    lcov      - istanbul/c8 ``lcov`` reporter, ``go tool cover`` converters
    jacoco    - JaCoCo XML report
"""

import os
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List, Tuple

from ..models import CoverageResult
from ..utils.exceptions import CoverageProcessingError

logger = logging.getLogger(__name__)

# file mtimes can be truncated to whole seconds
MTIME_TOLERANCE_SECONDS = 1.0

SUPPORTED_FORMATS = ("cobertura", "lcov", "jacoco")


class CoverageProcessor:
    """Parse a coverage report of a given format for a given source file."""

    def __init__(self, report_path: str, filename: str, coverage_format: str):
        self.report_path = report_path
        self.filename = self._normalize(filename) if filename else ""
        self.coverage_format = coverage_format.lower()

    def process_coverage_report(self, since: float) -> CoverageResult:
        """
        Parse the report written by a run that started at ``since``.

        Args:
            since: Unix timestamp of the start of the test run that produced the report

        Returns:
            CoverageResult with the fraction (0-1), the raw report and the discovered files

        Raises:
            CoverageProcessingError: If the report is missing, stale, malformed or of an unknown format
        """
        if self.coverage_format not in SUPPORTED_FORMATS:
            raise CoverageProcessingError(f"unsupported coverage format: {self.coverage_format}")

        content = self._read_report(since)
        if self.coverage_format == "cobertura":
            per_file, overall = self._parse_cobertura(content)
        elif self.coverage_format == "lcov":
            per_file, overall = self._parse_lcov(content)
        else:
            per_file, overall = self._parse_jacoco(content)

        if not self.filename:
            files = sorted(path for path, (covered, total) in per_file.items() if total and covered < total)
            return CoverageResult(coverage=overall, report_content=content, files=files)

        covered = total = 0
        matched = False
        for path, (file_covered, file_total) in per_file.items():
            if self._matches(path):
                matched = True
                covered += file_covered
                total += file_total
        if not matched:
            logger.warning(f"{self.filename} not found in coverage report {self.report_path}")
        coverage = covered / total if total else 0.0
        return CoverageResult(coverage=coverage, report_content=content, files=[])

    def _read_report(self, since: float) -> str:
        path = Path(self.report_path)
        if not path.exists():
            raise CoverageProcessingError(f"coverage report not found at {self.report_path}")
        modified = path.stat().st_mtime
        if modified + MTIME_TOLERANCE_SECONDS < since:
            raise CoverageProcessingError(
                f"coverage report {self.report_path} was not updated by the last test run",
                details={"modified": modified, "since": since},
            )
        return path.read_text(encoding="utf-8", errors="replace")

    def _matches(self, report_file: str) -> bool:
        report_file = self._normalize(report_file)
        target = self.filename
        return (
            report_file == target
            or report_file.endswith("/" + target)
            or target.endswith("/" + report_file)
        )

    @staticmethod
    def _normalize(path: str) -> str:
        return os.path.normpath(path).replace("\\", "/")

    def _parse_xml(self, content: str) -> ET.Element:
        try:
            return ET.fromstring(content)
        except ET.ParseError as e:
            raise CoverageProcessingError(f"invalid {self.coverage_format} report: {e}") from e

    def _parse_cobertura(self, content: str) -> Tuple[Dict[str, Tuple[int, int]], float]:
        root = self._parse_xml(content)
        source_root = ""
        source = root.find("sources/source")
        if source is not None and source.text and Path(source.text.strip()).is_dir():
            source_root = source.text.strip()

        per_file: Dict[str, List[int]] = {}
        for cls in root.iter("class"):
            filename = cls.get("filename", "")
            if not filename:
                continue
            if source_root and not os.path.isabs(filename):
                filename = os.path.join(source_root, filename)
            counts = per_file.setdefault(filename, [0, 0])
            lines = cls.find("lines")
            if lines is None:
                continue
            for line in lines.findall("line"):
                counts[1] += 1
                if self._number(line.get("hits", "0"), "hits") > 0:
                    counts[0] += 1

        line_rate = root.get("line-rate")
        if line_rate is not None:
            overall = self._number(line_rate, "line-rate")
        else:
            overall = self._overall(per_file)
        return {k: (v[0], v[1]) for k, v in per_file.items()}, overall

    def _parse_lcov(self, content: str) -> Tuple[Dict[str, Tuple[int, int]], float]:
        per_file: Dict[str, Tuple[int, int]] = {}
        current = None
        lines: Dict[int, int] = {}
        for raw in content.splitlines():
            raw = raw.strip()
            if raw.startswith("SF:"):
                current = raw[3:]
                lines = {}
            elif raw.startswith("DA:") and current is not None:
                parts = raw[3:].split(",")
                try:
                    line_no, hits = int(parts[0]), int(float(parts[1]))
                except (IndexError, ValueError):
                    raise CoverageProcessingError(f"invalid lcov record: {raw}")
                lines[line_no] = max(lines.get(line_no, 0), hits)
            elif raw == "end_of_record" and current is not None:
                covered = sum(1 for hits in lines.values() if hits > 0)
                prev_covered, prev_total = per_file.get(current, (0, 0))
                per_file[current] = (prev_covered + covered, prev_total + len(lines))
                current = None
        return per_file, self._overall(per_file)

    def _parse_jacoco(self, content: str) -> Tuple[Dict[str, Tuple[int, int]], float]:
        root = self._parse_xml(content)
        per_file: Dict[str, Tuple[int, int]] = {}
        for package in root.iter("package"):
            package_name = package.get("name", "")
            for sourcefile in package.findall("sourcefile"):
                path = f"{package_name}/{sourcefile.get('name', '')}" if package_name else sourcefile.get("name", "")
                per_file[path] = self._line_counter(sourcefile)

        report_counter = self._line_counter(root)
        if report_counter[1]:
            overall = report_counter[0] / report_counter[1]
        else:
            overall = self._overall(per_file)
        return per_file, overall

    @staticmethod
    def _line_counter(element: ET.Element) -> Tuple[int, int]:
        for counter in element.findall("counter"):
            if counter.get("type") == "LINE":
                missed = CoverageProcessor._number(counter.get("missed", "0"), "missed")
                covered = CoverageProcessor._number(counter.get("covered", "0"), "covered")
                return int(covered), int(covered + missed)
        return 0, 0

    @staticmethod
    def _number(value: str, attribute: str) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            raise CoverageProcessingError(f"non-numeric {attribute} attribute in coverage report: {value!r}")

    @staticmethod
    def _overall(per_file) -> float:
        covered = sum(v[0] for v in per_file.values())
        total = sum(v[1] for v in per_file.values())
        return covered / total if total else 0.0
