import time

import pytest

from utgen.tools.coverage import CoverageProcessor
from utgen.utils.exceptions import CoverageProcessingError

COBERTURA = """<?xml version="1.0" ?>
<coverage line-rate="0.5" version="7.4">
  <sources><source>/nonexistent/src</source></sources>
  <packages>
    <package name="app">
      <classes>
        <class name="calc.py" filename="app/calc.py" line-rate="0.75">
          <lines>
            <line number="1" hits="1"/>
            <line number="2" hits="1"/>
            <line number="3" hits="0"/>
            <line number="4" hits="3"/>
          </lines>
        </class>
        <class name="util.py" filename="app/util.py" line-rate="1">
          <lines>
            <line number="1" hits="1"/>
            <line number="2" hits="1"/>
          </lines>
        </class>
      </classes>
    </package>
  </packages>
</coverage>
"""

LCOV = """TN:
SF:src/calc.js
DA:1,1
DA:2,0
DA:3,4
end_of_record
SF:src/other.js
DA:1,0
end_of_record
"""

JACOCO = """<?xml version="1.0" encoding="UTF-8"?>
<report name="demo">
  <package name="com/acme">
    <sourcefile name="Calc.java">
      <counter type="INSTRUCTION" missed="3" covered="7"/>
      <counter type="LINE" missed="1" covered="3"/>
    </sourcefile>
  </package>
  <counter type="LINE" missed="1" covered="3"/>
</report>
"""


@pytest.fixture
def write_report(tmp_path):
    def _write(content, name="coverage.xml"):
        path = tmp_path / name
        path.write_text(content)
        return str(path)

    return _write


def test_cobertura_file_coverage(write_report):
    report = write_report(COBERTURA)

    result = CoverageProcessor(report, "app/calc.py", "cobertura").process_coverage_report(0)

    assert result.coverage == pytest.approx(0.75)
    assert result.files == []
    assert "app/calc.py" in result.report_content


def test_cobertura_matches_on_path_suffix(write_report):
    report = write_report(COBERTURA)

    result = CoverageProcessor(report, "calc.py", "cobertura").process_coverage_report(0)

    assert result.coverage == pytest.approx(0.75)


def test_cobertura_discovery_lists_files_below_full_coverage(write_report):
    report = write_report(COBERTURA)

    result = CoverageProcessor(report, "", "cobertura").process_coverage_report(0)

    assert result.coverage == pytest.approx(0.5)
    assert result.files == ["app/calc.py"]


def test_unknown_file_has_zero_coverage(write_report):
    report = write_report(COBERTURA)

    result = CoverageProcessor(report, "app/missing.py", "cobertura").process_coverage_report(0)

    assert result.coverage == 0.0


def test_lcov(write_report):
    report = write_report(LCOV, "lcov.info")

    assert CoverageProcessor(report, "src/calc.js", "lcov").process_coverage_report(0).coverage == pytest.approx(2 / 3)

    overall = CoverageProcessor(report, "", "lcov").process_coverage_report(0)
    assert overall.coverage == pytest.approx(0.5)
    assert overall.files == ["src/calc.js", "src/other.js"]


def test_jacoco(write_report):
    report = write_report(JACOCO, "jacoco.xml")

    result = CoverageProcessor(report, "src/main/java/com/acme/Calc.java", "jacoco").process_coverage_report(0)

    assert result.coverage == pytest.approx(0.75)


def test_missing_report(tmp_path):
    with pytest.raises(CoverageProcessingError):
        CoverageProcessor(str(tmp_path / "nope.xml"), "calc.py", "cobertura").process_coverage_report(0)


def test_stale_report(write_report):
    report = write_report(COBERTURA)

    with pytest.raises(CoverageProcessingError):
        CoverageProcessor(report, "calc.py", "cobertura").process_coverage_report(time.time() + 60)


def test_report_written_during_run_is_accepted(write_report):
    started_at = time.time()
    report = write_report(COBERTURA)

    result = CoverageProcessor(report, "calc.py", "cobertura").process_coverage_report(started_at)

    assert result.coverage == pytest.approx(0.75)


def test_malformed_xml(write_report):
    report = write_report("<coverage><unclosed></coverage>")

    with pytest.raises(CoverageProcessingError):
        CoverageProcessor(report, "calc.py", "cobertura").process_coverage_report(0)


def test_fractional_hits_are_accepted(write_report):
    report = write_report(COBERTURA.replace('hits="3"', 'hits="1.0"'))

    result = CoverageProcessor(report, "app/calc.py", "cobertura").process_coverage_report(0)

    assert result.coverage == 0.75


@pytest.mark.parametrize("report_content, name", [
    (COBERTURA.replace('hits="3"', 'hits="many"'), "coverage.xml"),
    (COBERTURA.replace('line-rate="0.5"', 'line-rate=""'), "coverage.xml"),
    (JACOCO.replace('missed="1"', 'missed="x"'), "jacoco.xml"),
])
def test_non_numeric_attributes_raise(write_report, report_content, name):
    fmt = "jacoco" if name == "jacoco.xml" else "cobertura"
    report = write_report(report_content, name)

    with pytest.raises(CoverageProcessingError, match="non-numeric"):
        CoverageProcessor(report, "", fmt).process_coverage_report(0)


def test_unsupported_format(write_report):
    report = write_report(COBERTURA)

    with pytest.raises(CoverageProcessingError):
        CoverageProcessor(report, "calc.py", "clover").process_coverage_report(0)
