from utgen.models import SessionCounters, TestOutcome
from utgen.tools.task_reporter import add_height_padding, build_session_table, build_summary_table, center_align_text


def test_center_align_text():
    assert center_align_text("ab", 6) == "  ab  "
    assert center_align_text("abc", 6) == " abc  "
    assert center_align_text('"quoted"', 10) == "  quoted  "
    assert center_align_text("too long", 3) == "too long"


def test_add_height_padding():
    assert add_height_padding(1, 2, [3, 4]) == "|     |      |\n"


def test_session_table_shows_counts():
    counters = SessionCounters()
    for outcome in (TestOutcome.passed, TestOutcome.failed_build, TestOutcome.no_coverage_gain, TestOutcome.no_coverage_gain):
        counters.record(outcome)

    table = build_session_table(counters)

    assert "Tests generated in Session" in table
    assert "Discarded tests in session" in table
    assert f"\033[33m{center_align_text('4', 29)}\033[0m" in table
    assert f"\033[32m{center_align_text('1', 29)}\033[0m" in table
    assert f"\033[33m{center_align_text('3', 29)}\033[0m" in table
    assert f"\033[35m{center_align_text('1', 40)}\033[0m" in table
    assert f"\033[92m{center_align_text('2', 40)}\033[0m" in table


def test_borders_match_rows():
    table = build_summary_table(SessionCounters())
    lines = table.split("\n")

    assert "COMPLETE TEST GENERATE SUMMARY" in lines
    header = next(line for line in lines if "Total Test Cases" in line)
    border = lines[lines.index(header) - 1]
    assert len(header) == len(border)
    assert border == "+" + "+".join(["-" * 31] * 3) + "+"
