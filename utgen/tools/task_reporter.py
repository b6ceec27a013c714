from typing import List

from ..models import SessionCounters

PADDING_HEIGHT = 1
COLUMN_WIDTHS_3 = [29, 29, 29]
COLUMN_WIDTHS_2 = [40, 40]

YELLOW = "\033[33m"
GREEN = "\033[32m"
MAGENTA = "\033[35m"
BRIGHT_GREEN = "\033[92m"
RESET = "\033[0m"

SEPARATOR = "<=========================================>"


def center_align_text(text: str, width: int) -> str:
    text = text.strip('"')
    if len(text) >= width:
        return text
    left_padding = (width - len(text)) // 2
    right_padding = width - len(text) - left_padding
    return f"{' ' * left_padding}{text}{' ' * right_padding}"


def add_height_padding(rows: int, columns: int, column_widths: List[int]) -> str:
    padding = ""
    for _ in range(rows):
        for j in range(columns):
            if j == columns - 1:
                padding += f"| {'':<{column_widths[j]}} |\n"
            else:
                padding += f"| {'':<{column_widths[j]}} "
    return padding


def _border(column_widths: List[int]) -> str:
    return "+" + "+".join("-" * (width + 2) for width in column_widths) + "+\n"


def _row(cells: List[str], column_widths: List[int], colors: List[str] = None) -> str:
    rendered = []
    for idx, (cell, width) in enumerate(zip(cells, column_widths)):
        text = center_align_text(cell, width)
        if colors:
            text = f"{colors[idx]}{text}{RESET}"
        rendered.append(text)
    return "| " + " | ".join(rendered) + " |\n"


def _build_table(headers: List[str], values: List[str], column_widths: List[int], colors: List[str]) -> str:
    table = _border(column_widths)
    table += _row(headers, column_widths)
    table += _border(column_widths)
    table += add_height_padding(PADDING_HEIGHT, len(column_widths), column_widths)
    table += _row(values, column_widths, colors)
    table += add_height_padding(PADDING_HEIGHT, len(column_widths), column_widths)
    table += _border(column_widths)
    return table


def _counter_tables(counters: SessionCounters, totals_title: str, discarded_title: str) -> str:
    report = f"{totals_title}\n"
    report += _build_table(
        ["Total Test Cases", "Test Cases Passed", "Test Cases Failed"],
        [str(counters.total), str(counters.passed), str(counters.discarded)],
        COLUMN_WIDTHS_3,
        [YELLOW, GREEN, YELLOW],
    )
    report += f"{discarded_title}\n"
    report += _build_table(
        ["Build failures", "No Coverage output"],
        [str(counters.failed_build), str(counters.no_coverage_gain)],
        COLUMN_WIDTHS_2,
        [MAGENTA, BRIGHT_GREEN],
    )
    return report


def build_session_table(counters: SessionCounters) -> str:
    """Tables printed after every generation iteration."""
    report = f"\n{SEPARATOR}\n"
    report += _counter_tables(counters, "Tests generated in Session", "Discarded tests in session")
    report += f"{SEPARATOR}\n"
    return report


def build_summary_table(counters: SessionCounters) -> str:
    """Tables printed once all files are processed."""
    report = f"\n{SEPARATOR}\n"
    report += "COMPLETE TEST GENERATE SUMMARY\n"
    report += _counter_tables(counters, "Total Test Summary", "Discarded Cases Summary")
    report += f"{SEPARATOR}\n"
    return report
