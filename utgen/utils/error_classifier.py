import re
import logging
from typing import Dict, List

from ..constants import MAX_ERROR_OUTPUT
from ..models import FailedUT

logger = logging.getLogger(__name__)

ERROR_LINE_RE = re.compile(
    r"error|fail|panic|exception|traceback|assert|expected|undefined|cannot|unable",
    re.IGNORECASE,
)
TAIL_LINES = 40


def classify_test_error(error_output: str) -> Dict[str, str]:
    error_output_lower = error_output.lower()

    if re.search(r"cannot find module|modulenotfounderror|importerror|no module named|cannot resolve|cannot find package|package .* does not exist", error_output_lower):
        return {
            "type": "IMPORT_ERROR",
            "priority": "critical",
            "description": "Module or package import is incorrect"
        }

    if re.search(r"syntaxerror|unexpected token|invalid syntax|syntax error|expected ';'", error_output_lower):
        return {
            "type": "SYNTAX_ERROR",
            "priority": "critical",
            "description": "Code has syntax errors"
        }

    if re.search(r"undefined:|cannot find symbol|is not defined|nameerror", error_output_lower):
        return {
            "type": "UNDEFINED_ERROR",
            "priority": "high",
            "description": "Test refers to an identifier that is not declared or imported"
        }

    if re.search(r"mockreturnvalue.*undefined|mock.*not defined|unexpected call|missing call", error_output_lower):
        return {
            "type": "MOCK_ERROR",
            "priority": "high",
            "description": "Mock not properly configured"
        }

    if re.search(r"is not a function|attributeerror|has no attribute|has no field or method", error_output_lower):
        return {
            "type": "ATTRIBUTE_ERROR",
            "priority": "high",
            "description": "Testing function/method that doesn't exist in source"
        }

    if re.search(r"unhandledpromise|timeout.*async|exceeded timeout|deadlock", error_output_lower):
        return {
            "type": "ASYNC_ERROR",
            "priority": "medium",
            "description": "Asynchronous code not properly awaited"
        }

    if re.search(r"expected.*received|assertionerror|expected.*to.*but|expected.*got|test failed|--- fail", error_output_lower):
        return {
            "type": "ASSERTION_ERROR",
            "priority": "low",
            "description": "Test assertion logic is incorrect"
        }

    return {
        "type": "UNKNOWN",
        "priority": "medium",
        "description": "Unknown error type"
    }


def extract_error_message(output: str) -> str:
    """Pick the lines of a failed test run worth showing to the model.

    Lines that look like errors are kept in order; when none do, the tail of
    the output is used. The result is capped at ``MAX_ERROR_OUTPUT``
    characters.
    """
    lines = [line.rstrip() for line in output.strip().split("\n")]
    error_lines = [line for line in lines if ERROR_LINE_RE.search(line)]
    if not error_lines:
        error_lines = lines[-TAIL_LINES:]
    message = "\n".join(error_lines).strip()
    if len(message) > MAX_ERROR_OUTPUT:
        message = message[:MAX_ERROR_OUTPUT]
    return message


def format_failed_tests(failed_tests: List[FailedUT]) -> str:
    rendered = ""
    for failed_test in failed_tests:
        rendered += f"Failed Test:\n\n{failed_test.test_code}\n\n"
        if failed_test.error_msg:
            classification = classify_test_error(failed_test.error_msg)
            rendered += f"Error message for test above:\n{failed_test.error_msg}\n"
            if classification["type"] != "UNKNOWN":
                rendered += f"Likely cause: {classification['description']}\n"
            rendered += "\n\n"
        else:
            rendered += "\n\n"
    return rendered
