"""Cursor Resolver: where new tests go and how deep they are indented."""
import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from ..ai_service import AIService
from ..constants import CURSOR_MAX_TOKENS, MAX_CURSOR_ATTEMPTS
from ..models import Cursor
from ..utils.exceptions import CursorResolutionError, ResponseParseError
from ..utils.response_parser import parse_test_headers, parse_test_line
from .generate_tests import check_cancelled
from .prompt_builder import PromptBuilder

logger = logging.getLogger(__name__)

UNRESOLVED = -1


def _line_count(path: str) -> int:
    test_file = Path(path)
    if not test_file.exists():
        return 0
    return len(test_file.read_bytes().decode("utf-8", errors="replace").split("\n"))


def _ask_for_int(
    prompt_builder: PromptBuilder,
    ai: AIService,
    kind: str,
    extract: Callable[[str], int],
    cancel_event: Optional[threading.Event],
) -> int:
    value = UNRESOLVED
    attempts = 0
    while value == UNRESOLVED and attempts < MAX_CURSOR_ATTEMPTS:
        attempts += 1
        check_cancelled(cancel_event)
        prompt = prompt_builder.build_prompt(kind)
        response = ai.call(prompt, max_tokens=CURSOR_MAX_TOKENS)
        check_cancelled(cancel_event)
        try:
            value = extract(response.text)
        except ResponseParseError as e:
            logger.warning(f"Attempt {attempts}/{MAX_CURSOR_ATTEMPTS} for '{kind}' returned an unusable response: {e.message}")
            value = UNRESOLVED
            continue
        if value == UNRESOLVED:
            logger.warning(f"Attempt {attempts}/{MAX_CURSOR_ATTEMPTS} for '{kind}' could not determine a value")

    if value == UNRESOLVED:
        raise CursorResolutionError(f"failed to resolve '{kind}' after {attempts} attempts")
    return value


def get_indentation(
    prompt_builder: PromptBuilder,
    ai: AIService,
    cancel_event: Optional[threading.Event] = None,
) -> int:
    return _ask_for_int(
        prompt_builder,
        ai,
        "indentation",
        lambda text: parse_test_headers(text).test_headers_indentation,
        cancel_event,
    )


def get_line(
    prompt_builder: PromptBuilder,
    ai: AIService,
    cancel_event: Optional[threading.Event] = None,
) -> int:
    return _ask_for_int(
        prompt_builder,
        ai,
        "insert_line",
        lambda text: parse_test_line(text).relevant_line_number_to_insert_tests_after,
        cancel_event,
    )


def resolve_cursor(
    prompt_builder: PromptBuilder,
    ai: AIService,
    cancel_event: Optional[threading.Event] = None,
) -> Cursor:
    print("Getting indentation for new Tests...")
    indentation = get_indentation(prompt_builder, ai, cancel_event)
    print("Getting Line number for new Tests...")
    line = get_line(prompt_builder, ai, cancel_event)
    line = min(max(line, 0), _line_count(prompt_builder.test_path))
    logger.info(f"New tests go after line {line} with indentation {indentation}")
    return Cursor(line=line, indentation=max(indentation, 0))
