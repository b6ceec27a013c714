"""Decode YAML model responses into the generator's data model."""
import re
from typing import Any, Dict, Type, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from ..models import TestHeaders, TestLine, UTDetails
from .exceptions import ResponseParseError

ModelT = TypeVar("ModelT", bound=BaseModel)

FENCE_RE = re.compile(r"```(?:yaml|yml)?\s*\n(.*?)```", re.DOTALL)


def strip_code_fence(response: str) -> str:
    response = response.strip()
    match = FENCE_RE.search(response)
    if match:
        return match.group(1)
    if response.startswith("```"):
        lines = response.split("\n")[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        return "\n".join(lines)
    return response


def load_yaml(response: str) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(strip_code_fence(response))
    except yaml.YAMLError as e:
        raise ResponseParseError(f"model response is not valid YAML: {e}", details=response[:500]) from e
    if not isinstance(data, dict):
        raise ResponseParseError("model response is not a YAML mapping", details=response[:500])
    return data


def _parse(response: str, model: Type[ModelT]) -> ModelT:
    data = load_yaml(response)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ResponseParseError(f"model response does not match {model.__name__}: {e}", details=data) from e


def parse_test_details(response: str) -> UTDetails:
    return _parse(response, UTDetails)


def parse_test_headers(response: str) -> TestHeaders:
    return _parse(response, TestHeaders)


def parse_test_line(response: str) -> TestLine:
    return _parse(response, TestLine)
