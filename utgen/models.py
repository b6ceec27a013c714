from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from enum import Enum


class TestOutcome(str, Enum):
    __test__ = False

    passed = "passed"
    failed_build = "failed_build"
    no_coverage_gain = "no_coverage_gain"


class Coverage(BaseModel):
    path: str
    format: str = "cobertura"
    desired: float = 80.0
    current: float = 0.0
    content: str = ""
    files: List[str] = Field(default_factory=list)

    @property
    def goal_reached(self) -> bool:
        return self.current >= self.desired / 100


class Cursor(BaseModel):
    line: int = 0
    indentation: int = 0


class UT(BaseModel):
    test_behavior: str = ""
    test_name: str = ""
    test_code: str
    new_imports_code: str = ""
    library_installation_code: str = ""
    test_tags: str = ""

    @field_validator("test_behavior", "test_name", "new_imports_code", "library_installation_code", "test_tags", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        if value is None:
            return ""
        if isinstance(value, list):
            return "\n".join(str(v) for v in value)
        return str(value)


class UTDetails(BaseModel):
    language: str = ""
    existing_test_function_signature: str = ""
    new_tests: List[UT] = Field(default_factory=list)

    @field_validator("new_tests", mode="before")
    @classmethod
    def _none_as_empty_list(cls, value):
        return value or []


class TestHeaders(BaseModel):
    __test__ = False

    language: str = ""
    testing_framework: str = ""
    number_of_tests: Optional[int] = None
    test_headers_indentation: int


class TestLine(BaseModel):
    __test__ = False

    language: str = ""
    testing_framework: str = ""
    number_of_tests: Optional[int] = None
    relevant_line_number_to_insert_tests_after: int
    relevant_line_number_to_insert_imports_after: Optional[int] = None


class FailedUT(BaseModel):
    test_code: str
    error_msg: str = ""


class SessionCounters(BaseModel):
    total: int = 0
    passed: int = 0
    failed_build: int = 0
    no_coverage_gain: int = 0

    def record(self, outcome: TestOutcome) -> None:
        self.total += 1
        if outcome == TestOutcome.passed:
            self.passed += 1
        elif outcome == TestOutcome.failed_build:
            self.failed_build += 1
        else:
            self.no_coverage_gain += 1

    @property
    def discarded(self) -> int:
        return self.failed_build + self.no_coverage_gain


class CoverageResult(BaseModel):
    coverage: float
    report_content: str = ""
    files: List[str] = Field(default_factory=list)


class CommandResult(BaseModel):
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0
    started_at: float = 0.0
    completed_at: float = 0.0

class LLMResponse(BaseModel):
    text: str
    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


class Prompt(BaseModel):
    system: str
    user: str
