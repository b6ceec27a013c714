import threading
import time
from pathlib import Path
from typing import List, Optional, Type

from .ai_service import AIService
from .constants import logger
from .core.config import GenSettings
from .helpers.status_ticker import status_ticker
from .helpers.test_path import create_test_file, detect_language, determine_test_path, is_file_empty
from .injector import Injector
from .lang.handler import Runner
from .models import Coverage, Cursor, FailedUT, SessionCounters
from .tools.coverage import CoverageProcessor
from .tools.cursor import resolve_cursor
from .tools.generate_tests import check_cancelled, generate_tests
from .tools.prompt_builder import PromptBuilder
from .tools.run_command import run_command
from .tools.task_reporter import build_session_table, build_summary_table
from .tools.validate_test import TestValidator
from .utils.error_classifier import format_failed_tests
from .utils.exceptions import ConfigurationError, ExternalServiceError, LibraryInstallError, UTGenException


class UnitTestGenerator:
    """Coverage-driven unit test generation loop.

    For each source file the generator measures coverage, asks the model for
    candidate tests and keeps the ones that pass repeatedly and raise
    coverage, until the desired coverage or the iteration limit is reached.
    """

    def __init__(
        self,
        settings: GenSettings,
        ai: Optional[AIService] = None,
        runner: Optional[Runner] = None,
        coverage_processor_cls: Type[CoverageProcessor] = CoverageProcessor,
        injector_cls: Type[Injector] = Injector,
    ):
        self.src_path = settings.source_file_path
        self.test_path = settings.test_file_path
        self.cmd = settings.test_command
        self.dir = settings.test_dir or "."
        self.max_iterations = settings.max_iterations
        self.additional_prompt = settings.additional_prompt
        self.show_progress = settings.show_progress
        self.ai = ai or AIService.from_settings(settings)
        self.runner = runner or run_command
        self.coverage_processor_cls = coverage_processor_cls
        self.injector_cls = injector_cls

        self.cov = Coverage(
            path=settings.coverage_report_path,
            format=settings.coverage_format,
            desired=settings.desired_coverage,
        )
        self.cur = Cursor()
        self.lang = ""
        self.files: List[str] = []
        self.failed_tests: List[FailedUT] = []
        self.counters = SessionCounters()
        self.injector: Optional[Injector] = None
        self.prompt_builder: Optional[PromptBuilder] = None

    def start(self, cancel_event: Optional[threading.Event] = None) -> SessionCounters:
        """Run generation for the configured file, or for every discovered file.

        Raises ``GenerationCancelled`` as soon as ``cancel_event`` is observed.
        """
        check_cancelled(cancel_event)
        if not self.cmd:
            raise ConfigurationError("test command is required")

        if not self.src_path:
            self.run_coverage()
            if not self.files:
                raise ConfigurationError(
                    "couldn't identify the source files. Please mention source file and test file using flags"
                )
            for source_file in list(self.files):
                check_cancelled(cancel_event)
                self.src_path = source_file
                try:
                    language = detect_language(source_file)
                    self.test_path = determine_test_path(source_file, language, self.dir)
                    new_test_file = create_test_file(self.test_path, source_file)
                except (UTGenException, OSError) as e:
                    logger.error(f"Error preparing test file for {source_file}: {e}")
                    continue
                self._generate_for_file(new_test_file, cancel_event)
        else:
            if not self.test_path:
                self.test_path = determine_test_path(self.src_path, detect_language(self.src_path), self.dir)
            new_test_file = create_test_file(self.test_path, self.src_path)
            self._generate_for_file(new_test_file, cancel_event)

        print(build_summary_table(self.counters))
        return self.counters

    def _generate_for_file(self, new_test_file: bool, cancel_event: Optional[threading.Event]) -> None:
        logger.info(f"Generating tests for file: {self.src_path}")
        self.cur = Cursor()
        self.failed_tests = []

        self.lang = detect_language(self.src_path)
        self.injector = self.injector_cls(self.lang, runner=self.runner, cwd=self.dir)

        is_empty = is_file_empty(self.test_path)
        if is_empty:
            new_test_file = True
        if not new_test_file:
            self.run_coverage()
        else:
            self.cov.current = 0.0
            self.cov.content = ""

        self.prompt_builder = PromptBuilder(
            self.src_path,
            self.test_path,
            self.cov.content,
            self.lang,
            additional_instructions=self.additional_prompt,
        )
        validator = TestValidator(
            self.injector,
            self.coverage_processor_cls(self.cov.path, self.src_path, self.cov.format),
            self.test_path,
            self.cmd,
            working_dir=self.dir,
            runner=self.runner,
        )
        if not is_empty:
            self.cur = resolve_cursor(self.prompt_builder, self.ai, cancel_event)

        iteration_count = 0
        while not self.cov.goal_reached and iteration_count < self.max_iterations:
            check_cancelled(cancel_event)
            print(f"Current Coverage: {round(self.cov.current * 100)}% for file {self.src_path}")
            print(f"Desired Coverage: {self.cov.desired}% for file {self.src_path}")

            failed_test_runs = format_failed_tests(self.failed_tests)
            self.prompt_builder.installed_packages = self._installed_packages()
            self.prompt_builder.code_coverage_report = self.cov.content
            prompt = self.prompt_builder.build_prompt("test_generation", failed_test_runs)
            self.failed_tests = []

            tests_details = generate_tests(self.ai, prompt, cancel_event)

            logger.info("Validating new generated tests one by one")
            iteration_counters = SessionCounters()
            for generated_test in tests_details.new_tests:
                installed_packages = self._installed_packages()
                check_cancelled(cancel_event)
                outcome = validator.validate(
                    generated_test, self.cov, self.cur, installed_packages, self.failed_tests
                )
                iteration_counters.record(outcome)
                self.counters.record(outcome)
                check_cancelled(cancel_event)

            iteration_count += 1
            if 0 < self.cov.current < self.cov.desired / 100:
                self.run_coverage()

            print(build_session_table(iteration_counters))

        if self.cov.current == 0 and new_test_file:
            try:
                Path(self.test_path).unlink()
                logger.info(f"Removed test file without coverage: {self.test_path}")
            except OSError as e:
                logger.error(f"Error removing test file {self.test_path}: {e}")

        if self.cov.goal_reached:
            print(
                f"For File {self.src_path} Reached above target coverage of {self.cov.desired}% "
                f"(Current Coverage: {round(self.cov.current * 100)}%) in {iteration_count} iterations."
            )
        elif iteration_count == self.max_iterations:
            print(
                f"For File {self.src_path} Reached maximum iteration limit without achieving desired coverage. "
                f"Current Coverage: {round(self.cov.current * 100)}%"
            )

    def _installed_packages(self) -> List[str]:
        try:
            return self.injector.library_installed()
        except LibraryInstallError as e:
            logger.warning(f"Error getting installed packages: {e.message}")
            return []

    def run_coverage(self) -> None:
        """Run the test command once and refresh coverage from its report."""
        if self.src_path:
            logger.info(f"Running test command to generate coverage report: '{self.cmd}'")

        start_time = time.time()
        with status_ticker(self.show_progress):
            result = self.runner(self.cmd, self.dir)
        logger.info(f"Test command completed in {time.time() - start_time:.2f}s")

        if result.returncode == -1:
            raise ExternalServiceError(f"error running test command: {result.stderr.strip()}")
        if result.returncode != 0:
            logger.error(f"Test command exited with code {result.returncode}")

        coverage_processor = self.coverage_processor_cls(self.cov.path, self.src_path, self.cov.format)
        coverage_result = coverage_processor.process_coverage_report(result.started_at)
        self.cov.current = coverage_result.coverage
        self.cov.content = coverage_result.report_content
        if not self.src_path:
            self.files = coverage_result.files
