import pytest

from utgen import main as cli
from utgen.agent import UnitTestGenerator
from utgen.utils.exceptions import GenerationCancelled


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--version"])

    assert excinfo.value.code == 0
    assert "utgen" in capsys.readouterr().out


def test_flags_override_environment(monkeypatch):
    monkeypatch.setenv("UTGEN_TEST_COMMAND", "npm test")
    monkeypatch.setenv("UTGEN_DESIRED_COVERAGE", "70")
    args = cli.build_parser().parse_args([
        "--source-file-path", "src/calc.js",
        "--desired-coverage", "90",
        "--coverage-format", "lcov",
        "--no-progress",
    ])

    settings = cli.settings_from_args(args)

    assert settings.source_file_path == "src/calc.js"
    assert settings.test_command == "npm test"
    assert settings.desired_coverage == 90.0
    assert settings.coverage_format == "lcov"
    assert settings.max_iterations == 5
    assert settings.show_progress is False


def test_unknown_coverage_format_is_rejected():
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--coverage-format", "clover"])

    assert excinfo.value.code == 2


def test_invalid_settings_exit_with_error():
    assert cli.main(["--test-command", "pytest", "--desired-coverage", "150"]) == cli.EXIT_ERROR


def test_configuration_error_exit_code(tmp_path):
    source = tmp_path / "calc.py"
    source.write_text("x = 1\n")

    assert cli.main(["--source-file-path", str(source)]) == cli.EXIT_ERROR


def test_cancellation_exit_code(monkeypatch):
    def cancelled(self, cancel_event=None):
        raise GenerationCancelled()

    monkeypatch.setattr(UnitTestGenerator, "start", cancelled)

    assert cli.main(["--test-command", "pytest", "--no-progress"]) == cli.EXIT_CANCELLED


def test_successful_run(monkeypatch):
    calls = []

    def start(self, cancel_event=None):
        calls.append((self.cmd, self.cov.desired, cancel_event.is_set()))

    monkeypatch.setattr(UnitTestGenerator, "start", start)

    assert cli.main(["-c", "go test ./... -coverprofile=c.out", "--desired-coverage", "60"]) == cli.EXIT_OK
    assert calls == [("go test ./... -coverprofile=c.out", 60.0, False)]
