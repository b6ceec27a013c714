import os

import pytest

from utgen.core.config import GenSettings
from utgen.injector import Injector

from tests.fixtures.fakes import FakeAI, FakeCoverage, FakeRunner


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Keep UTGEN_* variables and a stray .env out of the settings under test."""
    for key in [k for k in os.environ if k.startswith("UTGEN_")]:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def fake_ai():
    return FakeAI()


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def python_injector(runner, tmp_path):
    return Injector("python", runner=runner, cwd=str(tmp_path))


@pytest.fixture
def make_settings(tmp_path):
    def _make(**overrides):
        values = {
            "test_command": "pytest --cov",
            "test_dir": str(tmp_path),
            "coverage_report_path": str(tmp_path / "coverage.xml"),
            "desired_coverage": 80.0,
            "max_iterations": 3,
            "api_key": "test-key",
            "show_progress": False,
        }
        values.update(overrides)
        return GenSettings(**values)

    return _make


@pytest.fixture
def coverage_script():
    def _make(values, files=None):
        return FakeCoverage(values, files=files)

    return _make
