import pytest

from utgen.tools.prompt_builder import PromptBuilder


@pytest.fixture
def builder(tmp_path):
    source = tmp_path / "calc.py"
    source.write_text("def add(a, b):\n    return a + b\n")
    test_file = tmp_path / "test_calc.py"
    test_file.write_text("def test_add():\n    assert add(1, 2) == 3\n")
    return PromptBuilder(str(source), str(test_file), "<coverage line-rate='0.5'/>", "python")


def test_generation_prompt(builder):
    builder.installed_packages = ["pytest", "requests"]

    prompt = builder.build_prompt("test_generation")

    assert "## Source file: calc.py" in prompt.user
    assert "1 def add(a, b):" in prompt.user
    assert "2     return a + b" in prompt.user
    assert "def test_add():\n  " in prompt.user
    assert "<coverage line-rate='0.5'/>" in prompt.user
    assert "pytest\n  requests" in prompt.user or "pytest\nrequests" in prompt.user
    assert "Previous iterations failed tests" not in prompt.user
    assert prompt.system


def test_failed_tests_and_instructions_sections(builder):
    builder.additional_instructions = "Use pytest fixtures."

    prompt = builder.build_prompt("test_generation", "Failed Test:\n\ndef test_x(): {broken}\n")

    assert "Previous iterations failed tests" in prompt.user
    assert "def test_x(): {broken}" in prompt.user
    assert "## Additional instructions\nUse pytest fixtures." in prompt.user


def test_test_file_is_read_on_every_build(builder, tmp_path):
    first = builder.build_prompt("insert_line")
    (tmp_path / "test_calc.py").write_text("def test_sub():\n    pass\n")
    second = builder.build_prompt("insert_line")

    assert "1 def test_add():" in first.user
    assert "1 def test_sub():" in second.user


def test_indentation_prompt(builder):
    prompt = builder.build_prompt("indentation")

    assert "test_headers_indentation" in prompt.user


def test_unknown_kind(builder):
    with pytest.raises(ValueError):
        builder.build_prompt("refactor")
