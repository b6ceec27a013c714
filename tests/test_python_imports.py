"""Python import merging in the language handler."""
from utgen.constants import PYTHON_KEEP_MARKER
from utgen.lang import PythonHandler


def merge(content, *imports):
    return PythonHandler().update_imports(content, list(imports))


def test_symbols_of_same_module_are_merged_and_sorted():
    content = "from math import sqrt\n\n\ndef test_root():\n    assert sqrt(4) == 2\n"

    updated, delta = merge(content, "from math import pow, ceil")

    assert updated.split("\n")[0] == "from math import ceil, pow, sqrt"
    assert updated.count("from math import") == 1
    assert delta == 0


def test_merge_is_idempotent():
    content = "from math import sqrt\n\n\ndef test_root():\n    pass\n"

    once, _ = merge(content, "from math import pow, ceil")
    twice, delta = merge(once, "from math import pow, ceil")

    assert twice == once
    assert delta == 0


def test_marked_import_stays_in_place_with_marker():
    content = (
        "import pytest\n"
        f"from app.calc import add {PYTHON_KEEP_MARKER}\n"
        "\n"
        "def test_add():\n"
        "    assert add(1, 2) == 3\n"
    )

    updated, delta = merge(content, "from app.calc import sub")

    lines = updated.split("\n")
    assert lines[0] == "import pytest"
    assert lines[1] == f"from app.calc import add, sub {PYTHON_KEEP_MARKER}"
    assert delta == 0


def test_plain_import_is_not_duplicated():
    content = "import os\n\n\ndef test_env():\n    assert os.sep\n"

    updated, delta = merge(content, "import os")

    assert updated == content
    assert delta == 0


def test_new_plain_import_goes_with_first_import():
    content = "import pytest\nfrom app import calc\n\n\ndef test_x():\n    pass\n"

    updated, delta = merge(content, "import json")

    lines = updated.split("\n")
    assert lines[:3] == ["from app import calc", "import json", "import pytest"]
    assert delta == 1


def test_file_without_imports_gets_block_at_top():
    content = "def test_x():\n    pass\n"

    updated, delta = merge(content, "from unittest import mock")

    assert updated.startswith("from unittest import mock\ndef test_x():")
    assert delta == 1


def test_indented_imports_are_left_alone():
    content = "def test_lazy():\n    from json import dumps\n    assert dumps(1)\n"

    updated, delta = merge(content, "from json import loads")

    assert "    from json import dumps" in updated
    assert updated.startswith("from json import loads\n")
    assert delta == 1


def test_parenthesized_import_is_understood():
    content = "from os.path import (join, exists)\n\n\ndef test_x():\n    pass\n"

    updated, _ = merge(content, "from os.path import basename")

    assert updated.split("\n")[0] == "from os.path import basename, exists, join"


def test_empty_and_quoted_empty_imports_are_ignored():
    content = "import pytest\n"

    updated, delta = merge(content, "", '""', "   ")

    assert updated == content
    assert delta == 0
