"""Run every example script and compare stdout with its ``# =>`` annotations."""

from __future__ import annotations

import difflib
import os
import subprocess
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
EXAMPLES_ROOT = REPO_ROOT / "examples"
SRC_ROOT = REPO_ROOT / "src"

EXPECTED_MARKER = "# =>"


def _example_paths() -> list[Path]:
    return sorted(EXAMPLES_ROOT.glob("ex_*/01_*.py"))


def _expected_lines(path: Path) -> list[str]:
    return [
        line.split(EXPECTED_MARKER, maxsplit=1)[1].strip()
        for line in path.read_text(encoding="utf-8").splitlines()
        if "print(" in line and EXPECTED_MARKER in line
    ]


def test_every_topic_has_an_example() -> None:
    topics = sorted(path for path in EXAMPLES_ROOT.glob("ex_*") if path.is_dir())

    assert topics
    assert [path.parent for path in _example_paths()] == topics


@pytest.mark.parametrize(
    "path",
    _example_paths(),
    ids=lambda path: str(path.relative_to(REPO_ROOT)),
)
def test_example_stdout_matches_annotations(path: Path) -> None:
    env = {
        key: value for key, value in os.environ.items() if not key.startswith("PLUGINWIRE_")
    }
    env["PYTHONPATH"] = os.pathsep.join(
        filter(None, (str(SRC_ROOT), os.environ.get("PYTHONPATH"))),
    )

    completed = subprocess.run(  # noqa: S603
        [sys.executable, str(path)],
        cwd=path.parent,
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )

    expected = _expected_lines(path)
    actual = completed.stdout.splitlines()
    diff = "\n".join(
        difflib.unified_diff(expected, actual, fromfile="expected", tofile="actual", lineterm=""),
    )

    assert completed.returncode == 0, completed.stderr
    assert completed.stderr == ""
    assert actual == expected, diff
