"""Examples boundary tests: the scripts under examples/ run as documented."""

from __future__ import annotations

from pathlib import Path
import runpy

import pytest

pytestmark = [pytest.mark.unit, pytest.mark.examples]

_EXAMPLES = Path(__file__).parent.parent / "examples"


def _load(name: str) -> dict:
    return runpy.run_path(str(_EXAMPLES / name), run_name="example")


def test_greeting_without_name(capsys: pytest.CaptureFixture[str]) -> None:
    module = _load("greeting.py")
    assert module["main"]([]) == 0
    assert capsys.readouterr().out == "Hello\nHello\n"


def test_greeting_with_known_name(capsys: pytest.CaptureFixture[str]) -> None:
    module = _load("greeting.py")
    assert module["main"](["ada"]) == 0
    assert capsys.readouterr().out == "Hello\nHello, Ada\n"
