"""Pytest configuration and fixtures.

Provides environment isolation and shared capabilities/test doubles. All
fixtures here are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
from dataclasses import dataclass
import os
from typing import Protocol

import pytest

# =============================================================================
# Capabilities & Test Doubles
# =============================================================================


class Printable(Protocol):
    def __str__(self) -> str: ...


class Speaker(Protocol):
    def speak(self) -> str: ...


@dataclass
class Dog:
    name: str = "Rex"

    def speak(self) -> str:
        return f"{self.name}: woof"

    def fetch(self) -> str:
        return "stick"


class Robot:
    """Unrelated to ``Dog``; shares only the ``Speaker`` capability."""

    def speak(self) -> str:
        return "beep"


class Rock:
    """Satisfies nothing useful."""


@dataclass
class CountingSpeaker:
    """Speaker that records every use of its behavior."""

    calls: int = 0

    def speak(self) -> str:
        self.calls += 1
        return "counted"

    def __str__(self) -> str:
        self.calls += 1
        return "counted"

    def __repr__(self) -> str:
        self.calls += 1
        return "CountingSpeaker()"


@pytest.fixture
def counting_speaker() -> CountingSpeaker:
    return CountingSpeaker()


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_fallback_env(request, monkeypatch):
    """Clear FALLBACK_* variables so the outer environment cannot leak in.

    Opt-out: @pytest.mark.allow_env_pollution
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("FALLBACK_"):
            monkeypatch.delenv(key, raising=False)
