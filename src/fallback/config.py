"""Runtime switches for fallback.

Resolve-once, freeze-then-flow: settings are validated by a pydantic schema,
frozen into a ``FrozenConfig`` and captured by each holder at construction.

Precedence: defaults < environment (``FALLBACK_*``, after loading ``.env``)
< programmatic overrides. ``config_scope`` installs an ambient config for the
current context, which takes the place of environment resolution.
"""

from __future__ import annotations

from contextlib import contextmanager
import contextvars
from dataclasses import dataclass
from enum import Enum
import os
from typing import TYPE_CHECKING, Any, Literal, overload

import dotenv
from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping

ENV_PREFIX = "FALLBACK_"


class Settings(BaseModel):
    """Schema, defaults and validation for every configuration field."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    #: Reject values that do not satisfy a declared capability.
    check_capabilities: bool = True
    #: Limit handle attribute access to the capability's members.
    restrict_handles: bool = True


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration captured by holders."""

    check_capabilities: bool = True
    restrict_handles: bool = True


class Origin(str, Enum):
    """Where a resolved field value came from."""

    DEFAULT = "default"
    ENV = "env"
    OVERRIDES = "overrides"


SourceMap = dict[str, Origin]

_AMBIENT: contextvars.ContextVar[FrozenConfig | None] = contextvars.ContextVar(
    "fallback_ambient_config", default=None
)

_DOTENV_LOADED: bool = False


def _try_load_dotenv() -> None:
    """Load a project ``.env`` once per process.

    Unreadable or malformed files are ignored so resolution stays predictable.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    _DOTENV_LOADED = True
    try:
        dotenv.load_dotenv()
    except (OSError, UnicodeDecodeError):
        return


def load_env() -> dict[str, str]:
    """Read ``FALLBACK_*`` variables that name a known field."""
    config: dict[str, str] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in Settings.model_fields:
            config[field_name] = value.strip()
    return config


@overload
def resolve_config(
    overrides: Mapping[str, Any] | None = ...,
    *,
    explain: Literal[True],
) -> tuple[FrozenConfig, SourceMap]: ...


@overload
def resolve_config(
    overrides: Mapping[str, Any] | None = ...,
    *,
    explain: Literal[False] = ...,
) -> FrozenConfig: ...


def resolve_config(
    overrides: Mapping[str, Any] | None = None,
    *,
    explain: bool = False,
) -> FrozenConfig | tuple[FrozenConfig, SourceMap]:
    """Resolve configuration from defaults, environment and overrides.

    Args:
        overrides: Programmatic values; these win over the environment.
        explain: If True, also return where each field came from.

    Returns:
        FrozenConfig, or ``(FrozenConfig, SourceMap)`` when ``explain=True``.

    Raises:
        ConfigurationError: If a value fails validation or a key is unknown.
    """
    _try_load_dotenv()

    env = load_env()
    overrides = dict(overrides or {})
    merged: dict[str, Any] = {**env, **overrides}

    sources: SourceMap = {}
    for name in Settings.model_fields:
        if name in overrides:
            sources[name] = Origin.OVERRIDES
        elif name in env:
            sources[name] = Origin.ENV
        else:
            sources[name] = Origin.DEFAULT

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        loc = ".".join(str(part) for part in err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        if err.get("type") == "extra_forbidden":
            hint = f"Known fields: {', '.join(sorted(Settings.model_fields))}"
        else:
            hint = (
                f"Use true/false (or 1/0) for {ENV_PREFIX}{loc.upper()}"
                if loc
                else None
            )
        raise ConfigurationError(
            f"Configuration validation failed for {loc or 'config'}: {msg}",
            hint=hint,
        ) from e

    frozen = FrozenConfig(**settings.model_dump())
    return (frozen, sources) if explain else frozen


def current_config() -> FrozenConfig:
    """Return the ambient config if one is active, else resolve a fresh one."""
    ambient = _AMBIENT.get()
    if ambient is not None:
        return ambient
    return resolve_config()


@contextmanager
def config_scope(
    cfg_or_overrides: Mapping[str, Any] | FrozenConfig | None = None,
    **overrides: object,
) -> Generator[FrozenConfig]:
    """Run a block with a specific configuration.

    Context-local, so safe across threads and asyncio tasks.

    Example:
        with config_scope(restrict_handles=False):
            handle = Fallback.of(None, capability=Greeter).to(greeter)
    """
    if isinstance(cfg_or_overrides, FrozenConfig):
        cfg = cfg_or_overrides
    else:
        cfg = resolve_config({**(cfg_or_overrides or {}), **overrides})

    token = _AMBIENT.set(cfg)
    try:
        yield cfg
    finally:
        _AMBIENT.reset(token)


__all__ = [
    "ENV_PREFIX",
    "FrozenConfig",
    "Origin",
    "Settings",
    "SourceMap",
    "config_scope",
    "current_config",
    "load_env",
    "resolve_config",
]
