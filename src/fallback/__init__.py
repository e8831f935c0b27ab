"""fallback: capability-typed defaults for absent values.

Public API:
    - Fallback: Single-use holder built from an optional or result value
    - fallback(): One-shot ``Fallback.of(source).to(default)``
    - Handle: Polymorphic handle over whichever value was chosen
    - Yes / NO / as_maybe: Presence/absence primitives
    - Success / Failure / attempt: Result channel primitives
    - config_scope / resolve_config: Runtime switches

Example:
    handle = Fallback.of(None).to("Hello")
    print(handle)  # Hello
"""

from __future__ import annotations

import logging

from fallback.capability import capability_members, satisfies
from fallback.config import FrozenConfig, config_scope, resolve_config
from fallback.errors import (
    CapabilityError,
    ConfigurationError,
    ConsumedError,
    FallbackError,
)
from fallback.handle import Handle
from fallback.holder import Fallback, fallback
from fallback.maybe import NO, AsMaybe, Maybe, No, Yes, as_maybe
from fallback.result import Failure, Result, Success, attempt

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("fallback-handle")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("fallback").addHandler(logging.NullHandler())

__all__ = [
    "NO",
    "AsMaybe",
    "CapabilityError",
    "ConfigurationError",
    "ConsumedError",
    "Failure",
    "Fallback",
    "FallbackError",
    "FrozenConfig",
    "Handle",
    "Maybe",
    "No",
    "Result",
    "Success",
    "Yes",
    "as_maybe",
    "attempt",
    "capability_members",
    "config_scope",
    "fallback",
    "resolve_config",
    "satisfies",
]
