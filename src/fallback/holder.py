"""FallbackHolder: turn an absence signal into a capability-typed handle.

Usage:
    handle = Fallback.of(lookup(key), capability=Greeter).to(DefaultGreeter())
    handle.greet()

The holder records only whether the source value was present. ``to`` hands
back a ``Handle`` over the original value when it was, and over the default
otherwise; the two may be unrelated types as long as both satisfy the
capability.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import TYPE_CHECKING, Any

from .capability import capability_members, require
from .config import current_config
from .errors import ConsumedError
from .handle import Handle
from .maybe import No, Yes, as_maybe
from .result import attempt as _attempt

if TYPE_CHECKING:
    from .config import FrozenConfig
    from .maybe import AsMaybe, Maybe

logger = logging.getLogger(__name__)


class Fallback[A]:
    """Single-use holder of a presence fact about a value of type ``A``.

    Build with ``Fallback.of`` (optional or result input), ``Fallback.attempt``
    (a computation that may raise) or directly from a ``Yes``/``NO`` state.
    Consume exactly once with ``to`` or ``to_lazy``.
    """

    __slots__ = ("_capability", "_config", "_state")

    def __init__(
        self,
        state: Maybe[A],
        *,
        capability: type | None = None,
        config: FrozenConfig | None = None,
    ) -> None:
        if not isinstance(state, Yes | No):
            raise TypeError(
                f"Fallback() expects Yes(...) or NO, got {type(state).__name__}; "
                "use Fallback.of(...) to convert optional or result values"
            )
        if capability is not None and not isinstance(capability, type):
            raise TypeError(
                f"capability must be a class, got {type(capability).__name__}"
            )
        self._config = config if config is not None else current_config()
        self._capability = capability
        if (
            capability is not None
            and self._config.check_capabilities
            and isinstance(state, Yes)
        ):
            require(state.value, capability, role="source value")
        self._state: Maybe[A] | None = state

    @classmethod
    def of(
        cls,
        source: A | Maybe[A] | AsMaybe[A] | None,
        *,
        capability: type | None = None,
        config: FrozenConfig | None = None,
    ) -> Fallback[A]:
        """Capture whether ``source`` is present.

        ``None`` and ``Failure(...)`` are absent; ``Success(v)`` and any other
        value (zero, empty, ``False`` included) are present.
        """
        return cls(as_maybe(source), capability=capability, config=config)

    @classmethod
    def attempt(
        cls,
        fn: Callable[..., A],
        *args: Any,
        catch: tuple[type[Exception], ...] = (Exception,),
        capability: type | None = None,
        config: FrozenConfig | None = None,
        **kwargs: Any,
    ) -> Fallback[A]:
        """Run ``fn`` and capture whether it produced a value.

        A caught exception makes the holder absent; its payload is dropped.
        A returned ``None`` is still a present value.
        """
        outcome = _attempt(fn, *args, catch=catch, **kwargs)
        return cls(outcome.maybe(), capability=capability, config=config)

    @property
    def capability(self) -> type | None:
        return self._capability

    @property
    def consumed(self) -> bool:
        return self._state is None

    @property
    def present(self) -> bool:
        """Whether the source value existed. Unavailable once consumed."""
        return isinstance(self._live(), Yes)

    def _live(self) -> Maybe[A]:
        if self._state is None:
            raise ConsumedError(
                "Fallback holder has already been consumed",
                hint="Create a new holder with Fallback.of(...) for each fallback.",
            )
        return self._state

    def _resolve_capability(self, capability: type | None) -> type | None:
        if capability is None:
            return self._capability
        if not isinstance(capability, type):
            raise TypeError(
                f"capability must be a class, got {type(capability).__name__}"
            )
        return capability

    def _check_source(self, state: Maybe[A], capability: type | None) -> None:
        # The source was checked at construction against the holder's own
        # capability; one passed to ``to`` must hold for it as well.
        if (
            capability is not None
            and capability is not self._capability
            and self._config.check_capabilities
            and isinstance(state, Yes)
        ):
            require(state.value, capability, role="source value")

    def _handle(self, value: Any, capability: type | None) -> Handle[Any]:
        members = None
        if capability is not None and self._config.restrict_handles:
            members = capability_members(capability)
        return Handle(value, members=members)

    def to[C](
        self: Fallback[C],
        default: C,
        *,
        capability: type[C] | None = None,
    ) -> Handle[C]:
        """Return a handle over the source value, or over ``default`` if absent.

        The default is dropped untouched when the source is present. With a
        capability in force, ``default`` must satisfy it either way.

        Raises:
            ConsumedError: If the holder was already consumed.
            CapabilityError: If ``default`` (or a source value not yet checked
                against ``capability``) does not satisfy the capability.
        """
        state = self._live()
        cap = self._resolve_capability(capability)
        self._check_source(state, cap)
        if cap is not None and self._config.check_capabilities:
            require(default, cap, role="default")

        self._state = None
        if isinstance(state, Yes):
            return self._handle(state.value, cap)

        logger.debug(
            "Source value absent; substituting default of type %s",
            type(default).__name__,
        )
        return self._handle(default, cap)

    def to_lazy[C](
        self: Fallback[C],
        factory: Callable[[], C],
        *,
        capability: type[C] | None = None,
    ) -> Handle[C]:
        """Like ``to``, but build the default only when the source is absent.

        If ``factory`` raises, the exception propagates and the holder stays
        unconsumed.
        """
        state = self._live()
        cap = self._resolve_capability(capability)
        self._check_source(state, cap)
        if isinstance(state, Yes):
            self._state = None
            return self._handle(state.value, cap)

        default = factory()
        if cap is not None and self._config.check_capabilities:
            require(default, cap, role="default")
        self._state = None
        logger.debug(
            "Source value absent; substituting computed default of type %s",
            type(default).__name__,
        )
        return self._handle(default, cap)

    def __repr__(self) -> str:
        if self._state is None:
            return "Fallback(<consumed>)"
        return f"Fallback({self._state!r})"


def fallback[C](
    source: C | Maybe[C] | AsMaybe[C] | None,
    default: C,
    *,
    capability: type[C] | None = None,
) -> Handle[C]:
    """One-shot ``Fallback.of(source, capability=...).to(default)``."""
    return Fallback.of(source, capability=capability).to(default)


__all__ = ["Fallback", "fallback"]
