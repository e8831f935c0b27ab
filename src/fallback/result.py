"""Result primitives for the result channel.

``Success`` and ``Failure`` mirror an outcome of a computation. Both know
how to collapse into a presence fact, and the failure's error is dropped
when they do.
"""

from __future__ import annotations

from collections.abc import Callable
import dataclasses
import logging
import typing

from .maybe import NO, AsMaybe, No, Yes

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess](AsMaybe[TSuccess]):
    """A successful outcome."""

    value: TSuccess

    def maybe(self) -> Yes[TSuccess]:
        return Yes(self.value)


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure: BaseException](AsMaybe[typing.Any]):
    """A failed outcome, containing the error."""

    error: TFailure

    def maybe(self) -> No:
        return NO


type Result[T, E: BaseException] = Success[T] | Failure[E]


def attempt[T](
    fn: Callable[..., T],
    *args: typing.Any,
    catch: tuple[type[Exception], ...] = (Exception,),
    **kwargs: typing.Any,
) -> Success[T] | Failure[Exception]:
    """Call ``fn`` and capture its outcome.

    Only exceptions matching ``catch`` become a ``Failure``; anything else
    propagates to the caller.
    """
    try:
        return Success(fn(*args, **kwargs))
    except catch as exc:
        logger.debug(
            "%s raised %s; recording failure",
            getattr(fn, "__qualname__", repr(fn)),
            type(exc).__name__,
        )
        return Failure(exc)


__all__ = ["Failure", "Result", "Success", "attempt"]
