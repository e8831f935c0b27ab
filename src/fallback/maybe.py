"""Presence/absence tagged union.

``Maybe[T]`` is either ``Yes(value)`` or the ``NO`` singleton. Types that can
report presence opt in by subclassing or registering with ``AsMaybe``;
``as_maybe`` normalizes the common Python shapes (``None``, ``Maybe`` values,
``AsMaybe`` objects, plain values) into one of the two variants.
"""

from __future__ import annotations

import abc
import dataclasses
import typing


@dataclasses.dataclass(frozen=True, slots=True)
class Yes[T]:
    """The source value existed."""

    value: T


class No:
    """The source value did not exist.

    Stateless; use the module-level ``NO`` instance.
    """

    __slots__ = ()
    _instance: typing.ClassVar[No | None] = None

    def __new__(cls) -> No:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO"

    def __reduce__(self) -> str:
        return "NO"


NO: typing.Final = No()

type Maybe[T] = Yes[T] | No


class AsMaybe[T](abc.ABC):
    """Opt-in conversion to a presence fact about a value of type ``T``.

    Membership is nominal: subclass it, or call ``AsMaybe.register(cls)``.
    A value that merely has a ``maybe`` attribute is an ordinary value.
    """

    __slots__ = ()

    @abc.abstractmethod
    def maybe(self) -> Maybe[T]: ...


def as_maybe(source: object) -> Maybe[typing.Any]:
    """Convert an absence signal into ``Yes``/``NO``.

    - ``None`` is absent.
    - ``Yes``/``No`` pass through unchanged.
    - ``AsMaybe`` instances (``Success``, ``Failure``, registered types)
      decide for themselves.
    - Every other value is present, including ``0``, ``""`` and ``False``.
    """
    if source is None:
        return NO
    if isinstance(source, Yes | No):
        return source
    if isinstance(source, AsMaybe):
        converted = source.maybe()
        if not isinstance(converted, Yes | No):
            raise TypeError(
                f"{type(source).__name__}.maybe() returned "
                f"{type(converted).__name__}, expected Yes or No"
            )
        return converted
    return Yes(source)


__all__ = ["NO", "AsMaybe", "Maybe", "No", "Yes", "as_maybe"]
