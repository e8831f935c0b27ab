"""The polymorphic result handle.

A ``Handle[C]`` owns exactly one value and forwards operations to it. When
built with a member set, only those names are reachable, so callers can use
the handle through the capability ``C`` and nothing else. The handle does
not record whether its value was the original or a substituted default.
"""

from __future__ import annotations

import operator
from typing import Any


def _unwrap(other: object) -> object:
    return other._value if isinstance(other, Handle) else other


def _forward(name: str, op: Any) -> Any:
    def method(self: Handle[Any], other: object) -> Any:
        self._operation(name)
        return op(self._value, _unwrap(other))

    method.__name__ = name
    return method


def _reflected(name: str, forward: str, op: Any) -> Any:
    # ``x + handle`` is ``x + value``; the forward operator alone allows it.
    def method(self: Handle[Any], other: object) -> Any:
        self._operation(name, forward)
        return op(_unwrap(other), self._value)

    method.__name__ = name
    return method


def _unary(name: str, op: Any) -> Any:
    def method(self: Handle[Any]) -> Any:
        self._operation(name)
        return op(self._value)

    method.__name__ = name
    return method


class Handle[C]:
    """Type-erased owner of one value, accessed through capability ``C``."""

    __slots__ = ("_members", "_value")

    def __init__(self, value: C, *, members: frozenset[str] | None = None) -> None:
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_members", members)

    def get(self) -> C:
        """Return the backing value typed as the capability."""
        return self._value

    @property
    def members(self) -> frozenset[str] | None:
        """Names reachable through this handle, or None when unrestricted."""
        return self._members

    def _exposes(self, name: str) -> bool:
        return self._members is None or name in self._members

    def _operation(self, name: str, *aliases: str) -> None:
        if not any(self._exposes(n) for n in (name, *aliases)):
            raise TypeError(
                f"{name} is not an operation of this handle's capability"
            )

    def __getattr__(self, name: str) -> Any:
        # Slots are looked up before __getattr__; reaching here for one means
        # the instance was never initialized (e.g. mid-unpickle).
        if name in Handle.__slots__:
            raise AttributeError(name)
        # Hooks looked up on the instance (__deepcopy__, __array__, ...) must
        # not leak through unless the capability names them.
        if name.startswith("__") and name.endswith("__"):
            if self._members is None or name not in self._members:
                raise AttributeError(name)
        elif not self._exposes(name):
            raise AttributeError(
                f"{name!r} is not an operation of this handle's capability"
            )
        return getattr(self._value, name)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self) -> tuple[Any, ...]:
        return (_restore, (self._value, self._members))

    def __str__(self) -> str:
        return str(self._value)

    def __format__(self, format_spec: str) -> str:
        return format(self._value, format_spec)

    def __repr__(self) -> str:
        return f"Handle({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Handle):
            other = other._value
        return bool(self._value == other)

    def __hash__(self) -> int:
        return hash(self._value)

    def __bool__(self) -> bool:
        return bool(self._value)

    # Container, call and operator protocols go through type slots, never
    # through __getattr__, so each one is spelled out and gated here.

    def __len__(self) -> int:
        self._operation("__len__")
        return len(self._value)  # type: ignore[arg-type]

    def __iter__(self) -> Any:
        self._operation("__iter__", "__getitem__")
        return iter(self._value)  # type: ignore[call-overload]

    def __contains__(self, item: object) -> bool:
        self._operation("__contains__", "__iter__", "__getitem__")
        return item in self._value  # type: ignore[operator]

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        self._operation("__call__")
        return self._value(*args, **kwargs)  # type: ignore[operator]

    def __getitem__(self, key: Any) -> Any:
        self._operation("__getitem__")
        return self._value[key]  # type: ignore[index]

    def __reversed__(self) -> Any:
        self._operation("__reversed__", "__getitem__")
        return reversed(self._value)  # type: ignore[call-overload]

    # Ordering; Python reflects these itself (``5 > handle`` calls ``__lt__``).

    __lt__ = _forward("__lt__", operator.lt)
    __le__ = _forward("__le__", operator.le)
    __gt__ = _forward("__gt__", operator.gt)
    __ge__ = _forward("__ge__", operator.ge)

    # Arithmetic and bitwise operators. Results are plain values, not handles.

    __add__ = _forward("__add__", operator.add)
    __sub__ = _forward("__sub__", operator.sub)
    __mul__ = _forward("__mul__", operator.mul)
    __matmul__ = _forward("__matmul__", operator.matmul)
    __truediv__ = _forward("__truediv__", operator.truediv)
    __floordiv__ = _forward("__floordiv__", operator.floordiv)
    __mod__ = _forward("__mod__", operator.mod)
    __pow__ = _forward("__pow__", operator.pow)
    __lshift__ = _forward("__lshift__", operator.lshift)
    __rshift__ = _forward("__rshift__", operator.rshift)
    __and__ = _forward("__and__", operator.and_)
    __xor__ = _forward("__xor__", operator.xor)
    __or__ = _forward("__or__", operator.or_)

    __radd__ = _reflected("__radd__", "__add__", operator.add)
    __rsub__ = _reflected("__rsub__", "__sub__", operator.sub)
    __rmul__ = _reflected("__rmul__", "__mul__", operator.mul)
    __rmatmul__ = _reflected("__rmatmul__", "__matmul__", operator.matmul)
    __rtruediv__ = _reflected("__rtruediv__", "__truediv__", operator.truediv)
    __rfloordiv__ = _reflected("__rfloordiv__", "__floordiv__", operator.floordiv)
    __rmod__ = _reflected("__rmod__", "__mod__", operator.mod)
    __rpow__ = _reflected("__rpow__", "__pow__", operator.pow)
    __rlshift__ = _reflected("__rlshift__", "__lshift__", operator.lshift)
    __rrshift__ = _reflected("__rrshift__", "__rshift__", operator.rshift)
    __rand__ = _reflected("__rand__", "__and__", operator.and_)
    __rxor__ = _reflected("__rxor__", "__xor__", operator.xor)
    __ror__ = _reflected("__ror__", "__or__", operator.or_)

    __neg__ = _unary("__neg__", operator.neg)
    __pos__ = _unary("__pos__", operator.pos)
    __abs__ = _unary("__abs__", operator.abs)
    __invert__ = _unary("__invert__", operator.invert)


def _restore[C](value: C, members: frozenset[str] | None) -> Handle[C]:
    return Handle(value, members=members)


__all__ = ["Handle"]
