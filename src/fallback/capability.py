"""Capability introspection.

A capability is any class used as an interface: a ``typing.Protocol``
(checked structurally), an ABC (including virtual subclasses registered
with ``register``), or a plain class (checked with ``isinstance``).
"""

from __future__ import annotations

from functools import cache
import typing

# Bookkeeping names that ``Protocol``/``ABC``/``Generic`` machinery puts on
# a class body; they are never operations of the capability itself.
_SPECIAL_NAMES = frozenset(
    {
        "_MutableMapping__marker",
        "__abstractmethods__",
        "__annotate__",
        "__annotate_func__",
        "__annotations_cache__",
        "__annotations__",
        "__callable_proto_members_only__",
        "__class_getitem__",
        "__dict__",
        "__doc__",
        "__firstlineno__",
        "__init__",
        "__match_args__",
        "__module__",
        "__new__",
        "__non_callable_proto_members__",
        "__orig_bases__",
        "__orig_class__",
        "__parameters__",
        "__protocol_attrs__",
        "__qualname__",
        "__slots__",
        "__static_attributes__",
        "__subclasshook__",
        "__type_params__",
        "__weakref__",
        "_is_protocol",
        "_is_runtime_protocol",
    }
)

_OBJECT_NAMES = frozenset(dir(object))

# Defined on ``object`` but real operations when a class overrides them.
_COMPARISONS = ("__eq__", "__ne__", "__lt__", "__le__", "__gt__", "__ge__")


def is_protocol(capability: type) -> bool:
    """Return True if ``capability`` is a ``typing.Protocol`` class itself."""
    return (
        isinstance(capability, type)
        and capability is not typing.Protocol
        and bool(capability.__dict__.get("_is_protocol", False))
    )


@cache
def capability_members(capability: type) -> frozenset[str]:
    """Return the operation names that make up ``capability``.

    Protocols contribute the members declared on them and their protocol
    bases. Any other class contributes every attribute it exposes beyond
    those of ``object``, plus the comparisons it overrides.
    """
    if not isinstance(capability, type):
        raise TypeError(
            f"capability must be a class, got {type(capability).__name__}"
        )
    if not is_protocol(capability):
        public = {name for name in dir(capability) if name not in _OBJECT_NAMES}
        public.update(
            name
            for name in _COMPARISONS
            if getattr(capability, name) is not getattr(object, name)
        )
        return frozenset(public)

    members: set[str] = set()
    for base in capability.__mro__:
        if base in (object, typing.Protocol, typing.Generic):
            continue
        if not is_protocol(base):
            continue
        names = set(base.__dict__) | set(getattr(base, "__annotations__", {}))
        members.update(
            name
            for name in names
            if name not in _SPECIAL_NAMES and not name.startswith("_abc_")
        )
    return frozenset(members)


def missing_members(value: object, capability: type) -> tuple[str, ...]:
    """Return the protocol members ``value`` lacks, sorted by name.

    Lookups go through the value's type first so that methods are found
    without touching the instance.
    """
    kind = type(value)
    return tuple(
        sorted(
            name
            for name in capability_members(capability)
            if not hasattr(kind, name) and not hasattr(value, name)
        )
    )


def satisfies(value: object, capability: type) -> bool:
    """Return True if ``value`` can be used through ``capability``."""
    if is_protocol(capability):
        return not missing_members(value, capability)
    return isinstance(value, capability)


def require(value: object, capability: type, *, role: str) -> None:
    """Raise ``CapabilityError`` unless ``value`` satisfies ``capability``."""
    from .errors import CapabilityError

    if satisfies(value, capability):
        return

    name = getattr(capability, "__qualname__", repr(capability))
    if is_protocol(capability):
        missing = missing_members(value, capability)
        hint = f"Missing members: {', '.join(missing)}"
    else:
        missing = ()
        hint = f"Subclass {name} or register the type with {name}.register(...)."
    raise CapabilityError(
        f"{role} of type {type(value).__name__} does not satisfy {name}",
        hint=hint,
        capability=capability,
        missing=missing,
    )


__all__ = [
    "capability_members",
    "is_protocol",
    "missing_members",
    "require",
    "satisfies",
]
