"""Unit tests for the polymorphic result handle."""

from __future__ import annotations

from collections.abc import Mapping
import copy
from typing import Any, Protocol

import pytest

from fallback import Fallback
from fallback.handle import Handle
from tests.conftest import Dog

pytestmark = pytest.mark.unit


class TestDelegation:
    def test_get_returns_backing_value(self):
        dog = Dog()
        assert Handle(dog).get() is dog

    def test_unrestricted_handle_forwards_everything(self):
        handle = Handle(Dog())
        assert handle.speak() == "Rex: woof"
        assert handle.fetch() == "stick"
        assert handle.members is None

    def test_restricted_handle_forwards_capability_members(self):
        handle = Handle(Dog(), members=frozenset({"speak"}))
        assert handle.speak() == "Rex: woof"

    def test_restricted_handle_hides_other_members(self):
        handle = Handle(Dog(), members=frozenset({"speak"}))
        with pytest.raises(AttributeError, match="'fetch' is not an operation"):
            handle.fetch()

    def test_missing_member_on_backing_value_raises_attribute_error(self):
        handle = Handle(Dog(), members=frozenset({"fly"}))
        with pytest.raises(AttributeError):
            handle.fly()

    def test_observation_is_repeatable(self):
        handle = Handle(Dog(), members=frozenset({"speak"}))
        assert handle.speak() == handle.speak() == "Rex: woof"


class TestBuiltinOperations:
    def test_str_and_format_follow_backing_value(self):
        handle = Handle(3.14159, members=frozenset())
        assert str(handle) == "3.14159"
        assert f"{handle:.2f}" == "3.14"

    def test_repr_wraps_backing_repr(self):
        assert repr(Handle("x")) == "Handle('x')"

    def test_equality_and_hash(self):
        assert Handle("x") == Handle("x")
        assert Handle("x") == "x"
        assert Handle("x") != Handle("y")
        assert hash(Handle("x")) == hash("x")

    def test_truthiness_follows_backing_value(self):
        assert not Handle("")
        assert Handle("a")

    def test_container_protocols_when_exposed(self):
        handle = Handle("abc", members=frozenset({"__len__", "__iter__", "__contains__"}))
        assert len(handle) == 3
        assert list(handle) == ["a", "b", "c"]
        assert "b" in handle

    def test_container_protocols_rejected_outside_capability(self):
        handle = Handle("abc", members=frozenset({"upper"}))
        with pytest.raises(TypeError, match="__len__ is not an operation"):
            len(handle)
        with pytest.raises(TypeError):
            iter(handle)

    def test_call_protocol(self):
        assert Handle(len)("abcd") == 4
        with pytest.raises(TypeError):
            Handle(len, members=frozenset())("abcd")


class TestImmutability:
    def test_attributes_cannot_be_set(self):
        handle = Handle(Dog())
        with pytest.raises(AttributeError, match="immutable"):
            handle.name = "Fido"
        with pytest.raises(AttributeError, match="immutable"):
            del handle.name

    def test_copy_keeps_value_and_restriction(self):
        handle = Handle(Dog(), members=frozenset({"speak"}))
        clone = copy.deepcopy(handle)
        assert clone.get() == handle.get()
        assert clone.get() is not handle.get()
        assert clone.members == frozenset({"speak"})


class Ordered(Protocol):
    def __lt__(self, other: Any, /) -> bool: ...


class TestOperatorProtocols:
    def test_mapping_capability_supports_subscript(self):
        handle = Fallback.of(None, capability=Mapping).to({"k": 1})
        assert handle["k"] == 1
        assert "k" in handle
        assert len(handle) == 1
        assert list(handle.keys()) == ["k"]
        with pytest.raises(KeyError):
            handle["missing"]

    def test_mapping_capability_does_not_order(self):
        handle = Fallback.of({"k": 1}, capability=Mapping).to({})
        with pytest.raises(TypeError):
            handle < {}  # noqa: B015

    def test_str_capability_matches_direct_use(self):
        value = "Hello"
        handle = Fallback.of(None, capability=str).to(value)
        assert handle[0] == value[0]
        assert handle[1:3] == value[1:3]
        assert handle + "!" == value + "!"
        assert "Say " + handle == "Say " + value
        assert handle * 2 == value * 2
        assert "".join(reversed(handle)) == "olleH"
        assert handle < "World"

    def test_ordering_protocol(self):
        handle = Fallback.of(None, capability=Ordered).to(3)
        assert handle < 5
        assert 5 > handle
        assert not handle < 2

    def test_ordering_protocol_sorts_handles(self):
        handles = [
            Fallback.of(value, capability=Ordered).to(0) for value in (7, None, 3)
        ]
        assert [h.get() for h in sorted(handles)] == [0, 3, 7]

    def test_undeclared_operators_stay_hidden(self):
        handle = Fallback.of(None, capability=Ordered).to(3)
        with pytest.raises(TypeError, match="__add__ is not an operation"):
            handle + 1
        with pytest.raises(TypeError, match="__gt__ is not an operation"):
            handle > 1  # noqa: B015
        with pytest.raises(TypeError):
            -handle

    def test_arithmetic_on_unrestricted_handle(self):
        handle = Handle(10)
        assert handle + 1 == 11
        assert 1 + handle == 11
        assert handle - 4 == 6
        assert 20 - handle == 10
        assert handle // 3 == 3
        assert 2**handle == 1024
        assert handle | 1 == 11
        assert -handle == -10
        assert abs(Handle(-2)) == 2
        assert Handle(2) + Handle(3) == 5
