"""Print whichever greeting is available.

The lookup result and the default are different types; both only need to
be printable, so downstream code never branches on which one it got.

Run:
    python examples/greeting.py [name]
"""

from __future__ import annotations

from dataclasses import dataclass
import sys
from typing import Protocol

from fallback import Fallback


class Printable(Protocol):
    def __str__(self) -> str: ...


class Greeter(Protocol):
    def greet(self) -> str: ...


@dataclass(frozen=True)
class Person:
    name: str

    def greet(self) -> str:
        return f"Hello, {self.name}"


class Anonymous:
    def greet(self) -> str:
        return "Hello"


_PEOPLE = {"ada": Person("Ada"), "grace": Person("Grace")}


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    key = args[0] if args else None

    something = Fallback.of(None, capability=Printable).to("Hello")
    print(something)

    greeter = Fallback.of(_PEOPLE.get(key or ""), capability=Greeter).to(Anonymous())
    print(greeter.greet())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
