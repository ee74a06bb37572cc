from __future__ import annotations

from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import Any, TypeVar

R = TypeVar("R")

Reducer = Callable[[str, str], R]


@dataclass(slots=True, frozen=True)
class Difference:
    path: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def __str__(self) -> str:
        return format_difference(self.path, self.message)


def render(value: Any) -> str:
    return repr(value)


def make_difference(path: str, message: str) -> Difference:
    return Difference(path=path, message=message)


def format_difference(path: str, message: str) -> str:
    if not path:
        return message
    return f"{path}: {message}"


__all__ = ["Difference", "R", "Reducer", "format_difference", "make_difference", "render"]
