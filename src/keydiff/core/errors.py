from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from keydiff.core.constants import ERROR_CODE_INVALID_CONFIG, ERROR_CODE_MISSING_KEY_PROVIDER


class ConfigurationError(ValueError):
    """Caller setup mistake. Aborts the comparison instead of being reported as a difference."""

    code = ERROR_CODE_INVALID_CONFIG


class ConfigFileError(ConfigurationError):
    pass


def type_name(value_type: type) -> str:
    module = value_type.__module__
    if module == "builtins":
        return value_type.__qualname__
    return f"{module}.{value_type.__qualname__}"


@dataclass(slots=True)
class MissingKeyProviderError(ConfigurationError):
    element_type: type
    path: str

    code = ERROR_CODE_MISSING_KEY_PROVIDER

    def to_payload(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "element_type": type_name(self.element_type),
            "path": self.path,
        }

    def __str__(self) -> str:
        location = self.path or "<root>"
        return (
            f"{self.code}: no key provider registered for elements of type "
            f"{type_name(self.element_type)} at {location}"
        )


__all__ = [
    "ConfigFileError",
    "ConfigurationError",
    "MissingKeyProviderError",
    "type_name",
]
