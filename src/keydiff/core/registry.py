from __future__ import annotations

from collections.abc import Callable, Hashable, Iterator, Mapping
from operator import attrgetter
from typing import Any

from keydiff.core.errors import ConfigurationError, MissingKeyProviderError

KeyProvider = Callable[[Any], Hashable]


class KeyProviderRegistry:
    """Element type -> identity key extractor, used to match elements of keyed collections.

    Lookup tries the exact runtime type first and then walks its MRO, so a
    provider registered for a base class also covers its subclasses.
    """

    __slots__ = ("_providers",)

    def __init__(self, providers: Mapping[type, KeyProvider] | None = None) -> None:
        self._providers: dict[type, KeyProvider] = {}
        for element_type, provider in (providers or {}).items():
            self.register(element_type, provider)

    @classmethod
    def coerce(cls, value: KeyProviderRegistry | Mapping[type, KeyProvider] | None) -> KeyProviderRegistry:
        if isinstance(value, KeyProviderRegistry):
            return value
        return cls(value)

    def register(self, element_type: type, provider: KeyProvider | None = None) -> Any:
        """Register ``provider`` for ``element_type``.

        Without ``provider`` this returns a decorator, so a key function can be
        declared in place::

            @registry.register(Car)
            def car_key(car): return car.brand
        """
        if not isinstance(element_type, type):
            raise ConfigurationError(f"Key providers are registered per type, got {element_type!r}")
        if provider is None:

            def decorator(func: KeyProvider) -> KeyProvider:
                self.register(element_type, func)
                return func

            return decorator
        if not callable(provider):
            raise ConfigurationError(f"Key provider for {element_type.__qualname__} must be callable")
        self._providers[element_type] = provider
        return provider

    def merged(self, other: KeyProviderRegistry | Mapping[type, KeyProvider]) -> KeyProviderRegistry:
        """New registry holding both sets of providers; ``other`` wins on conflicts."""
        combined = KeyProviderRegistry(self._providers)
        for element_type, provider in KeyProviderRegistry.coerce(other).items():
            combined.register(element_type, provider)
        return combined

    def find(self, element_type: type) -> KeyProvider | None:
        provider = self._providers.get(element_type)
        if provider is not None:
            return provider
        for base in element_type.__mro__[1:]:
            provider = self._providers.get(base)
            if provider is not None:
                return provider
        return None

    def lookup(self, element_type: type, path: str = "") -> KeyProvider:
        provider = self.find(element_type)
        if provider is None:
            raise MissingKeyProviderError(element_type=element_type, path=path)
        return provider

    def types(self) -> list[type]:
        return list(self._providers)

    def items(self) -> Iterator[tuple[type, KeyProvider]]:
        return iter(self._providers.items())

    def __contains__(self, element_type: object) -> bool:
        return isinstance(element_type, type) and self.find(element_type) is not None

    def __len__(self) -> int:
        return len(self._providers)

    def __repr__(self) -> str:
        names = ", ".join(sorted(t.__qualname__ for t in self._providers))
        return f"KeyProviderRegistry({names})"


def key_by_attribute(*names: str) -> KeyProvider:
    """Key elements by one attribute, or by a tuple of several."""
    if not names:
        raise ConfigurationError("key_by_attribute() needs at least one attribute name")
    return attrgetter(*names)


def key_by_item(*names: str) -> KeyProvider:
    """Key mapping-shaped elements by the first of ``names`` they contain."""
    if not names:
        raise ConfigurationError("key_by_item() needs at least one item name")

    def provider(element: Any) -> Hashable:
        for name in names:
            if name in element:
                return element[name]
        raise ConfigurationError(f"Element has none of the key items {list(names)}: {element!r}")

    return provider


__all__ = ["KeyProvider", "KeyProviderRegistry", "key_by_attribute", "key_by_item"]
