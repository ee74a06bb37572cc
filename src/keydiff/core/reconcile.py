"""Collection reconciliation.

Scalar elements are compared as multisets: order is ignored, multiplicity is
not.  Everything else is matched by identity key, either through a key
provider registered for the element type or, for mapping entries, through the
entry's own key.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from keydiff.core.constants import (
    MSG_DUPLICATE_KEY,
    MSG_ELEMENT_EXTRA,
    MSG_ELEMENT_MISSING,
    MSG_ITEM_EXTRA,
    MSG_ITEM_MISSING,
)
from keydiff.core.errors import ConfigurationError, type_name
from keydiff.core.models import R, render
from keydiff.core.paths import key_path
from keydiff.core.registry import KeyProviderRegistry
from keydiff.core.shapes import ValueShape, classify, is_nan, values_equal

if TYPE_CHECKING:
    from keydiff.core.compare import Traversal

logger = logging.getLogger(__name__)

_KEYED_SHAPES = {ValueShape.RECORD, ValueShape.MAPPING, ValueShape.COLLECTION}


class _Tally:
    """Multiplicity of each distinct element, in first-seen order.

    Elements only count as the same value when their types match too, so
    ``1``, ``1.0`` and ``True`` stay apart.  NaN matches NaN.  Unhashable
    elements are matched in a linear scan.
    """

    __slots__ = ("_hashed", "_unhashed")

    def __init__(self, items: Iterable[Any]) -> None:
        self._hashed: dict[Hashable, list[Any]] = {}
        self._unhashed: list[list[Any]] = []
        for item in items:
            self._add(item)

    @staticmethod
    def _bucket(item: Any) -> Hashable:
        if is_nan(item):
            return (type(item), "nan")
        return (type(item), item)

    def _add(self, item: Any) -> None:
        try:
            entry = self._hashed.setdefault(self._bucket(item), [item, 0])
        except TypeError:
            entry = self._scan(item)
            if entry is None:
                entry = [item, 0]
                self._unhashed.append(entry)
        entry[1] += 1

    def _scan(self, item: Any) -> list[Any] | None:
        for entry in self._unhashed:
            if type(entry[0]) is type(item) and values_equal(entry[0], item):
                return entry
        return None

    def count(self, item: Any) -> int:
        try:
            entry = self._hashed.get(self._bucket(item))
        except TypeError:
            entry = self._scan(item)
        return 0 if entry is None else entry[1]

    def entries(self) -> list[tuple[Any, int]]:
        return [(value, count) for value, count in (*self._hashed.values(), *self._unhashed)]


def uses_key_provider(sample: Any, registry: KeyProviderRegistry) -> bool:
    return type(sample) in registry or classify(sample) in _KEYED_SHAPES


def _first_present(*sides: list[Any]) -> Any:
    for items in sides:
        for item in items:
            if item is not None:
                return item
    return None


def reconcile_collections(traversal: Traversal[R], expected: Iterable[Any], actual: Iterable[Any], path: str) -> list[R]:
    expected_items = list(expected)
    actual_items = list(actual)
    if not expected_items and not actual_items:
        return []

    # Infer the element type from whichever side has a non-None element.
    sample = _first_present(expected_items, actual_items)
    if not uses_key_provider(sample, traversal.registry):
        logger.debug("multiset reconciliation at %r (%s)", path, type_name(type(sample)))
        return reconcile_multiset(traversal, expected_items, actual_items, path)

    logger.debug("keyed reconciliation at %r (%s)", path, type_name(type(sample)))
    registry = traversal.registry

    def key_of(item: Any) -> Hashable:
        return registry.lookup(type(item), path)(item)

    # None elements have no identity; they are counted, not keyed.
    differences = reconcile_multiset(
        traversal,
        [item for item in expected_items if item is None],
        [item for item in actual_items if item is None],
        path,
    )
    differences.extend(
        reconcile_keyed(
            traversal,
            [item for item in expected_items if item is not None],
            [item for item in actual_items if item is not None],
            path,
            key_of=key_of,
        )
    )
    return differences


def reconcile_multiset(traversal: Traversal[R], expected_items: list[Any], actual_items: list[Any], path: str) -> list[R]:
    expected_tally = _Tally(expected_items)
    actual_tally = _Tally(actual_items)
    differences: list[R] = []

    for value, count in expected_tally.entries():
        for _ in range(count - actual_tally.count(value)):
            differences.append(traversal.emit(path, MSG_ELEMENT_MISSING.format(value=render(value))))

    for value, count in actual_tally.entries():
        for _ in range(count - expected_tally.count(value)):
            differences.append(traversal.emit(path, MSG_ELEMENT_EXTRA.format(value=render(value))))

    return differences


def _identity(item: Any) -> Any:
    return item


def _index_by_key(
    traversal: Traversal[R],
    items: list[Any],
    path: str,
    *,
    side: str,
    key_of: Callable[[Any], Hashable],
    value_of: Callable[[Any], Any],
    differences: list[R],
) -> dict[Hashable, Any]:
    indexed: dict[Hashable, Any] = {}
    for item in items:
        key = key_of(item)
        try:
            seen = key in indexed
        except TypeError as exc:
            raise ConfigurationError(
                f"Key provider for {type_name(type(item))} returned unhashable key {key!r} at {path or '<root>'}"
            ) from exc
        if seen:
            message = MSG_DUPLICATE_KEY.format(side=side, value=render(value_of(item)))
            differences.append(traversal.emit(key_path(path, key), message))
            continue
        indexed[key] = item
    return indexed


def reconcile_keyed(
    traversal: Traversal[R],
    expected_items: list[Any],
    actual_items: list[Any],
    path: str,
    *,
    key_of: Callable[[Any], Hashable],
    value_of: Callable[[Any], Any] = _identity,
) -> list[R]:
    """Match elements across both sides by key and compare the matched pairs.

    Keys are visited in expected order, then actual-only keys in actual
    order.  Callers should not rely on that ordering.
    """
    differences: list[R] = []
    expected_by_key = _index_by_key(
        traversal, expected_items, path, side="expected", key_of=key_of, value_of=value_of, differences=differences
    )
    actual_by_key = _index_by_key(
        traversal, actual_items, path, side="actual", key_of=key_of, value_of=value_of, differences=differences
    )

    for key, expected_item in expected_by_key.items():
        item_path = key_path(path, key)
        if key not in actual_by_key:
            message = MSG_ITEM_MISSING.format(value=render(value_of(expected_item)))
            differences.append(traversal.emit(item_path, message))
            continue
        differences.extend(traversal.compare(value_of(expected_item), value_of(actual_by_key[key]), item_path))

    for key, actual_item in actual_by_key.items():
        if key in expected_by_key:
            continue
        message = MSG_ITEM_EXTRA.format(value=render(value_of(actual_item)))
        differences.append(traversal.emit(key_path(path, key), message))

    return differences


def _entry_key(entry: tuple[Any, Any]) -> Hashable:
    return entry[0]


def _entry_value(entry: tuple[Any, Any]) -> Any:
    return entry[1]


def reconcile_mappings(traversal: Traversal[R], expected: Mapping[Any, Any], actual: Mapping[Any, Any], path: str) -> list[R]:
    return reconcile_keyed(
        traversal,
        list(expected.items()),
        list(actual.items()),
        path,
        key_of=_entry_key,
        value_of=_entry_value,
    )


__all__ = [
    "reconcile_collections",
    "reconcile_keyed",
    "reconcile_mappings",
    "reconcile_multiset",
    "uses_key_provider",
]
