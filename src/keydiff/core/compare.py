from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, Generic

from keydiff.core.constants import (
    MSG_ACTUAL_MISSING,
    MSG_EXPECTED_MISSING,
    MSG_TYPE_MISMATCH,
    MSG_VALUE_MISMATCH,
)
from keydiff.core.models import R, make_difference, render
from keydiff.core.paths import field_path
from keydiff.core.reconcile import reconcile_collections, reconcile_mappings
from keydiff.core.registry import KeyProvider, KeyProviderRegistry
from keydiff.core.shapes import ValueShape, classify, record_fields, values_equal

logger = logging.getLogger(__name__)


class Traversal(Generic[R]):
    """State of one top-level comparison.

    The registry is shared unchanged by every nested call. ``_active`` holds the
    (expected, actual) node pairs currently being descended into; meeting one
    of them again means the input is cyclic and the pair is treated as equal.
    """

    __slots__ = ("_active", "reduce", "registry")

    def __init__(self, registry: KeyProviderRegistry, reduce: Callable[[str, str], R]) -> None:
        self.registry = registry
        self.reduce = reduce
        self._active: set[tuple[int, int]] = set()

    def emit(self, path: str, message: str) -> R:
        return self.reduce(path, message)

    def compare(self, expected: Any, actual: Any, path: str) -> list[R]:
        if expected is None and actual is None:
            return []
        if expected is None:
            return [self.emit(path, MSG_EXPECTED_MISSING.format(actual=render(actual)))]
        if actual is None:
            return [self.emit(path, MSG_ACTUAL_MISSING.format(expected=render(expected)))]

        expected_type = type(expected)
        actual_type = type(actual)
        if expected_type is not actual_type:
            message = MSG_TYPE_MISMATCH.format(
                expected=expected_type.__qualname__,
                actual=actual_type.__qualname__,
            )
            return [self.emit(path, message)]

        shape = classify(expected)
        if shape in (ValueShape.SCALAR, ValueShape.OPAQUE):
            return self._compare_values(expected, actual, path)
        pair = (id(expected), id(actual))
        if pair in self._active:
            logger.debug("cycle detected at %r, treating pair as equal", path)
            return []
        self._active.add(pair)
        try:
            if shape is ValueShape.MAPPING:
                return reconcile_mappings(self, expected, actual, path)
            if shape is ValueShape.COLLECTION:
                return reconcile_collections(self, expected, actual, path)
            return self._compare_records(expected, actual, path)
        finally:
            self._active.discard(pair)

    def _compare_records(self, expected: Any, actual: Any, path: str) -> list[R]:
        differences: list[R] = []
        for name in record_fields(expected):
            differences.extend(
                self.compare(getattr(expected, name), getattr(actual, name), field_path(path, name))
            )
        return differences

    def _compare_values(self, expected: Any, actual: Any, path: str) -> list[R]:
        if values_equal(expected, actual):
            return []
        message = MSG_VALUE_MISMATCH.format(expected=render(expected), actual=render(actual))
        return [self.emit(path, message)]


def compare(
    expected: Any,
    actual: Any,
    key_providers: KeyProviderRegistry | Mapping[type, KeyProvider] | None = None,
    reduce: Callable[[str, str], R] = make_difference,  # type: ignore[assignment]
    *,
    path: str = "",
) -> list[R]:
    """Compare ``expected`` against ``actual`` and return every difference found.

    Each difference is built by ``reduce(path, message)``; the default builds
    :class:`~keydiff.core.models.Difference` records.  Collections of records,
    mappings, or nested collections need a key provider for their element type
    in ``key_providers``; when one is missing
    :class:`~keydiff.core.errors.MissingKeyProviderError` is raised and no
    partial result is returned.
    """
    registry = KeyProviderRegistry.coerce(key_providers)
    return Traversal(registry, reduce).compare(expected, actual, path)


__all__ = ["Traversal", "compare"]
