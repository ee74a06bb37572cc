"""Assertion helper for test suites."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from keydiff.core.compare import compare
from keydiff.core.models import format_difference
from keydiff.core.registry import KeyProvider, KeyProviderRegistry


def assert_no_differences(
    expected: Any,
    actual: Any,
    key_providers: KeyProviderRegistry | Mapping[type, KeyProvider] | None = None,
) -> None:
    """Fail with one line per difference when ``actual`` does not match ``expected``.

    Lines are sorted so the message is stable even though keyed collections
    are reconciled in no particular order.
    """
    differences = compare(expected, actual, key_providers, format_difference)
    if not differences:
        return
    lines = [f"{len(differences)} difference(s) found:"]
    lines.extend(f"  {line}" for line in sorted(differences))
    raise AssertionError("\n".join(lines))


__all__ = ["assert_no_differences"]
