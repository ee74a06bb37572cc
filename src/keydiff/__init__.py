"""Structural comparison of nested records, collections, and mappings.

    compare(expected_person, actual_person)
    # [Difference(path="address.zip", message="10001 != 10002")]

Collections of records are matched by identity key; register a key provider
per element type::

    compare(expected_cars, actual_cars, {Car: key_by_attribute("brand")})
"""
from __future__ import annotations

from keydiff.core.compare import compare
from keydiff.core.errors import ConfigFileError, ConfigurationError, MissingKeyProviderError
from keydiff.core.models import Difference, format_difference, make_difference
from keydiff.core.registry import KeyProvider, KeyProviderRegistry, key_by_attribute, key_by_item
from keydiff.core.shapes import ValueShape, classify
from keydiff.testing import assert_no_differences

__version__ = "0.1.0"

__all__ = [
    "ConfigFileError",
    "ConfigurationError",
    "Difference",
    "KeyProvider",
    "KeyProviderRegistry",
    "MissingKeyProviderError",
    "ValueShape",
    "__version__",
    "assert_no_differences",
    "classify",
    "compare",
    "format_difference",
    "key_by_attribute",
    "key_by_item",
    "make_difference",
]
