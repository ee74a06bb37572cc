"""keydiff core: shape dispatch, record comparison, collection reconciliation.

This package holds the whole comparison engine.  It has **no** dependency on
typer, PyYAML, or anything else outside the standard library.
"""
from __future__ import annotations
