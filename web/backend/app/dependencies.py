"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import Optional

from guardnet.runtime import Runtime, build_runtime

# Shared runtime instance
_runtime: Optional[Runtime] = None


def get_runtime() -> Runtime:
    """Return the singleton Runtime, built from the on-disk configuration."""
    global _runtime
    if _runtime is None:
        _runtime = build_runtime()
    return _runtime
