"""
Canonical cache keys for parameterized queries.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping


def _text(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def canonical(params: Mapping[str, Any]) -> str:
    """Sorted ``k=v`` pairs joined by ``&``; ``None`` values are left out."""
    return "&".join(f"{k}={_text(params[k])}" for k in sorted(params) if params[k] is not None)


def query(kind: str, params: Mapping[str, Any]) -> str:
    return canonical({**params, "kind": kind})
