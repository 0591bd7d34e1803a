"""
Typed accessors over raw upstream records.

Upstream backends rename fields between versions and disagree on casing, so
every canonical field is read through an ordered alias list. The first alias
holding a usable value wins; a value is usable when it is not ``None``, not a
blank string, and coerces to the requested type. ``0`` and ``False`` are
usable values. When no listed alias matches exactly, a case-insensitive match
on the same aliases is tried before falling back to the default.

None of the accessors raise: malformed input always yields the default.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, List, Optional, TypeVar

log = logging.getLogger(__name__)

_T = TypeVar("_T")
_MISSING = object()

_TRUE_STRINGS = {"true", "yes", "y", "1", "t"}
_FALSE_STRINGS = {"false", "no", "n", "0", "f"}


def to_seconds(value: Any) -> float | None:
    """Epoch seconds from a number, numeric string or ISO-8601 string."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return _iso_seconds(text)
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(numeric):
        return None
    # Heuristic conversion for unix timestamps encoded in ns/us/ms.
    if numeric > 1e17:
        return numeric / 1e9
    if numeric > 1e14:
        return numeric / 1e6
    if numeric > 1e11:
        return numeric / 1e3
    return numeric


def _iso_seconds(text: str) -> float | None:
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        return float(value)
    numeric = float(value)
    if not math.isfinite(numeric):
        raise ValueError("non-finite number")
    return numeric


def _to_int(value: Any) -> int:
    return int(_to_float(value))


def _to_text(value: Any) -> str:
    if isinstance(value, (dict, list, tuple, set)):
        raise TypeError("not a scalar")
    return str(value)


def _to_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _to_mapping(value: Any) -> Dict[str, Any]:
    if not isinstance(value, Mapping):
        raise TypeError("not a mapping")
    return {str(k): v for k, v in value.items()}


class RawRecord(Mapping):
    """Read-only view over one upstream object. Non-mappings become empty."""

    __slots__ = ("_data", "_folded")

    def __init__(self, data: Any = None) -> None:
        if isinstance(data, RawRecord):
            data = data._data
        self._data: Dict[str, Any] = dict(data) if isinstance(data, Mapping) else {}
        self._folded: Dict[str, str] | None = None

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"RawRecord({self._data!r})"

    def _fold(self, alias: str) -> Any:
        if self._folded is None:
            self._folded = {}
            for key in self._data:
                self._folded.setdefault(str(key).lower(), key)
        key = self._folded.get(alias.lower())
        return _MISSING if key is None else self._data[key]

    def _first(self, aliases: tuple[str, ...], coerce: Callable[[Any], _T]) -> _T | object:
        for lookup in (lambda a: self._data.get(a, _MISSING), self._fold):
            for alias in aliases:
                value = lookup(alias)
                if value is _MISSING or value is None:
                    continue
                if isinstance(value, str) and not value.strip():
                    continue
                try:
                    return coerce(value)
                except (TypeError, ValueError) as exc:
                    log.debug("alias %s holds unusable value %r: %s", alias, value, exc)
        return _MISSING

    def present(self, *aliases: str) -> bool:
        return self._first(aliases, lambda v: v) is not _MISSING

    def number(self, *aliases: str, default: float = 0.0) -> float:
        value = self._first(aliases, _to_float)
        return default if value is _MISSING else value

    def optional_number(self, *aliases: str) -> Optional[float]:
        value = self._first(aliases, _to_float)
        return None if value is _MISSING else value

    def integer(self, *aliases: str, default: int = 0) -> int:
        value = self._first(aliases, _to_int)
        return default if value is _MISSING else value

    def optional_integer(self, *aliases: str) -> Optional[int]:
        value = self._first(aliases, _to_int)
        return None if value is _MISSING else value

    def text(self, *aliases: str, default: str = "") -> str:
        value = self._first(aliases, _to_text)
        return default if value is _MISSING else value

    def optional_text(self, *aliases: str) -> Optional[str]:
        value = self._first(aliases, _to_text)
        return None if value is _MISSING else value

    def flag(self, *aliases: str, default: bool = False) -> bool:
        value = self._first(aliases, _to_flag)
        return default if value is _MISSING else value

    def timestamp(self, *aliases: str) -> Optional[float]:
        def _coerce(v: Any) -> float:
            seconds = to_seconds(v)
            if seconds is None:
                raise ValueError("not a timestamp")
            return seconds

        value = self._first(aliases, _coerce)
        return None if value is _MISSING else value

    def mapping(self, *aliases: str) -> Dict[str, Any]:
        value = self._first(aliases, _to_mapping)
        return {} if value is _MISSING else value

    def record(self, *aliases: str) -> RawRecord:
        return RawRecord(self.mapping(*aliases))

    def choice(self, parser: Callable[[Any], _T], *aliases: str) -> _T:
        """Parse the first present alias with ``parser``; ``parser(None)`` supplies the default."""
        value = self._first(aliases, _to_text)
        return parser(None if value is _MISSING else value)

    def items_list(self, *aliases: str) -> List[Any]:
        def _coerce(v: Any) -> List[Any]:
            if not isinstance(v, (list, tuple)):
                raise TypeError("not a list")
            return list(v)

        value = self._first(aliases, _coerce)
        return [] if value is _MISSING else value


def as_record(obj: Any) -> RawRecord:
    return obj if isinstance(obj, RawRecord) else RawRecord(obj)


def collection(payload: Any, *aliases: str) -> List[RawRecord]:
    """Records under the first list-valued alias; non-mapping items are skipped."""
    items = as_record(payload).items_list(*aliases)
    return [RawRecord(item) for item in items if isinstance(item, Mapping)]


def has_any(payload: Any, *aliases: str) -> bool:
    return as_record(payload).present(*aliases)
