# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Logical field tables: map a case-insensitive field name to a typed getter.

Each entity type gets one table, built at import time. Filter and sort
resolve field names through it instead of looking attributes up by name.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from operator import attrgetter
from typing import Any, Callable, Dict, Iterable, List


class FieldKind(str, Enum):
    NUMBER = "number"
    STRING = "string"


@dataclass(frozen=True)
class Field:
    name: str
    kind: FieldKind
    getter: Callable[[Any], Any]

    def get(self, record: Any) -> Any:
        return self.getter(record)


class FieldTable:
    def __init__(self, fields: Iterable[Field]):
        self._fields: Dict[str, Field] = {}
        for f in fields:
            key = f.name.casefold()
            if key in self._fields:
                raise ValueError(f"duplicate field: {f.name}")
            self._fields[key] = f

    def resolve(self, name: str | None) -> Field | None:
        """Returns the field for `name`, or None if the table has no such field."""
        if not name:
            return None
        return self._fields.get(name.casefold())

    def value(self, record: Any, name: str) -> Any:
        f = self.resolve(name)
        if f is None:
            raise KeyError(name)
        return f.get(record)

    def names(self) -> List[str]:
        return [f.name for f in self._fields.values()]

    def __contains__(self, name: str) -> bool:
        return self.resolve(name) is not None

    def __repr__(self) -> str:
        return f"FieldTable({self.names()!r})"


GROUP_FIELDS = FieldTable([
    Field("id", FieldKind.NUMBER, attrgetter("id")),
    Field("name", FieldKind.STRING, attrgetter("name")),
    Field("description", FieldKind.STRING, attrgetter("description")),
])

MEMBER_FIELDS = FieldTable([
    Field("id", FieldKind.NUMBER, attrgetter("id")),
    Field("name", FieldKind.STRING, attrgetter("name")),
])
