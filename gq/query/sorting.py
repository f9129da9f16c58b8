# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Callable, Iterable, List
from gq.query.fields import Field, FieldKind, FieldTable

KEY_SEP = "|"
DESC_PREFIX = "-"

Comparator = Callable[[Any, Any], int]


def _cmp(a: Any, b: Any) -> int:
    # None orders before any value
    if a is None or b is None:
        return (a is not None) - (b is not None)
    return (a > b) - (a < b)


def compare_numbers(a: Any, b: Any) -> int:
    return _cmp(None if a is None else int(a), None if b is None else int(b))


def compare_strings(a: Any, b: Any) -> int:
    # plain str comparison is ordinal by code point
    return _cmp(None if a is None else str(a), None if b is None else str(b))


_BY_KIND = {
    FieldKind.NUMBER: compare_numbers,
    FieldKind.STRING: compare_strings,
}


@dataclass(frozen=True)
class SortKey:
    name: str
    descending: bool
    field: Field | None

    def compare(self, a: Any, b: Any) -> int:
        if self.field is None:
            return 0
        result = _BY_KIND[self.field.kind](self.field.get(a), self.field.get(b))
        return -result if self.descending else result


def parse_sort(raw: str | None, fields: FieldTable) -> List[SortKey]:
    """
    Parses `field1|-field2` into sort keys, in priority order.
    Unknown fields are kept as keys that never separate two records.
    """
    if not raw:
        return []
    keys: List[SortKey] = []
    for part in raw.split(KEY_SEP):
        if not part:
            continue
        descending = part.startswith(DESC_PREFIX)
        name = part[len(DESC_PREFIX):] if descending else part
        keys.append(SortKey(name, descending, fields.resolve(name)))
    return keys


def build_comparator(keys: Iterable[SortKey]) -> Comparator:
    keys = list(keys)

    def compare(a: Any, b: Any) -> int:
        for key in keys:
            result = key.compare(a, b)
            if result != 0:
                return result
        return 0
    return compare


def apply_sort(records: Iterable[Any], raw: str | None,
               fields: FieldTable) -> List[Any]:
    keys = parse_sort(raw, fields)
    if not keys:
        return list(records)
    # sorted() is stable: full ties keep their input order
    return sorted(records, key=cmp_to_key(build_comparator(keys)))
