# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Any, Iterable, List
from gq.errors import InvalidFilterError
from gq.query.fields import Field, FieldTable

TOKEN_SEP = "|"
PAIR_SEP = "::"


@dataclass(frozen=True)
class FilterToken:
    field: Field
    pattern: re.Pattern

    def matches(self, record: Any) -> bool:
        value = self.field.get(record)
        text = "" if value is None else str(value)
        return self.pattern.fullmatch(text.lower()) is not None


def _split_pair(token: str) -> List[str]:
    # trailing empty parts are dropped: "name::" has no pattern
    parts = token.split(PAIR_SEP)
    while parts and parts[-1] == "":
        parts.pop()
    return parts


def parse_filter(raw: str | None, fields: FieldTable) -> List[FilterToken]:
    """
    Parses `field1::pattern1|field2::pattern2` into filter tokens.

    Tokens that are not exactly a field/pattern pair are ignored, and so are
    tokens naming a field the table doesn't know. Patterns are compiled
    case-insensitively; a pattern that doesn't compile raises
    InvalidFilterError, so a bad filter never yields a partial result.
    """
    if not raw:
        return []
    tokens: List[FilterToken] = []
    for token in raw.split(TOKEN_SEP):
        parts = _split_pair(token)
        if len(parts) != 2:
            continue
        name, pattern = parts
        field = fields.resolve(name)
        if field is None:
            continue
        try:
            compiled = re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            raise InvalidFilterError(token, str(e)) from e
        tokens.append(FilterToken(field, compiled))
    return tokens


def matches_all(record: Any, tokens: Iterable[FilterToken]) -> bool:
    return all(t.matches(record) for t in tokens)


def apply_filter(records: Iterable[Any], raw: str | None,
                 fields: FieldTable) -> List[Any]:
    tokens = parse_filter(raw, fields)
    if not tokens:
        return list(records)
    return [r for r in records if matches_all(r, tokens)]
