# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
import logging
from typing import Any, Iterable, List
from gq.query.fields import FieldTable, GROUP_FIELDS, MEMBER_FIELDS
from gq.query.filters import apply_filter
from gq.query.sorting import apply_sort
from gq.query.paging import page_slice

log = logging.getLogger("gq.query")


def run_query(records: Iterable[Any], page: int, limit: int,
              filter: str | None = None, sort: str | None = None,
              *, fields: FieldTable) -> List[Any]:
    """
    Filter, then sort, then page a snapshot of records.

    The input is copied and never mutated. Takes no locks; the caller hands
    in whatever snapshot it read from the store.
    """
    snapshot = list(records)
    kept = apply_filter(snapshot, filter, fields)
    ordered = apply_sort(kept, sort, fields)
    out = page_slice(ordered, page, limit)
    log.debug(
        f"query page={page} limit={limit} filter={filter!r} sort={sort!r}: "
        f"{len(snapshot)} in, {len(kept)} kept, {len(out)} out"
    )
    return out


class QueryEngine:
    """Binds run_query to one entity type's field table."""

    def __init__(self, fields: FieldTable):
        self.fields = fields

    def query(self, records: Iterable[Any], page: int = 1, limit: int = 10,
              filter: str | None = None, sort: str | None = None) -> List[Any]:
        return run_query(records, page, limit, filter, sort, fields=self.fields)


GROUP_QUERY = QueryEngine(GROUP_FIELDS)
MEMBER_QUERY = QueryEngine(MEMBER_FIELDS)
