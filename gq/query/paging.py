# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
from typing import Any, List, Sequence


def page_bounds(page: int, limit: int, total: int) -> tuple[int, int]:
    """Half-open [start, end) of a 1-based page; start may exceed total."""
    if page < 1:
        raise ValueError("page must be >= 1")
    if limit < 1:
        raise ValueError("limit must be >= 1")
    start = (page - 1) * limit
    return start, min(page * limit, total)


def page_slice(records: Sequence[Any], page: int, limit: int) -> List[Any]:
    start, end = page_bounds(page, limit, len(records))
    if start >= len(records):
        # out of range -> empty page
        return []
    return list(records[start:end])
