# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from .fields import Field, FieldKind, FieldTable, GROUP_FIELDS, MEMBER_FIELDS
from .filters import FilterToken, parse_filter, apply_filter
from .sorting import SortKey, parse_sort, build_comparator, apply_sort
from .paging import page_slice
from .engine import run_query, QueryEngine, GROUP_QUERY, MEMBER_QUERY

__all__ = [
    "Field", "FieldKind", "FieldTable", "GROUP_FIELDS", "MEMBER_FIELDS",
    "FilterToken", "parse_filter", "apply_filter",
    "SortKey", "parse_sort", "build_comparator", "apply_sort",
    "page_slice",
    "run_query", "QueryEngine", "GROUP_QUERY", "MEMBER_QUERY",
]
