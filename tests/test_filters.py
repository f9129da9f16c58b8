# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

import pytest
from gq.errors import InvalidFilterError, BadRequest
from gq.query.fields import GROUP_FIELDS, MEMBER_FIELDS
from gq.query.filters import apply_filter, parse_filter
from gq.schemas import Group
from utils import groups, members, ids

GROUPS = groups(
    (1, "Eng", "builds things"),
    (2, "Ops", "runs things"),
    (3, "Engagement", "talks to people"),
    (4, "Sales", None),
)


@pytest.mark.parametrize("raw", [None, ""])
def test_empty_filter_is_identity(raw):
    assert ids(apply_filter(GROUPS, raw, GROUP_FIELDS)) == [1, 2, 3, 4]


def test_pattern_must_match_the_whole_value():
    assert ids(apply_filter(GROUPS, "name::eng", GROUP_FIELDS)) == [1]
    assert ids(apply_filter(GROUPS, "name::eng.*", GROUP_FIELDS)) == [1, 3]


def test_match_is_case_insensitive_both_ways():
    assert ids(apply_filter(GROUPS, "name::ENG", GROUP_FIELDS)) == [1]
    assert ids(apply_filter(GROUPS, "NAME::ops", GROUP_FIELDS)) == [2]


def test_uppercase_escape_keeps_its_meaning():
    # \D must stay "non-digit", not be folded into \d
    recs = groups((1, "abc"), (2, "123"))
    assert ids(apply_filter(recs, r"name::\D+", GROUP_FIELDS)) == [1]


def test_numeric_fields_match_their_string_form():
    assert ids(apply_filter(GROUPS, "id::[13]", GROUP_FIELDS)) == [1, 3]


def test_tokens_are_anded():
    assert ids(apply_filter(GROUPS, "name::eng.*|description::.*people", GROUP_FIELDS)) == [3]
    assert ids(apply_filter(GROUPS, "name::eng|name::ops", GROUP_FIELDS)) == []


def test_unknown_field_is_inert():
    assert ids(apply_filter(GROUPS, "color::red", GROUP_FIELDS)) == [1, 2, 3, 4]
    assert ids(apply_filter(GROUPS, "color::red|name::ops", GROUP_FIELDS)) == [2]


@pytest.mark.parametrize("raw", ["name", "name::", "name::eng::x", "|", "::eng"])
def test_malformed_tokens_are_ignored(raw):
    assert ids(apply_filter(GROUPS, raw, GROUP_FIELDS)) == [1, 2, 3, 4]


def test_missing_value_matches_as_empty_string():
    assert ids(apply_filter(GROUPS, "description::", GROUP_FIELDS)) == [1, 2, 3, 4]
    assert ids(apply_filter(GROUPS, "description::.*", GROUP_FIELDS)) == [1, 2, 3, 4]
    assert ids(apply_filter(GROUPS, "description::.+", GROUP_FIELDS)) == [1, 2, 3]


def test_invalid_regex_rejects_the_whole_filter():
    with pytest.raises(InvalidFilterError) as ei:
        apply_filter(GROUPS, "name::eng|name::([a-z", GROUP_FIELDS)
    err = ei.value
    assert err.token == "name::([a-z"
    assert err.code == "invalid_filter"
    assert isinstance(err, BadRequest) and isinstance(err, ValueError)


def test_invalid_regex_fails_even_on_empty_input():
    with pytest.raises(InvalidFilterError):
        apply_filter([], "name::*", GROUP_FIELDS)


def test_invalid_regex_on_unknown_field_is_inert():
    assert ids(apply_filter(GROUPS, "color::([", GROUP_FIELDS)) == [1, 2, 3, 4]


def test_filter_preserves_order_and_input():
    recs = list(reversed(GROUPS))
    before = ids(recs)
    assert ids(apply_filter(recs, "name::.*s", GROUP_FIELDS)) == [4, 2]
    assert ids(recs) == before


@pytest.mark.parametrize("raw", ["name::eng.*", "id::[12]|name::.*", "description::.*things"])
def test_filter_is_idempotent(raw):
    once = apply_filter(GROUPS, raw, GROUP_FIELDS)
    twice = apply_filter(once, raw, GROUP_FIELDS)
    assert once == twice


def test_parse_filter_skips_inert_tokens():
    tokens = parse_filter("name::a|bogus::b|x|id::1", GROUP_FIELDS)
    assert [t.field.name for t in tokens] == ["name", "id"]


def test_member_filter_uses_member_fields():
    recs = members((1, "Ada"), (2, "Alan"), (3, "Grace"))
    assert ids(apply_filter(recs, "name::a.*", MEMBER_FIELDS)) == [1, 2]
    assert ids(apply_filter(recs, "description::zzz", MEMBER_FIELDS)) == [1, 2, 3]
