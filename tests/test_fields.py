# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

import pytest
from operator import attrgetter
from gq.query.fields import Field, FieldKind, FieldTable, GROUP_FIELDS, MEMBER_FIELDS
from gq.schemas import Group, Member


def test_resolve_is_case_insensitive():
    for name in ("name", "NAME", "Name", "nAmE"):
        f = GROUP_FIELDS.resolve(name)
        assert f is not None and f.name == "name"


def test_unknown_and_empty_names_resolve_to_none():
    assert GROUP_FIELDS.resolve("color") is None
    assert GROUP_FIELDS.resolve("") is None
    assert GROUP_FIELDS.resolve(None) is None
    # members have no description
    assert MEMBER_FIELDS.resolve("description") is None


def test_value_returns_typed_values():
    g = Group(id=7, name="Eng", description="builders")
    assert GROUP_FIELDS.value(g, "id") == 7
    assert GROUP_FIELDS.value(g, "Description") == "builders"
    assert MEMBER_FIELDS.value(Member(id=3, name="Ada"), "name") == "Ada"


def test_value_unknown_field_raises_keyerror():
    with pytest.raises(KeyError):
        GROUP_FIELDS.value(Group(id=1, name="x"), "nope")


def test_kinds_and_names():
    assert GROUP_FIELDS.resolve("id").kind is FieldKind.NUMBER
    assert GROUP_FIELDS.resolve("name").kind is FieldKind.STRING
    assert GROUP_FIELDS.names() == ["id", "name", "description"]
    assert "ID" in MEMBER_FIELDS and "description" not in MEMBER_FIELDS


def test_duplicate_field_names_rejected():
    with pytest.raises(ValueError):
        FieldTable([
            Field("name", FieldKind.STRING, attrgetter("name")),
            Field("NAME", FieldKind.STRING, attrgetter("name")),
        ])
