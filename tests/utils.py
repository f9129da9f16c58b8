# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from typing import Dict, List, Tuple
from gq.schemas import Group, Member
from gq.stores.base import BaseStore


def groups(*rows) -> List[Group]:
    """groups((1, "Eng", "desc"), (2, "Ops")) -> Group models."""
    out = []
    for row in rows:
        gid, name, *rest = row
        out.append(Group(id=gid, name=name, description=rest[0] if rest else None))
    return out


def members(*rows) -> List[Member]:
    return [Member(id=mid, name=name) for mid, name in rows]


def ids(records) -> List[int]:
    return [r.id for r in records]


class SpyStore(BaseStore):
    def __init__(self, impl: BaseStore):
        self.impl = impl
        self.calls: List[Tuple] = []

    def find_all(self) -> List[Group]:
        self.calls.append(("find_all",))
        return self.impl.find_all()

    def find_one(self, group_id: int) -> Group | None:
        self.calls.append(("find_one", group_id))
        return self.impl.find_one(group_id)

    def save(self, group: Group) -> Group:
        self.calls.append(("save", group.id))
        return self.impl.save(group)

    def delete(self, group_id: int) -> Group | None:
        self.calls.append(("delete", group_id))
        return self.impl.delete(group_id)

    def save_member(self, group_id: int, member: Member) -> Member:
        self.calls.append(("save_member", group_id, member.id))
        return self.impl.save_member(group_id, member)

    def find_members(self, group_id: int) -> List[Member] | None:
        self.calls.append(("find_members", group_id))
        return self.impl.find_members(group_id)

    def find_member(self, group_id: int, member_id: int) -> Member | None:
        self.calls.append(("find_member", group_id, member_id))
        return self.impl.find_member(group_id, member_id)

    def delete_member(self, group_id: int, member_id: int) -> Member | None:
        self.calls.append(("delete_member", group_id, member_id))
        return self.impl.delete_member(group_id, member_id)

    def clear(self) -> None:
        self.calls.append(("clear",))
        return self.impl.clear()

    def stats(self) -> Dict[str, int]:
        self.calls.append(("stats",))
        return self.impl.stats()
