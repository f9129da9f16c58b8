# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
from typing import Dict, Any, List
from gq.errors import BadRequest, NotFound
from gq.metrics import inc as m_inc
from gq.query.engine import GROUP_QUERY, MEMBER_QUERY
from gq.schemas import Group, Member

# Pure-ish service functions operating on a store adapter

def validate_paging(page: int, limit: int) -> None:
    if page <= 0:
        raise BadRequest("Invalid page number", code="invalid_page")
    if limit <= 0:
        raise BadRequest("Invalid limit", code="invalid_limit")

def _require_group(store, group_id: int, message: str = "Group not found by id") -> Group:
    group = store.find_one(group_id)
    if group is None:
        raise NotFound(message)
    return group

def _match_ids(body_id: int | None, path_id: int, what: str) -> None:
    # a body without an id adopts the path id
    if body_id is not None and body_id != path_id:
        raise BadRequest(f"Id of {what} object must match id supplied", code="id_mismatch")

def _reject_id(body_id: int | None, what: str) -> None:
    # ids on create come from the store counters only
    if body_id is not None:
        raise BadRequest(f"A new {what} must not carry an id", code="id_not_allowed")

# ---------------- groups ----------------

def list_groups(store, page: int = 1, limit: int = 10, filter: str | None = None,
                sort: str | None = None) -> List[Group]:
    validate_paging(page, limit)
    out = GROUP_QUERY.query(store.find_all(), page, limit, filter, sort)
    m_inc("queries_total")
    m_inc("results_total", float(len(out)))
    return out

def get_group(store, group_id: int) -> Group:
    return _require_group(store, group_id, "Group not found")

def create_group(store, group: Group | None) -> Group:
    if group is None:
        raise BadRequest("Group is required", code="body_required")
    _reject_id(group.id, "group")
    saved = store.save(group)
    m_inc("groups_created_total")
    return saved

def update_group(store, group_id: int, group: Group | None) -> Group:
    _require_group(store, group_id, "Group not found")
    if group is None:
        raise BadRequest("Group is required", code="body_required")
    _match_ids(group.id, group_id, "group")
    saved = store.save(group.model_copy(update={"id": group_id}))
    m_inc("groups_updated_total")
    return saved

def delete_group(store, group_id: int) -> Group:
    removed = store.delete(group_id)
    if removed is None:
        raise NotFound("Group not found")
    m_inc("groups_deleted_total")
    return removed

# ---------------- members ----------------

def list_members(store, group_id: int, page: int = 1, limit: int = 15,
                 filter: str | None = None, sort: str | None = None) -> List[Member]:
    validate_paging(page, limit)
    _require_group(store, group_id)
    members = store.find_members(group_id)
    if members is None:
        # group exists but nobody was ever added to it
        members = []
    out = MEMBER_QUERY.query(members, page, limit, filter, sort)
    m_inc("queries_total")
    m_inc("results_total", float(len(out)))
    return out

def get_member(store, group_id: int, member_id: int) -> Member:
    _require_group(store, group_id, "Invalid group or member id")
    member = store.find_member(group_id, member_id)
    if member is None:
        raise NotFound("Invalid group or member id")
    return member

def create_member(store, group_id: int, member: Member | None) -> Member:
    _require_group(store, group_id)
    if member is None:
        raise BadRequest("Member is required", code="body_required")
    _reject_id(member.id, "member")
    saved = store.save_member(group_id, member)
    m_inc("members_created_total")
    return saved

def update_member(store, group_id: int, member_id: int, member: Member | None) -> Member:
    _require_group(store, group_id, "Group not found")
    if store.find_member(group_id, member_id) is None:
        raise NotFound("Invalid group or member id")
    if member is None:
        raise BadRequest("Member is required", code="body_required")
    _match_ids(member.id, member_id, "member")
    saved = store.save_member(group_id, member.model_copy(update={"id": member_id}))
    m_inc("members_updated_total")
    return saved

def delete_member(store, group_id: int, member_id: int) -> Member:
    _require_group(store, group_id, "Invalid group or member id")
    removed = store.delete_member(group_id, member_id)
    if removed is None:
        raise NotFound("Invalid group or member id")
    m_inc("members_deleted_total")
    return removed

# ---------------- snapshots ----------------

def dump_store(store) -> Dict[str, Any]:
    """JSON-ready snapshot: groups plus member partitions keyed by group id."""
    groups = sorted(store.find_all(), key=lambda g: g.id)
    members: Dict[str, Any] = {}
    for g in groups:
        part = store.find_members(g.id)
        if part is not None:
            members[str(g.id)] = [m.model_dump() for m in sorted(part, key=lambda m: m.id)]
    return {"groups": [g.model_dump() for g in groups], "members": members}

def load_store(store, data: Dict[str, Any]) -> Dict[str, int]:
    groups = [Group.model_validate(g) for g in data.get("groups") or []]
    for g in groups:
        store.save(g)
    count = 0
    for gid, part in (data.get("members") or {}).items():
        for m in part:
            store.save_member(int(gid), Member.model_validate(m))
            count += 1
    return {"groups": len(groups), "members": count}
