# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
from contextlib import contextmanager
from threading import RLock
from typing import Dict, List
from gq.schemas import Group, Member
from gq.stores.base import BaseStore
from gq.log import LOG as log


class MemoryStore(BaseStore):
    """
    Process-local record store. Groups live in one dict keyed by id; members
    live in per-group partitions. Each entity type has its own lock and its
    own id counter, and ids are assigned under the same lock that inserts
    the record. Records are copied on the way in and on the way out.
    """

    def __init__(self):
        self._groups: Dict[int, Group] = {}
        self._members: Dict[int, Dict[int, Member]] = {}
        self._next_ids = {"groups": 1, "members": 1}
        self._locks = {"groups": RLock(), "members": RLock()}

    def _assign_id(self, kind: str, record_id: int | None) -> int:
        # caller holds the lock; explicit ids push the counter past them
        if record_id is None:
            record_id = self._next_ids[kind]
        self._next_ids[kind] = max(self._next_ids[kind], record_id + 1)
        return record_id

    @contextmanager
    def _locked(self, kind: str):
        lock = self._locks[kind]
        lock.acquire()
        try:
            yield
        finally:
            lock.release()

    # ---------------- groups ----------------

    def find_all(self) -> List[Group]:
        with self._locked("groups"):
            return [g.model_copy(deep=True) for g in self._groups.values()]

    def find_one(self, group_id: int) -> Group | None:
        with self._locked("groups"):
            g = self._groups.get(group_id)
            return g.model_copy(deep=True) if g is not None else None

    def save(self, group: Group) -> Group:
        stored = group.model_copy(deep=True)
        with self._locked("groups"):
            stored.id = self._assign_id("groups", stored.id)
            self._groups[stored.id] = stored
        log.debug(f"saved group {stored.id}")
        return stored.model_copy(deep=True)

    def delete(self, group_id: int) -> Group | None:
        with self._locked("groups"):
            removed = self._groups.pop(group_id, None)
        if removed is not None:
            log.debug(f"deleted group {group_id}")
        return removed

    # ---------------- members ----------------

    def save_member(self, group_id: int, member: Member) -> Member:
        if group_id is None:
            raise ValueError("group_id was None")
        stored = member.model_copy(deep=True)
        with self._locked("members"):
            partition = self._members.setdefault(group_id, {})
            stored.id = self._assign_id("members", stored.id)
            partition[stored.id] = stored
        log.debug(f"saved member {stored.id} in group {group_id}")
        return stored.model_copy(deep=True)

    def find_members(self, group_id: int) -> List[Member] | None:
        with self._locked("members"):
            partition = self._members.get(group_id)
            if partition is None:
                return None
            return [m.model_copy(deep=True) for m in partition.values()]

    def find_member(self, group_id: int, member_id: int) -> Member | None:
        with self._locked("members"):
            m = self._members.get(group_id, {}).get(member_id)
            return m.model_copy(deep=True) if m is not None else None

    def delete_member(self, group_id: int, member_id: int) -> Member | None:
        with self._locked("members"):
            partition = self._members.get(group_id)
            if partition is None:
                return None
            return partition.pop(member_id, None)

    # ---------------- housekeeping ----------------

    def clear(self) -> None:
        # counters keep running: ids are never reused
        with self._locked("groups"), self._locked("members"):
            self._groups.clear()
            self._members.clear()

    def stats(self) -> Dict[str, int]:
        with self._locked("groups"), self._locked("members"):
            return {
                "groups": len(self._groups),
                "partitions": len(self._members),
                "members": sum(len(p) for p in self._members.values()),
            }
