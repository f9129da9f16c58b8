# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, List
from gq.schemas import Group, Member


class BaseStore(ABC):
    # ---- groups ----
    @abstractmethod
    def find_all(self) -> List[Group]: ...

    @abstractmethod
    def find_one(self, group_id: int) -> Group | None: ...

    @abstractmethod
    def save(self, group: Group) -> Group: ...

    @abstractmethod
    def delete(self, group_id: int) -> Group | None: ...

    # ---- members (partitioned by owning group) ----
    @abstractmethod
    def save_member(self, group_id: int, member: Member) -> Member: ...

    @abstractmethod
    def find_members(self, group_id: int) -> List[Member] | None: ...

    @abstractmethod
    def find_member(self, group_id: int, member_id: int) -> Member | None: ...

    @abstractmethod
    def delete_member(self, group_id: int, member_id: int) -> Member | None: ...

    # ---- housekeeping ----
    @abstractmethod
    def clear(self) -> None: ...

    @abstractmethod
    def stats(self) -> Dict[str, int]: ...
