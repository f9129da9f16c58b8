# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

"""Sample data: groups with lorem-style names and a few members each."""

from __future__ import annotations
import random
from gq.schemas import Group, Member
from gq.stores.base import BaseStore
from gq.log import LOG as log

_WORDS = (
    "lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua enim ad minim veniam "
    "quis nostrud exercitation ullamco laboris nisi aliquip ex ea commodo "
    "consequat duis aute irure in reprehenderit voluptate velit esse cillum "
    "fugiat nulla pariatur excepteur sint occaecat cupidatat non proident sunt "
    "culpa qui officia deserunt mollit anim id est laborum"
).split()

_FIRST_NAMES = (
    "Ada", "Alan", "Barbara", "Brian", "Claude", "Donald", "Edsger", "Frances",
    "Grace", "Guido", "Hedy", "Ivan", "John", "Ken", "Linus", "Margaret",
    "Niklaus", "Radia", "Rob", "Shafi", "Sophie", "Tim", "Vint", "Whitfield",
)


def words(rng: random.Random, n: int) -> str:
    return " ".join(rng.choice(_WORDS) for _ in range(n))


def seed_store(store: BaseStore, groups: int = 100, max_members: int = 15,
               rng: random.Random | None = None) -> int:
    """Creates `groups` groups with 1..max_members members each. Returns members created."""
    rng = rng or random.Random()
    created = 0
    for _ in range(groups):
        g = store.save(Group(name=words(rng, 1), description=words(rng, 7)))
        for _ in range(rng.randint(1, max(1, max_members))):
            store.save_member(g.id, Member(name=rng.choice(_FIRST_NAMES)))
            created += 1
    log.info(f"seeded {groups} groups and {created} members")
    return created
