# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

import random
from gq.config import get_cfg
from gq.main import build_app
from gq.seed import seed_store


def test_seed_creates_groups_with_members(store):
    created = seed_store(store, groups=20, max_members=5, rng=random.Random(1))
    stats = store.stats()
    assert stats["groups"] == 20
    assert stats["partitions"] == 20
    assert stats["members"] == created
    for g in store.find_all():
        assert g.name and g.description
        assert 1 <= len(store.find_members(g.id)) <= 5


def test_seed_is_reproducible(store):
    from gq.stores.memory_store import MemoryStore
    other = MemoryStore()
    seed_store(store, groups=5, rng=random.Random(3))
    seed_store(other, groups=5, rng=random.Random(3))
    assert store.find_all() == other.find_all()


def test_build_app_seeds_when_enabled():
    cfg = get_cfg()
    cfg.set("seed.enabled", True)
    cfg.set("seed.groups", 3)
    cfg.set("seed.max_members", 2)
    cfg.set("seed.random_seed", 11)
    app = build_app(cfg)
    assert app.state.store.stats()["groups"] == 3
