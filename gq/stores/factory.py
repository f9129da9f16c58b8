# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
from .base import BaseStore
from ..config import CFG, Config

def get_store(cfg: Config = CFG) -> BaseStore:
    stype = cfg.store_type
    match stype:
        case "default" | "memory":
            from .memory_store import MemoryStore
            return MemoryStore()
        case _:
            raise RuntimeError(f"Unknown store.type: {stype}")
