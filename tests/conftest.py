# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

import pytest
from fastapi.testclient import TestClient
from gq.config import get_cfg, reload_cfg
from gq.main import build_app
from gq.stores.memory_store import MemoryStore
from utils import SpyStore

@pytest.fixture(autouse=True)
def _reset_cfg_between_tests(monkeypatch):
    for k in ("GROUPQUERY_STORE__TYPE", "GROUPQUERY_AUTH__MODE"):
        monkeypatch.delenv(k, raising=False)
    reload_cfg()
    cfg = get_cfg()
    cfg.set("auth.mode", "none")
    cfg.set("store.type", "default")
    cfg.set("seed.enabled", False)
    cfg.set("log.ops_log", None)
    yield

@pytest.fixture()
def app():
    app = build_app(get_cfg())
    app.state.store = SpyStore(app.state.store)
    return app

@pytest.fixture()
def client(app):
    return TestClient(app)

@pytest.fixture()
def cfg(app):
    return app.state.cfg

@pytest.fixture()
def store():
    return MemoryStore()
