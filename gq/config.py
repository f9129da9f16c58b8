# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Runtime configuration.

Three layers, later ones winning: built-in defaults, the YAML file
(``GROUPQUERY_CONFIG``, default ``./config.yml``), then ``GROUPQUERY_*``
environment variables, where a double underscore nests
(``GROUPQUERY_PAGING__GROUPS__LIMIT=25``). YAML string values may
reference the environment as ``${VAR}`` or ``${VAR|fallback}``.
"""

from __future__ import annotations
import copy, os, re, yaml, threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict
from dotenv import load_dotenv

load_dotenv()

ENV_PREFIX = "GROUPQUERY_"

_DEFAULTS: Dict[str, Any] = {
    "auth": {"mode": "none", "api_keys": {}, "permissions": {}},
    "store": {"type": "default"},
    "paging": {"groups": {"limit": 10}, "members": {"limit": 15}},
    "seed": {"enabled": False, "groups": 100, "max_members": 15, "random_seed": None},
    "log": {"level": "INFO", "ops_log": None},
    "server": {"host": "127.0.0.1", "port": 8086, "reload": False, "workers": 1,
               "log_level": "info"},
}

_ENV_REF = re.compile(r"\$\{([^}:|]+)(?:\|([^}]*))?\}")


@dataclass(frozen=True)
class SeedSettings:
    enabled: bool
    groups: int
    max_members: int
    random_seed: int | None


# ---------------- layers ----------------

def _merge(base: Dict[str, Any], over: Dict[str, Any]) -> Dict[str, Any]:
    """Recursive merge into `base` (mutated and returned); None never overrides."""
    for key, value in (over or {}).items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        elif value is not None:
            base[key] = copy.deepcopy(value)
    return base


def _expand_env(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _expand_env(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env(v) for v in obj]
    if isinstance(obj, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), m.group(2) or ""), obj)
    return obj


def _scalar(raw: str) -> Any:
    # env values read like YAML scalars: "25" -> 25, "true" -> True
    try:
        value = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw
    return value if isinstance(value, (bool, int, float)) else raw


def _file_layer(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    if not p.is_file():
        return {}
    with p.open("r", encoding="utf-8") as f:
        return _expand_env(yaml.safe_load(f) or {})


def _env_layer() -> Dict[str, Any]:
    layer: Dict[str, Any] = {}
    for key, raw in os.environ.items():
        if not key.startswith(ENV_PREFIX) or key == ENV_PREFIX + "CONFIG":
            continue
        *parents, leaf = key[len(ENV_PREFIX):].lower().split("__")
        node = layer
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = _scalar(raw)
    return layer


def load(path: str | Path | None = None) -> Dict[str, Any]:
    path = path or os.environ.get(ENV_PREFIX + "CONFIG", "./config.yml")
    data = copy.deepcopy(_DEFAULTS)
    _merge(data, _file_layer(path))
    return _merge(data, _env_layer())


# ---------------- Config ----------------

class Config:
    """
    Dotted-path view over one nested dict, shared by the API, the CLI and
    tests. `get(path, default)` stores the default on first read, so later
    readers see the same value.
    """

    def __init__(self, data: Dict[str, Any] | None = None,
                 path: str | Path | None = None):
        self._lock = threading.RLock()
        self._cfg: Dict[str, Any] = load(path) if data is None else copy.deepcopy(data)

    def _node(self, path: str, create: bool = False):
        *parents, leaf = path.split(".")
        node: Any = self._cfg
        for part in parents:
            if create:
                node = node.setdefault(part, {})
            elif not isinstance(node, dict) or part not in node:
                return None, leaf
            else:
                node = node[part]
        return (node if isinstance(node, dict) else None), leaf

    def get(self, path: str, default: Any = None) -> Any:
        with self._lock:
            node, leaf = self._node(path)
            value = node.get(leaf) if node is not None else None
            if value is None and default is not None:
                self.set(path, default)
                return default
            return value

    def set(self, path: str, value: Any) -> None:
        with self._lock:
            node, leaf = self._node(path, create=True)
            node[leaf] = value

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._cfg)

    def replace(self, data: Dict[str, Any] | None = None,
                path: str | Path | None = None) -> None:
        # swap contents in place so modules holding CFG see the new values
        fresh = load(path) if data is None else copy.deepcopy(data)
        with self._lock:
            self._cfg.clear()
            self._cfg.update(fresh)

    # -------- typed accessors --------

    def page_limit(self, kind: str) -> int:
        """Default page size for "groups" or "members" listings."""
        return int(self.get(f"paging.{kind}.limit", _DEFAULTS["paging"][kind]["limit"]))

    @property
    def store_type(self) -> str:
        return str(self.get("store.type", "default") or "default").lower()

    @property
    def auth_mode(self) -> str:
        return str(self.get("auth.mode", "none")).strip().lower()

    def seed_settings(self) -> SeedSettings:
        rs = self.get("seed.random_seed")
        return SeedSettings(
            enabled=bool(self.get("seed.enabled", False)),
            groups=int(self.get("seed.groups", _DEFAULTS["seed"]["groups"])),
            max_members=int(self.get("seed.max_members", _DEFAULTS["seed"]["max_members"])),
            random_seed=int(rs) if rs is not None else None,
        )


# --- singleton access (API + CLI + tests share this) ---
CFG = Config()


def get_cfg() -> Config:
    return CFG


def reload_cfg(path: str | None = None) -> Config:
    CFG.replace(path=path)
    return CFG
