# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

# gq/auth.py

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
from fastapi import HTTPException, Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from . import config as cfg

bearer = HTTPBearer(auto_error=False)

PERMISSIONS = ("readGroups", "writeGroups", "readMembers", "writeMembers")

_LOOPBACK = {"127.0.0.1", "localhost", "::1"}

@dataclass
class AuthContext:
    user: Optional[str]
    is_admin: bool

def _raise_401():
    raise HTTPException(
        status_code=401,
        detail="missing or invalid authorization header",
        headers={"WWW-Authenticate": 'Bearer realm="groupquery", error="invalid_token"'},
    )

def _raise_403():
    raise HTTPException(
        status_code=403,
        detail="forbidden",
        headers={"WWW-Authenticate": 'Bearer realm="groupquery", error="insufficient_scope"'},
    )

def auth_ctx(credentials: HTTPAuthorizationCredentials | None = Security(bearer)) -> AuthContext:
    # read from CFG.get so tests and env overrides work
    mode = str(cfg.CFG.get("auth.mode", "none")).strip().lower()

    if mode == "none":
        # open mode (dev): treat as admin
        return AuthContext(user=None, is_admin=True)

    if mode == "static":
        token = credentials.credentials.strip() if credentials and credentials.scheme == "Bearer" else None
        if not token:
            _raise_401()

        # global key
        global_key = cfg.CFG.get("auth.global_key")
        if global_key and token == str(global_key):
            return AuthContext(user=None, is_admin=True)

        # per-user keys
        api_keys: Dict[str, str] = cfg.CFG.get("auth.api_keys", {}) or {}
        for user, expected in api_keys.items():
            if token == str(expected):
                return AuthContext(user=user, is_admin=False)

        _raise_403()

    raise HTTPException(status_code=500, detail=f"unknown auth mode: {mode}")

def has_permission(ctx: AuthContext, permission: str) -> bool:
    if ctx.is_admin:
        return True
    allowed: List[str] | None = cfg.CFG.get(f"auth.permissions.{permission}")
    # no list configured: any authenticated user holds it
    if allowed is None:
        return True
    return ctx.user in allowed

def require(permission: str) -> Callable[..., AuthContext]:
    if permission not in PERMISSIONS:
        raise ValueError(f"unknown permission: {permission}")

    def dependency(ctx: AuthContext = Depends(auth_ctx)) -> AuthContext:
        if not has_permission(ctx, permission):
            _raise_403()
        return ctx
    dependency.__name__ = f"require_{permission}"
    return dependency

def enforce_policy(conf) -> None:
    """
    Fail fast on configs that can't authenticate anyone, and refuse open
    mode on a non-loopback bind unless dev is set.
    """
    mode = str(conf.get("auth.mode", "none")).strip().lower()
    if mode not in ("none", "static"):
        raise RuntimeError(f"unknown auth mode: {mode}")
    if mode == "static" and not (conf.get("auth.global_key") or conf.get("auth.api_keys")):
        raise RuntimeError("auth.mode=static requires auth.global_key or auth.api_keys")
    if mode == "none":
        host, _ = resolve_bind(conf)
        if host not in _LOOPBACK and not conf.get("dev"):
            raise RuntimeError(
                f"auth.mode=none is only allowed on loopback (got {host}); set dev=1 to override")

def resolve_bind(conf) -> tuple[str, int]:
    host = str(conf.get("server.host", "127.0.0.1"))
    port = int(conf.get("server.port", 8086))
    return host, port
