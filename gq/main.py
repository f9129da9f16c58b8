# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

import random
from contextlib import asynccontextmanager
from fastapi import FastAPI, Body, Depends, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from typing import Any, Dict, List, Optional
import uvicorn
from .config import CFG
from .auth import AuthContext, require, enforce_policy, resolve_bind
from .errors import GqError
from .log import LOG as log, ops_event, configure as ops_configure, close as ops_close
from .metrics import inc, set_error, snapshot, to_prometheus
from .schemas import Group, Member, ErrorResponse
from .seed import seed_store
from .stores.factory import get_store
from .stores.base import BaseStore
from . import service as svc


VERSION = "0.1.0"

_ERRORS = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


def _hits(kwargs: Dict[str, Any], result: Any) -> int | None:
    return len(result) if isinstance(result, list) else None


def build_app(cfg=CFG) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        ops_close()

    app = FastAPI(
        title="groupquery: Groups and Members",
        description="Paged, filterable, sortable groups and their members.",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.cfg = cfg
    app.state.store = get_store(cfg)
    ops_configure(cfg.get("log.ops_log"))

    seed = cfg.seed_settings()
    if seed.enabled:
        seed_store(
            app.state.store,
            groups=seed.groups,
            max_members=seed.max_members,
            rng=random.Random(seed.random_seed) if seed.random_seed is not None else None,
        )

    def current_store(request: Request) -> BaseStore:
        return request.app.state.store

    # -------------------- Errors --------------------

    @app.exception_handler(GqError)
    async def gq_error_handler(request: Request, exc: GqError):
        set_error(f"{exc.code}: {exc.message}")
        log.warning(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
        return JSONResponse(exc.to_dict(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        set_error(f"invalid_request: {request.url.path}")
        body = {
            "ok": False, "code": "invalid_request", "error": "invalid request",
            "details": {"errors": [
                {"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()
            ]},
        }
        return JSONResponse(body, status_code=400)

    # -------------------- Health --------------------

    def _readiness_check() -> Dict[str, Any]:
        details: Dict[str, Any] = {
            "store": cfg.store_type,
            "store_init": False,
        }
        try:
            details.update(app.state.store.stats())
            details["store_init"] = True
        except Exception as e:
            set_error(f"store: {e}")
        details["ok"] = bool(details["store_init"])
        details["version"] = VERSION
        return details

    @app.get("/health")
    def health():
        inc("requests_total")
        d = _readiness_check()
        status = "ready" if d.get("ok") else "degraded"
        return {"ok": d["ok"], "status": status, "version": VERSION}

    @app.get("/health/live")
    def health_live():
        inc("requests_total")
        return {"ok": True, "status": "live", "version": VERSION}

    @app.get("/health/ready")
    def health_ready():
        inc("requests_total")
        d = _readiness_check()
        code = 200 if d.get("ok") else 503
        return JSONResponse(d, status_code=code)

    @app.get("/health/metrics")
    def health_metrics():
        inc("requests_total")
        extra = {
            "version": VERSION,
            "store": cfg.store_type,
            "auth": cfg.auth_mode,
        }
        return snapshot(extra)

    @app.get("/metrics")
    def metrics_prom():
        inc("requests_total")
        txt = to_prometheus(build={"version": VERSION, "store": cfg.store_type})
        return PlainTextResponse(txt, media_type="text/plain; version=0.0.4")

    # -------------------- Groups --------------------

    @app.get("/groups", response_model=List[Group], responses=_ERRORS,
             summary="List groups using paging")
    @ops_event("list_groups", group=None, page="page", limit="limit",
               filter="filter", sort="sort", hits=_hits)
    def list_groups(
        page: int = Query(1, description="Page to fetch"),
        limit: Optional[int] = Query(None, description="Max limit of items returned"),
        filter: Optional[str] = Query(None, description="Filters: <name>::<regex>|<name>::<regex>"),
        sort: Optional[str] = Query(None, description="Sorts (- for descending): <name>|-<name>"),
        ctx: AuthContext = Depends(require("readGroups")),
        store: BaseStore = Depends(current_store),
    ):
        inc("requests_total")
        if limit is None:
            limit = cfg.page_limit("groups")
        return svc.list_groups(store, page, limit, filter, sort)

    @app.get("/groups/{group_id}", response_model=Group, responses=_ERRORS,
             summary="Get a group by id")
    @ops_event("get_group")
    def get_group(
        group_id: int,
        ctx: AuthContext = Depends(require("readGroups")),
        store: BaseStore = Depends(current_store),
    ):
        inc("requests_total")
        return svc.get_group(store, group_id)

    @app.post("/groups", response_model=Group, status_code=201, responses=_ERRORS,
              summary="Add a group")
    @ops_event("create_group", group=None)
    def create_group(
        response: Response,
        group: Optional[Group] = Body(None),
        ctx: AuthContext = Depends(require("writeGroups")),
        store: BaseStore = Depends(current_store),
    ):
        inc("requests_total")
        saved = svc.create_group(store, group)
        response.headers["Location"] = f"/groups/{saved.id}"
        return saved

    @app.put("/groups/{group_id}", response_model=Group, responses=_ERRORS,
             summary="Update a group through replacement")
    @ops_event("update_group")
    def update_group(
        group_id: int,
        group: Optional[Group] = Body(None),
        ctx: AuthContext = Depends(require("writeGroups")),
        store: BaseStore = Depends(current_store),
    ):
        inc("requests_total")
        return svc.update_group(store, group_id, group)

    @app.delete("/groups/{group_id}", status_code=204, responses=_ERRORS,
                summary="Delete a group")
    @ops_event("delete_group")
    def delete_group(
        group_id: int,
        ctx: AuthContext = Depends(require("writeGroups")),
        store: BaseStore = Depends(current_store),
    ):
        inc("requests_total")
        svc.delete_group(store, group_id)
        return Response(status_code=204)

    # -------------------- Members --------------------

    @app.get("/groups/{group_id}/members", response_model=List[Member], responses=_ERRORS,
             summary="List members of a group using paging")
    @ops_event("list_members", page="page", limit="limit",
               filter="filter", sort="sort", hits=_hits)
    def list_members(
        group_id: int,
        page: int = Query(1, description="Page to fetch"),
        limit: Optional[int] = Query(None, description="Max limit of items returned"),
        filter: Optional[str] = Query(None, description="Filters: <name>::<regex>|<name>::<regex>"),
        sort: Optional[str] = Query(None, description="Sorts (- for descending): <name>|-<name>"),
        ctx: AuthContext = Depends(require("readMembers")),
        store: BaseStore = Depends(current_store),
    ):
        inc("requests_total")
        if limit is None:
            limit = cfg.page_limit("members")
        return svc.list_members(store, group_id, page, limit, filter, sort)

    @app.get("/groups/{group_id}/members/{member_id}", response_model=Member,
             responses=_ERRORS, summary="Get a member by id")
    @ops_event("get_member", member="member_id")
    def get_member(
        group_id: int,
        member_id: int,
        ctx: AuthContext = Depends(require("readMembers")),
        store: BaseStore = Depends(current_store),
    ):
        inc("requests_total")
        return svc.get_member(store, group_id, member_id)

    @app.post("/groups/{group_id}/members", response_model=Member, status_code=201,
              responses=_ERRORS, summary="Add a member to a group")
    @ops_event("create_member")
    def create_member(
        group_id: int,
        response: Response,
        member: Optional[Member] = Body(None),
        ctx: AuthContext = Depends(require("writeMembers")),
        store: BaseStore = Depends(current_store),
    ):
        inc("requests_total")
        saved = svc.create_member(store, group_id, member)
        response.headers["Location"] = f"/groups/{group_id}/members/{saved.id}"
        return saved

    @app.put("/groups/{group_id}/members/{member_id}", response_model=Member,
             responses=_ERRORS, summary="Update a member through replacement")
    @ops_event("update_member", member="member_id")
    def update_member(
        group_id: int,
        member_id: int,
        member: Optional[Member] = Body(None),
        ctx: AuthContext = Depends(require("writeMembers")),
        store: BaseStore = Depends(current_store),
    ):
        inc("requests_total")
        return svc.update_member(store, group_id, member_id, member)

    @app.delete("/groups/{group_id}/members/{member_id}", status_code=204,
                responses=_ERRORS, summary="Delete a member of a group")
    @ops_event("delete_member", member="member_id")
    def delete_member(
        group_id: int,
        member_id: int,
        ctx: AuthContext = Depends(require("writeMembers")),
        store: BaseStore = Depends(current_store),
    ):
        inc("requests_total")
        svc.delete_member(store, group_id, member_id)
        return Response(status_code=204)

    return app

def main_srv():
    """
    groupquery server entrypoint.
    Precedence: CFG (reads env first) > defaults.
    """
    # raises on invalid config
    enforce_policy(CFG)

    host, port = resolve_bind(CFG)

    reload = bool(CFG.get("server.reload", False))
    workers = int(CFG.get("server.workers", 1))
    log_level = str(CFG.get("server.log_level", "info"))

    uvicorn.run("gq.main:app",
                host=host,
                port=port,
                reload=reload,
                workers=workers,
                log_level=log_level)

# Built on first access so importing build_app/VERSION stays cheap
_app: FastAPI | None = None

def __getattr__(name: str):
    global _app
    if name == "app":
        if _app is None:
            _app = build_app()
        return _app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

if __name__ == "__main__":
    main_srv()
