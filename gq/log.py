# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Two log streams.

The dev stream is the ``gq`` logger on stderr, human readable. The ops
stream writes one compact JSON line per request operation (list_groups,
create_member, ...) to stdout or a file, for whoever ships logs.
"""

from __future__ import annotations

import functools, inspect, json, logging, sys, threading, time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, TextIO

_OFF = ("", "null", "none")


class _OpsStream:
    """Destination of the ops stream: nowhere, stdout, or an append-only file."""

    def __init__(self):
        self.dest: str | None = None
        self._fh: TextIO | None = None
        self._lock = threading.Lock()

    def open(self, dest: str | None) -> None:
        self.close()
        dest = str(dest).strip() if dest is not None else ""
        if dest.lower() in _OFF:
            return
        with self._lock:
            if dest != "stdout":
                self._fh = open(dest, "a", encoding="utf-8", buffering=1)
            self.dest = dest

    def write(self, line: str) -> None:
        if self.dest == "stdout":
            sys.stdout.write(line)
            return
        with self._lock:
            if self._fh is not None:
                self._fh.write(line)

    def close(self) -> None:
        with self._lock:
            fh, self._fh, self.dest = self._fh, None, None
        if fh is not None:
            fh.flush()
            fh.close()


_STREAM = _OpsStream()


def configure(dest: str | None) -> None:
    """Point the ops stream at `dest`: None/"null" (off), "stdout" or a file path."""
    _STREAM.open(dest)


def close() -> None:
    _STREAM.close()


def _utc_ts() -> str:
    # "2026-02-26T23:55:55.123Z"
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def emit(**fields) -> None:
    """Write one JSON line, dropping None fields. No-op while the stream is off."""
    if _STREAM.dest is None:
        return
    payload: Dict[str, Any] = {"ts": _utc_ts()}
    payload.update((k, v) for k, v in fields.items() if v is not None)
    _STREAM.write(json.dumps(payload, separators=(",", ":")) + "\n")


# --------------- dev stream (stderr) ---------------

class _LevelColors(logging.Formatter):
    """Colors the level name when stderr is a terminal."""
    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        color = self.COLORS.get(record.levelno)
        if color:
            line = line.replace(record.levelname, f"{color}{record.levelname}\033[0m", 1)
        return line


def _init_logger() -> logging.Logger:
    """
    `log.level` sets the gq logger (DEBUG when `dev` is on). Everything
    else logs one step quieter; `log.quiet` namespaces two steps.
    Lazy import of get_cfg avoids a circular import with config.py.
    """
    from gq.config import get_cfg
    cfg = get_cfg()
    level = logging.getLevelName(str(cfg.get("log.level", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    fmt, datefmt = "%(asctime)s %(levelname)-5s %(name)s: %(message)s", "%H:%M:%S"
    if getattr(sys.stderr, "isatty", lambda: False)():
        handler.setFormatter(_LevelColors(fmt, datefmt))
    else:
        handler.setFormatter(logging.Formatter(fmt, datefmt))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(min(logging.CRITICAL, level + 10))

    for ns in cfg.get("log.quiet", ["uvicorn", "fastapi", "httpx"]):
        logging.getLogger(ns).setLevel(min(logging.CRITICAL, level + 20))

    gq_log = logging.getLogger("gq")
    gq_log.setLevel(logging.DEBUG if cfg.get("dev") else level)
    return gq_log


LOG = _init_logger()


def get_logger() -> logging.Logger:
    return LOG


# --------------- ops_event ---------------

def _error_code(exc: BaseException) -> str:
    return getattr(exc, "code", None) or type(exc).__name__


@contextmanager
def _timed(op: str, fields: Dict[str, Any], extras):
    """Times the block and emits its ops line; `extras(result)` runs at the end."""
    t0 = time.perf_counter()
    outcome: Dict[str, Any] = {"status": "error", "error_code": None, "result": None}
    try:
        yield outcome
        outcome["status"] = "ok"
    except Exception as e:
        outcome["error_code"] = _error_code(e)
        raise
    finally:
        emit(op=op, **fields,
             latency_ms=round((time.perf_counter() - t0) * 1000, 2),
             status=outcome["status"], error_code=outcome["error_code"],
             **extras(outcome["result"]))


def ops_event(
    op: str,
    *,
    group: str | None = "group_id",
    member: str | None = None,
    **extra_keys,
):
    """
    Route decorator: times the handler and emits one ops line.

    `group` and `member` name the handler kwargs holding the path ids
    (None to leave the field out). Each extra is either a kwargs key or a
    callable ``fn(kwargs, result)``; a callable that fails leaves its field
    out. Handlers report failures by raising, so a raised error's ``code``
    becomes ``error_code``.
    """
    def _fields(kwargs: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "group": kwargs.get(group) if group else None,
            "member": kwargs.get(member) if member else None,
        }

    def _extras(kwargs: Dict[str, Any]):
        def compute(result: Any) -> Dict[str, Any]:
            out: Dict[str, Any] = {}
            for name, src in extra_keys.items():
                if not callable(src):
                    out[name] = kwargs.get(src)
                    continue
                try:
                    out[name] = src(kwargs, result)
                except (TypeError, ValueError, AttributeError, KeyError):
                    out[name] = None
            return out
        return compute

    def decorator(fn):
        if inspect.iscoroutinefunction(fn):
            @functools.wraps(fn)
            async def awrapper(*args, **kwargs):
                with _timed(op, _fields(kwargs), _extras(kwargs)) as outcome:
                    outcome["result"] = await fn(*args, **kwargs)
                    return outcome["result"]
            return awrapper

        @functools.wraps(fn)
        def swrapper(*args, **kwargs):
            with _timed(op, _fields(kwargs), _extras(kwargs)) as outcome:
                outcome["result"] = fn(*args, **kwargs)
                return outcome["result"]
        return swrapper
    return decorator
