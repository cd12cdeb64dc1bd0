# Copyright (C) 2025 Check Mate Contributors
#
# This file is part of Check Mate Engine.
#
# Check Mate Engine is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Per-request JSONL trace for local debugging.

One file per analysis request under data/trace, named after the request id.
Page text is user content, so claims are recorded as digests (`claim_ref`)
rather than verbatim, and the request's credential is masked wherever it
shows up once the pipeline registers it with `Trace.mask`.
"""

from __future__ import annotations

import contextvars
import hashlib
import json
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from checkmate_core.runtime_config import EngineRuntimeConfig
from checkmate_core.utils.runtime import is_local_run

_SECRET_KEYS = ("authorization", "api_key", "key", "credential", "token")
_MASK = "***"


@dataclass
class _TraceState:
    trace_id: str
    request_id: str | None
    path: Path
    started: float = field(default_factory=time.monotonic)
    secrets: set[str] = field(default_factory=set)
    events: int = 0


_state_var: contextvars.ContextVar[_TraceState | None] = contextvars.ContextVar("checkmate_trace", default=None)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _safe_name(value: str) -> str:
    return "".join(c if c.isalnum() or c in "._-" else "_" for c in value)


def claim_ref(claim: str) -> dict[str, Any]:
    """Stable, non-reversible handle for a claim: the same claim text always gets the same `sha`."""
    text = claim.strip()
    return {"sha": hashlib.sha256(text.encode("utf-8")).hexdigest()[:12], "len": len(text)}


def _redact_text(s: str, secrets: set[str] | frozenset[str] = frozenset()) -> str:
    if not s:
        return s
    for secret in secrets:
        s = s.replace(secret, _MASK)
    s = re.sub(r"(Bearer\s+)[A-Za-z0-9._-]+", r"\1" + _MASK, s)
    # Sonar credentials share the sk- prefix.
    s = re.sub(r"\bsk-[A-Za-z0-9._-]{4,}", "sk-" + _MASK, s)
    return s


def _sanitize(obj: Any, secrets: set[str] | frozenset[str] = frozenset(), *, max_str: int = 2000, max_items: int = 50) -> Any:
    if obj is None or isinstance(obj, (int, float, bool)):
        return obj
    if isinstance(obj, str):
        s = _redact_text(obj, secrets)
        if len(s) <= max_str:
            return s
        return {"len": len(s), "head": s[:200], "truncated": True}
    if isinstance(obj, (list, tuple)):
        out = [_sanitize(x, secrets, max_str=max_str, max_items=max_items) for x in obj[:max_items]]
        if len(obj) > max_items:
            out.append(f"...(+{len(obj) - max_items} more)")
        return out
    if isinstance(obj, dict):
        return {
            str(k): _MASK if str(k).lower() in _SECRET_KEYS else _sanitize(v, secrets, max_str=max_str, max_items=max_items)
            for k, v in obj.items()
        }
    return _sanitize(str(obj), secrets, max_str=max_str, max_items=max_items)


def _trace_dir() -> Path:
    p = Path("data/trace")
    p.mkdir(parents=True, exist_ok=True)
    return p


def trace_enabled() -> bool:
    return _state_var.get() is not None


def current_trace_id() -> str | None:
    state = _state_var.get()
    return state.trace_id if state else None


@dataclass(frozen=True)
class TraceContext:
    trace_id: str
    enabled: bool
    path: Path | None = None


class Trace:
    """
    Local-only trace sink. Never enabled outside local/dev runs, and
    switched off there with CHECKMATE_TRACE_DISABLE.
    """

    @staticmethod
    def start(
        trace_id: str,
        *,
        request_id: str | None = None,
        runtime: EngineRuntimeConfig | None = None,
    ) -> TraceContext:
        runtime = runtime or EngineRuntimeConfig.load_from_env()
        if not (is_local_run() and runtime.features.trace_enabled):
            _state_var.set(None)
            return TraceContext(trace_id=trace_id, enabled=False)

        name = f"{request_id}_{trace_id}" if request_id else trace_id
        state = _TraceState(trace_id=trace_id, request_id=request_id, path=_trace_dir() / f"{_safe_name(name)}.jsonl")
        _state_var.set(state)
        Trace.event("trace.start", {
            "request_id": request_id,
            "started_at": time.strftime("%Y-%m-%d %H:%M:%S"),
        })
        return TraceContext(trace_id=trace_id, enabled=True, path=state.path)

    @staticmethod
    def mask(secret: str | None) -> None:
        """Mask this exact value in every later event of the current trace."""
        state = _state_var.get()
        if state is not None and secret:
            state.secrets.add(secret)

    @staticmethod
    def stop() -> None:
        state = _state_var.get()
        if state is not None:
            Trace.event("trace.stop", {
                "events": state.events,
                "elapsed_ms": int((time.monotonic() - state.started) * 1000),
            })
        _state_var.set(None)

    @staticmethod
    def event(name: str, data: Any | None = None) -> None:
        state = _state_var.get()
        if state is None:
            return

        state.events += 1
        rec = {
            "ts_ms": _now_ms(),
            "trace_id": state.trace_id,
            "request_id": state.request_id,
            "event": str(name),
            "data": _sanitize(data, state.secrets),
        }
        try:
            with state.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(rec, ensure_ascii=False) + "\n")
        except OSError:
            # Tracing must never break the main flow.
            return
