from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any


def _parse_bool(raw: Any, *, default: bool) -> bool:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    s = str(raw).strip().lower()
    if not s:
        return default
    if s in ("1", "true", "yes", "y", "on"):
        return True
    if s in ("0", "false", "no", "n", "off"):
        return False
    return default


def _parse_int(raw: Any, *, default: int, min_v: int, max_v: int) -> int:
    try:
        if raw is None:
            v = default
        elif isinstance(raw, int):
            v = raw
        else:
            v = int(str(raw).strip())
    except (TypeError, ValueError):
        v = default
    return max(min_v, min(max_v, v))


def _parse_float(raw: Any, *, default: float, min_v: float, max_v: float) -> float:
    try:
        if raw is None:
            v = default
        elif isinstance(raw, (int, float)):
            v = float(raw)
        else:
            v = float(str(raw).strip())
    except (TypeError, ValueError):
        v = default
    if v != v:  # NaN
        v = default
    return max(min_v, min(max_v, v))


def _parse_delays(raw: str | None, *, default: tuple[float, ...]) -> tuple[float, ...]:
    s = (raw or "").strip()
    if not s:
        return default
    out: list[float] = []
    for part in s.split(","):
        try:
            out.append(max(0.0, min(60.0, float(part.strip()))))
        except ValueError:
            return default
    return tuple(out) or default


@dataclass(frozen=True)
class EngineFeatureFlags:
    # Trace is a local-only debug feature; it is enabled by default and can be disabled via env.
    trace_enabled: bool = True


@dataclass(frozen=True)
class EngineOracleConfig:
    timeout_sec: float = 10.0
    concurrency: int = 3
    max_retries: int = 2
    # Indexed by retry number: the first retry waits retry_delays_sec[0].
    retry_delays_sec: tuple[float, ...] = (1.0, 2.0, 4.0)


@dataclass(frozen=True)
class EngineSegmenterConfig:
    max_claims: int = 5
    min_claim_chars: int = 10


@dataclass(frozen=True)
class EngineVerdictConfig:
    # A refutation backed by this many citations bypasses the confidence guard.
    hard_false_min_citations: int = 3
    default_threshold: float = 0.7


@dataclass(frozen=True)
class EngineRuntimeConfig:
    oracle: EngineOracleConfig = field(default_factory=EngineOracleConfig)
    segmenter: EngineSegmenterConfig = field(default_factory=EngineSegmenterConfig)
    verdict: EngineVerdictConfig = field(default_factory=EngineVerdictConfig)
    features: EngineFeatureFlags = field(default_factory=EngineFeatureFlags)

    @staticmethod
    def load_from_env() -> "EngineRuntimeConfig":
        oracle = EngineOracleConfig(
            timeout_sec=_parse_float(os.getenv("CHECKMATE_ORACLE_TIMEOUT"), default=10.0, min_v=1.0, max_v=120.0),
            concurrency=_parse_int(os.getenv("CHECKMATE_ORACLE_CONCURRENCY"), default=3, min_v=1, max_v=16),
            max_retries=_parse_int(os.getenv("CHECKMATE_ORACLE_MAX_RETRIES"), default=2, min_v=0, max_v=5),
            retry_delays_sec=_parse_delays(os.getenv("CHECKMATE_ORACLE_RETRY_DELAYS"), default=(1.0, 2.0, 4.0)),
        )

        segmenter = EngineSegmenterConfig(
            max_claims=_parse_int(os.getenv("CHECKMATE_MAX_CLAIMS"), default=5, min_v=1, max_v=20),
            min_claim_chars=_parse_int(os.getenv("CHECKMATE_MIN_CLAIM_CHARS"), default=10, min_v=1, max_v=200),
        )

        verdict = EngineVerdictConfig(
            hard_false_min_citations=_parse_int(
                os.getenv("CHECKMATE_HARD_FALSE_MIN_CITATIONS"), default=3, min_v=1, max_v=20
            ),
            default_threshold=_parse_float(
                os.getenv("CHECKMATE_DEFAULT_THRESHOLD"), default=0.7, min_v=0.5, max_v=0.9
            ),
        )

        features = EngineFeatureFlags(
            trace_enabled=not _parse_bool(os.getenv("CHECKMATE_TRACE_DISABLE"), default=False),
        )

        return EngineRuntimeConfig(
            oracle=oracle,
            segmenter=segmenter,
            verdict=verdict,
            features=features,
        )

    def to_safe_log_dict(self) -> dict[str, Any]:
        return {
            "features": {
                "trace_enabled": bool(self.features.trace_enabled),
            },
            "oracle": {
                "timeout_sec": float(self.oracle.timeout_sec),
                "concurrency": int(self.oracle.concurrency),
                "max_retries": int(self.oracle.max_retries),
                "retry_delays_sec": list(self.oracle.retry_delays_sec),
            },
            "segmenter": {
                "max_claims": int(self.segmenter.max_claims),
                "min_claim_chars": int(self.segmenter.min_claim_chars),
            },
            "verdict": {
                "hard_false_min_citations": int(self.verdict.hard_false_min_citations),
                "default_threshold": float(self.verdict.default_threshold),
            },
        }
