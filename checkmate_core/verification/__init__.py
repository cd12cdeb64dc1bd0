# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Check Mate Contributors
"""Verification: oracle failure taxonomy, concurrency gate, verdict resolution."""

from checkmate_core.verification.concurrency import (
    DEFAULT_ORACLE_CONCURRENCY,
    DEFAULT_ORACLE_GATE,
    ConcurrencyGate,
    shared_gate,
)
from checkmate_core.verification.failures import (
    MalformedResponseError,
    OracleFailure,
    OracleFailureKind,
    OracleInputError,
    classify_oracle_failure,
)
from checkmate_core.verification.verdict_resolver import (
    HARD_FALSE_MIN_CITATIONS,
    aggregate_status,
    resolve,
)

__all__ = [
    "DEFAULT_ORACLE_CONCURRENCY",
    "DEFAULT_ORACLE_GATE",
    "ConcurrencyGate",
    "shared_gate",
    "MalformedResponseError",
    "OracleFailure",
    "OracleFailureKind",
    "OracleInputError",
    "classify_oracle_failure",
    "HARD_FALSE_MIN_CITATIONS",
    "aggregate_status",
    "resolve",
]
