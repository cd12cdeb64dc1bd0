# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Check Mate Contributors
"""
Check Mate Core Schema Module
"""

from checkmate_core.schema.claims import (
    UNVERIFIABLE_RATIONALE,
    TruthLabel,
    Citation,
    Judgment,
    normalize_label,
)

from checkmate_core.schema.verdict import (
    Verdict,
    AggregateStatus,
    ClaimVerdict,
    AnalysisResult,
)

from checkmate_core.schema.policy import (
    CREDENTIAL_PREFIX,
    DEFAULT_THRESHOLD,
    Policy,
    is_valid_credential,
)

from checkmate_core.schema.messages import (
    AnalysisRequest,
    CompletionSignal,
)

from checkmate_core.schema.serialization import SchemaModel

__all__ = [
    "UNVERIFIABLE_RATIONALE",
    "TruthLabel",
    "Citation",
    "Judgment",
    "normalize_label",
    "Verdict",
    "AggregateStatus",
    "ClaimVerdict",
    "AnalysisResult",
    "CREDENTIAL_PREFIX",
    "DEFAULT_THRESHOLD",
    "Policy",
    "is_valid_credential",
    "AnalysisRequest",
    "CompletionSignal",
    "SchemaModel",
]
