# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Check Mate Contributors
"""
Verdict Models

Verdict is the OUTPUT of resolution: a Judgment adjusted by the
confidence policy. AnalysisResult is the unit handed to storage.
"""

from enum import Enum

from pydantic import Field

from checkmate_core.schema.claims import Citation
from checkmate_core.schema.serialization import SchemaModel


class Verdict(str, Enum):
    """Canonical, policy-adjusted verdict for one claim."""
    TRUE = "true"
    """Claim is factually correct."""

    FALSE = "false"
    """Claim is incorrect or misleading."""

    UNCLEAR = "unclear"
    """Insufficient evidence, or confidence below threshold."""


class AggregateStatus(str, Enum):
    """Single summary state over all verdicts of one request."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    NONE = "none"


class ClaimVerdict(SchemaModel):
    """A claim paired with its judgment details and resolved verdict."""

    claim: str
    verdict: Verdict = Verdict.UNCLEAR
    rationale: str = ""
    citations: list[Citation] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    failed: bool = False
    """Verification exhausted its retries; the verdict is a placeholder."""


class AnalysisResult(SchemaModel):
    """Ordered per-claim verdicts for one request."""

    request_id: str
    text: str
    claims: list[str] = Field(default_factory=list)
    verdicts: list[ClaimVerdict] = Field(default_factory=list)
    """Same order as `claims`."""

    status: AggregateStatus = AggregateStatus.NONE
