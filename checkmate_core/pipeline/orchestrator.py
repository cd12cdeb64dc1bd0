# Copyright (C) 2025 Check Mate Contributors
#
# This file is part of Check Mate Engine.
#
# Check Mate Engine is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Claim Pipeline

One request end to end:
1. validate the credential shape (no network on failure)
2. segment the text; zero claims fails the request
3. verify every claim concurrently (the client's global gate bounds in-flight calls)
4. resolve each judgment with the policy threshold
5. assemble ClaimVerdicts in segmentation order and compute the aggregate status

Claim-level failures never abort the batch: they become synthetic "unclear"
judgments. Only InvalidCredentialError and NoVerifiableClaimsError propagate.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from checkmate_core.analysis.claim_segmenter import segment
from checkmate_core.pipeline.errors import InvalidCredentialError, NoVerifiableClaimsError
from checkmate_core.runtime_config import EngineRuntimeConfig
from checkmate_core.schema.claims import Judgment
from checkmate_core.schema.policy import Policy
from checkmate_core.schema.verdict import AggregateStatus, AnalysisResult, ClaimVerdict
from checkmate_core.utils.trace import Trace, claim_ref
from checkmate_core.verification.failures import OracleInputError
from checkmate_core.verification.verdict_resolver import aggregate_status, resolve

logger = logging.getLogger(__name__)


class ClaimVerifier(Protocol):
    async def verify(self, claim: str, credential: str) -> Judgment:
        ...


@dataclass(frozen=True)
class PipelineOutcome:
    result: AnalysisResult
    status: AggregateStatus


class ClaimPipeline:
    """
    Example:
        async with SonarClient() as client:
            pipeline = ClaimPipeline(client)
            outcome = await pipeline.run(text, "tweet-123", Policy(credential="sk-..."))
    """

    def __init__(self, verifier: ClaimVerifier, *, runtime: EngineRuntimeConfig | None = None) -> None:
        self.verifier = verifier
        self.runtime = runtime or EngineRuntimeConfig()

    def extract_claims(self, text: str) -> list[str]:
        return segment(
            text,
            max_claims=self.runtime.segmenter.max_claims,
            min_chars=self.runtime.segmenter.min_claim_chars,
        )

    async def _verify_one(self, index: int, claim: str, credential: str) -> Judgment:
        try:
            return await self.verifier.verify(claim, credential)
        except OracleInputError as e:
            logger.warning("[Pipeline] Claim %d rejected by verifier: %s", index, e)
            return Judgment.unverifiable(str(e))
        except Exception as e:
            logger.exception("[Pipeline] Claim %d verification crashed: %s", index, e)
            return Judgment.unverifiable(type(e).__name__)

    async def run(self, text: str, request_id: str, policy: Policy) -> PipelineOutcome:
        """
        Raises:
            InvalidCredentialError: credential missing or malformed
            NoVerifiableClaimsError: segmentation produced no claims
        """
        if not policy.has_valid_credential:
            raise InvalidCredentialError(request_id)
        Trace.mask(policy.credential)

        claims = self.extract_claims(text)
        Trace.event("pipeline.claims", {"count": len(claims), "claims": [claim_ref(c) for c in claims]})
        if not claims:
            raise NoVerifiableClaimsError(request_id)

        logger.debug("[Pipeline] Request %s: verifying %d claims", request_id, len(claims))

        # gather keeps input order, so judgments[i] belongs to claims[i]
        # whatever order the oracle calls complete in.
        judgments = await asyncio.gather(
            *(self._verify_one(idx, claim, policy.credential) for idx, claim in enumerate(claims))
        )

        min_citations = self.runtime.verdict.hard_false_min_citations
        verdicts = [
            ClaimVerdict(
                claim=claim,
                verdict=resolve(judgment, policy.threshold, hard_false_min_citations=min_citations),
                rationale=judgment.rationale,
                citations=judgment.citations,
                confidence=judgment.confidence,
                failed=judgment.synthetic,
            )
            for claim, judgment in zip(claims, judgments)
        ]

        status = aggregate_status(v.verdict for v in verdicts)
        result = AnalysisResult(
            request_id=request_id,
            text=text,
            claims=claims,
            verdicts=verdicts,
            status=status,
        )

        failed = sum(1 for v in verdicts if v.failed)
        if failed:
            logger.warning("[Pipeline] Request %s: %d/%d claims could not be verified", request_id, failed, len(claims))
        Trace.event("pipeline.done", {
            "request_id": request_id,
            "status": status.value,
            "verdicts": [v.verdict.value for v in verdicts],
            "failed": failed,
        })
        return PipelineOutcome(result=result, status=status)
