# Copyright (C) 2025 Check Mate Contributors
#
# This file is part of Check Mate Engine.
#
# Check Mate Engine is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
End-to-end ClaimPipeline behavior with a gated fake oracle:
ordering, concurrency bound, partial failure and request-level errors.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock, patch

from checkmate_core.pipeline import ClaimPipeline, InvalidCredentialError, NoVerifiableClaimsError
from checkmate_core.runtime_config import EngineRuntimeConfig, EngineVerdictConfig
from checkmate_core.schema import AggregateStatus, Policy, Verdict
from checkmate_core.tools.sonar_client import SonarClient
from checkmate_core.verification.concurrency import ConcurrencyGate
from checkmate_core.verification.failures import OracleInputError
from tests.fixtures.oracle_fixtures import VALID_KEY, FakeVerifier, judgment, make_response

CLAIMS = [
    "The first claim is about apples.",
    "The second claim is about bananas.",
    "The third claim is about cherries.",
    "The fourth claim is about dates.",
    "The fifth claim is about elderberries.",
]
TEXT = " ".join(CLAIMS)
POLICY = Policy(credential=VALID_KEY, threshold=0.7)


@pytest.mark.asyncio
async def test_order_preserved_when_completions_are_out_of_order():
    delays = {claim: 0.05 - i * 0.01 for i, claim in enumerate(CLAIMS)}
    verifier = FakeVerifier(delays=delays, gate=ConcurrencyGate(5))

    outcome = await ClaimPipeline(verifier).run(TEXT, "req-1", POLICY)

    assert verifier.completed != CLAIMS
    assert outcome.result.claims == CLAIMS
    assert [v.claim for v in outcome.result.verdicts] == CLAIMS


@pytest.mark.asyncio
async def test_at_most_three_oracle_calls_in_flight(gate):
    verifier = FakeVerifier(delays={c: 0.02 for c in CLAIMS}, gate=gate)

    outcome = await ClaimPipeline(verifier).run(TEXT, "req-2", POLICY)

    assert len(verifier.calls) == 5
    assert gate.peak == 3
    assert gate.in_flight == 0
    assert outcome.status is AggregateStatus.POSITIVE


@pytest.mark.asyncio
async def test_concurrent_requests_share_the_bound(gate):
    verifier = FakeVerifier(delays={c: 0.02 for c in CLAIMS}, gate=gate)
    pipeline = ClaimPipeline(verifier)

    await asyncio.gather(
        pipeline.run(TEXT, "req-a", POLICY),
        pipeline.run(TEXT, "req-b", POLICY),
    )

    assert len(verifier.calls) == 10
    assert gate.peak == 3


@pytest.mark.asyncio
async def test_failed_claims_become_unclear_without_aborting(gate):
    answers = {
        CLAIMS[0]: judgment("true", confidence=0.9),
        CLAIMS[1]: RuntimeError("oracle exploded"),
        CLAIMS[2]: OracleInputError("Empty claim"),
    }
    verifier = FakeVerifier(answers, gate=gate)

    outcome = await ClaimPipeline(verifier).run(" ".join(CLAIMS[:3]), "req-3", POLICY)

    verdicts = outcome.result.verdicts
    assert [v.verdict for v in verdicts] == [Verdict.TRUE, Verdict.UNCLEAR, Verdict.UNCLEAR]
    assert [v.failed for v in verdicts] == [False, True, True]
    assert verdicts[1].rationale.startswith("This claim could not be verified.")
    assert outcome.status is AggregateStatus.NEUTRAL


@pytest.mark.asyncio
async def test_hard_false_makes_status_negative(gate):
    answers = {CLAIMS[0]: judgment("false", confidence=0.3, citations=3)}
    verifier = FakeVerifier(answers, gate=gate)

    outcome = await ClaimPipeline(verifier).run(" ".join(CLAIMS[:2]), "req-4", POLICY)

    assert outcome.result.verdicts[0].verdict is Verdict.FALSE
    assert outcome.status is AggregateStatus.NEGATIVE


@pytest.mark.asyncio
async def test_hard_false_minimum_comes_from_runtime(gate):
    runtime = EngineRuntimeConfig(verdict=EngineVerdictConfig(hard_false_min_citations=5))
    answers = {CLAIMS[0]: judgment("false", confidence=0.3, citations=3)}

    outcome = await ClaimPipeline(FakeVerifier(answers, gate=gate), runtime=runtime).run(
        CLAIMS[0], "req-5", POLICY
    )

    assert outcome.status is AggregateStatus.NEUTRAL


@pytest.mark.asyncio
@pytest.mark.parametrize("credential", ["", "sk-", "abc123"])
async def test_invalid_credential_fails_before_any_call(mock_verifier, credential):
    with pytest.raises(InvalidCredentialError) as exc:
        await ClaimPipeline(mock_verifier).run(TEXT, "req-6", Policy(credential=credential))

    assert exc.value.request_id == "req-6"
    mock_verifier.verify.assert_not_called()


@pytest.mark.asyncio
async def test_no_claims_fails_before_any_call(mock_verifier):
    with pytest.raises(NoVerifiableClaimsError, match="No factual claims found in text."):
        await ClaimPipeline(mock_verifier).run("Ok. Sure!", "req-7", POLICY)

    mock_verifier.verify.assert_not_called()


@pytest.mark.asyncio
async def test_exhausted_sonar_client_yields_failed_claim():
    client = SonarClient(gate=ConcurrencyGate(3))
    with patch.object(client._client, "post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = make_response(status_code=503)
        with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            outcome = await ClaimPipeline(client).run(CLAIMS[0], "req-8", POLICY)

    assert mock_post.call_count == 3
    assert [c.args[0] for c in mock_sleep.call_args_list] == [1.0, 2.0]
    verdict = outcome.result.verdicts[0]
    assert verdict.failed is True
    assert verdict.verdict is Verdict.UNCLEAR
    assert outcome.status is AggregateStatus.NEUTRAL
    await client.close()
