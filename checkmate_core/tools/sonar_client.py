# Copyright (C) 2025 Check Mate Contributors
#
# This file is part of Check Mate Engine.
#
# Check Mate Engine is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Perplexity Sonar client: one fact-check judgment per claim.

- Hard per-attempt deadline (10s by default); the in-flight request is cancelled.
- Explicit retry loop with backoff delays 1s, 2s, 4s (2 retries, 3 attempts).
- Every attempt yields an AttemptOutcome; retryable failures are values, not exceptions.
- A process-wide ConcurrencyGate caps in-flight calls (3 by default). The slot is
  held across all attempts of one claim, backoff waits included.
- Exhausted retries produce a synthetic "unclear" judgment instead of an error.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from checkmate_core.schema.claims import Judgment
from checkmate_core.schema.oracle import SonarAnswer
from checkmate_core.schema.policy import is_valid_credential
from checkmate_core.tools.sonar_prompts import PROMPT_VERSION, SONAR_SYSTEM_PROMPT
from checkmate_core.utils.trace import Trace, claim_ref
from checkmate_core.verification.concurrency import DEFAULT_ORACLE_GATE, ConcurrencyGate
from checkmate_core.verification.failures import (
    MalformedResponseError,
    OracleFailure,
    OracleInputError,
    classify_oracle_failure,
)

logger = logging.getLogger(__name__)

SONAR_URL = "https://api.perplexity.ai/chat/completions"
SONAR_MODEL = "sonar-rapid-online"

SONAR_TIMEOUT_S = 10.0
SONAR_MAX_RETRIES = 2
SONAR_RETRY_DELAYS_S: tuple[float, ...] = (1.0, 2.0, 4.0)


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of one oracle attempt: exactly one of judgment / failure is set."""

    judgment: Judgment | None = None
    failure: OracleFailure | None = None

    @property
    def ok(self) -> bool:
        return self.judgment is not None


def _load_json_content(content: str) -> Any:
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        # Models occasionally wrap the object in a markdown code block.
        if "```" in content:
            block = content.split("```json")[-1] if "```json" in content else content.split("```")[1]
            return json.loads(block.split("```")[0].strip())
        raise


def parse_sonar_response(data: Any) -> Judgment:
    """
    Validate a chat-completions payload and extract the Judgment.

    Raises:
        MalformedResponseError / json.JSONDecodeError / pydantic.ValidationError
    """
    if not isinstance(data, dict):
        raise MalformedResponseError("Empty or malformed response")

    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        raise MalformedResponseError("Missing choices array")

    first = choices[0] if isinstance(choices[0], dict) else {}
    message = first.get("message") if isinstance(first.get("message"), dict) else {}
    content = message.get("content")
    if not isinstance(content, str) or not content.strip():
        raise MalformedResponseError("Missing content in first choice")

    parsed = _load_json_content(content)
    if not isinstance(parsed, dict):
        raise MalformedResponseError("Answer is not a JSON object")

    return SonarAnswer.model_validate(parsed).to_judgment()


class SonarClient:
    """
    Example:
        async with SonarClient() as client:
            judgment = await client.verify("The Earth orbits the Sun.", "sk-...")
    """

    def __init__(
        self,
        *,
        api_url: str = SONAR_URL,
        model: str = SONAR_MODEL,
        timeout_s: float = SONAR_TIMEOUT_S,
        max_retries: int = SONAR_MAX_RETRIES,
        retry_delays_s: tuple[float, ...] = SONAR_RETRY_DELAYS_S,
        gate: ConcurrencyGate | None = None,
    ):
        self.api_url = api_url
        self.model = model
        self.timeout_s = float(timeout_s)
        self.max_retries = max(0, int(max_retries))
        self.retry_delays_s = tuple(retry_delays_s) or (0.0,)
        self.gate = gate or DEFAULT_ORACLE_GATE

        # The per-attempt deadline is enforced with asyncio.wait_for; the httpx
        # timeout only guards against a stuck connection pool.
        self._client = httpx.AsyncClient(
            timeout=self.timeout_s + 5.0,
            limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            headers={
                "Content-Type": "application/json",
                "X-Client-Source": "checkmate",
            },
        )

    async def __aenter__(self) -> "SonarClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    def build_payload(self, claim: str) -> dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SONAR_SYSTEM_PROMPT},
                {"role": "user", "content": claim},
            ],
        }

    def _delay_before(self, attempt: int) -> float:
        # attempt is 1-based; attempt 2 is the first retry.
        idx = min(attempt - 2, len(self.retry_delays_s) - 1)
        return float(self.retry_delays_s[idx])

    async def _post(self, claim: str, credential: str) -> Any:
        r = await self._client.post(
            self.api_url,
            json=self.build_payload(claim),
            headers={"Authorization": f"Bearer {credential}"},
        )
        r.raise_for_status()
        return r.json()

    async def _attempt(self, claim: str, credential: str) -> AttemptOutcome:
        try:
            data = await asyncio.wait_for(self._post(claim, credential), timeout=self.timeout_s)
            return AttemptOutcome(judgment=parse_sonar_response(data))
        except Exception as e:
            return AttemptOutcome(failure=classify_oracle_failure(e))

    async def verify(self, claim: str, credential: str) -> Judgment:
        """
        Fact-check a single claim.

        Raises:
            OracleInputError: empty claim or malformed credential (no network call made).

        Returns:
            The oracle's Judgment, or Judgment.unverifiable() once retries are exhausted.
        """
        if not isinstance(claim, str) or not claim.strip():
            raise OracleInputError("Empty claim")
        if not is_valid_credential(credential):
            raise OracleInputError("Invalid API key format")

        claim = claim.strip()
        max_attempts = self.max_retries + 1
        last_failure: OracleFailure | None = None

        async with self.gate.slot():
            for attempt in range(1, max_attempts + 1):
                if attempt > 1:
                    delay = self._delay_before(attempt)
                    logger.debug("[Sonar] Retry %d/%d in %.1fs", attempt, max_attempts, delay)
                    await asyncio.sleep(delay)

                Trace.event("sonar.request", {
                    "claim": claim_ref(claim),
                    "attempt": attempt,
                    "model": self.model,
                    "prompt_version": PROMPT_VERSION,
                })
                started = time.monotonic()
                outcome = await self._attempt(claim, credential)
                latency_ms = int((time.monotonic() - started) * 1000)

                if outcome.ok:
                    Trace.event("sonar.response", {
                        "attempt": attempt,
                        "latency_ms": latency_ms,
                        "label": outcome.judgment.label.value,
                        "citations": len(outcome.judgment.citations),
                        "confidence": outcome.judgment.confidence,
                    })
                    return outcome.judgment

                last_failure = outcome.failure
                logger.warning(
                    "[Sonar] Request failed (attempt %d/%d, %s): %s",
                    attempt,
                    max_attempts,
                    last_failure.kind.value,
                    last_failure.message[:200],
                )
                Trace.event("sonar.attempt.error", {
                    "attempt": attempt,
                    "latency_ms": latency_ms,
                    **last_failure.to_trace_dict(),
                })

        reason = last_failure.kind.value if last_failure else None
        logger.error("[Sonar] Giving up after %d attempts (%s)", max_attempts, reason)
        Trace.event("sonar.exhausted", {"attempts": max_attempts, "last_failure": reason})
        return Judgment.unverifiable(reason)
