# Copyright (C) 2025 Check Mate Contributors
#
# This file is part of Check Mate Engine.
#
# Check Mate Engine is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Oracle Failure Classification.

Defines the failure kinds of a single oracle attempt:
- TIMEOUT: the per-attempt deadline expired
- TRANSPORT: network/connection issues
- HTTP_STATUS: the oracle answered with a non-success status
- MALFORMED: the payload did not match the answer contract

All kinds are retryable. Input errors (empty claim, bad credential) are not
attempt failures at all: they raise OracleInputError before any network call.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx
from pydantic import ValidationError


class OracleFailureKind(Enum):
    """Classification of a failed oracle attempt."""

    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    MALFORMED = "malformed"


class OracleInputError(ValueError):
    """Raised before any network activity when the claim or credential is unusable."""


class MalformedResponseError(ValueError):
    """The oracle payload does not match the answer contract."""


@dataclass(frozen=True)
class OracleFailure:
    kind: OracleFailureKind
    message: str
    status_code: int | None = None

    def to_trace_dict(self) -> dict[str, Any]:
        return {
            "failure_kind": self.kind.value,
            "status_code": self.status_code,
            "error_message": self.message[:200],
        }


def classify_oracle_failure(exc: BaseException) -> OracleFailure:
    """
    Classify an exception raised during one oracle attempt.

    Timeouts are checked first: httpx.TimeoutException is also a transport error.
    """
    if isinstance(exc, (asyncio.TimeoutError, httpx.TimeoutException)):
        return OracleFailure(OracleFailureKind.TIMEOUT, str(exc) or "deadline exceeded")

    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code if exc.response is not None else None
        return OracleFailure(OracleFailureKind.HTTP_STATUS, str(exc), status_code=status)

    if isinstance(exc, (ValidationError, MalformedResponseError, json.JSONDecodeError)):
        return OracleFailure(OracleFailureKind.MALFORMED, str(exc))

    if isinstance(exc, httpx.TransportError):
        return OracleFailure(OracleFailureKind.TRANSPORT, str(exc) or type(exc).__name__)

    return OracleFailure(OracleFailureKind.TRANSPORT, f"{type(exc).__name__}: {exc}")
