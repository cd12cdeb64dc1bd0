# Copyright (C) 2025 Check Mate Contributors
#
# This file is part of Check Mate Engine.
#
# Check Mate Engine is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.


import pytest
from unittest.mock import AsyncMock, MagicMock

from checkmate_core.tools.sonar_client import SonarClient
from checkmate_core.verification.concurrency import ConcurrencyGate
from tests.fixtures.oracle_fixtures import FakeVerifier, judgment


@pytest.fixture(autouse=True)
def _no_local_trace(monkeypatch):
    """Keep trace files out of the working tree."""
    monkeypatch.delenv("CHECKMATE_ENV", raising=False)
    monkeypatch.delenv("ENV", raising=False)


@pytest.fixture
def gate():
    """A private gate so tests never share peak counters."""
    return ConcurrencyGate(3)


@pytest.fixture
def fake_verifier(gate):
    return FakeVerifier(gate=gate)


@pytest.fixture
def mock_verifier():
    """Matches the interface of SonarClient, returning AsyncMocks."""
    verifier = MagicMock(spec=SonarClient)
    verifier.verify = AsyncMock(return_value=judgment())
    verifier.close = AsyncMock()
    return verifier
