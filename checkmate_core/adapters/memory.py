# Copyright (C) 2025 Check Mate Contributors
#
# This file is part of Check Mate Engine.
#
# Check Mate Engine is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from __future__ import annotations

import logging
import os
from typing import Dict, List

from checkmate_core.collaborators import (
    MessageBus,
    ResultStore,
    SettingsError,
    SettingsStore,
    StatusPresenter,
)
from checkmate_core.presentation.badge import Badge, badge_for
from checkmate_core.schema.messages import CompletionSignal
from checkmate_core.schema.policy import DEFAULT_THRESHOLD, Policy
from checkmate_core.schema.verdict import AggregateStatus, AnalysisResult

logger = logging.getLogger(__name__)


class InMemorySettingsStore(SettingsStore):
    def __init__(self, *, credential: str = "", threshold: float = DEFAULT_THRESHOLD) -> None:
        self._values: Dict[str, object] = {"apiKey": credential, "threshold": threshold}

    def set(self, key: str, value: object) -> None:
        self._values[key] = value

    def load_policy(self) -> Policy:
        return Policy(credential=self._values.get("apiKey"), threshold=self._values.get("threshold"))


class EnvSettingsStore(SettingsStore):
    """
    Reads CHECKMATE_API_KEY / CHECKMATE_THRESHOLD from the environment.
    An explicit `threshold` wins over the environment variable.
    """

    def __init__(
        self,
        *,
        key_var: str = "CHECKMATE_API_KEY",
        threshold_var: str = "CHECKMATE_THRESHOLD",
        threshold: float | None = None,
    ) -> None:
        self.key_var = key_var
        self.threshold_var = threshold_var
        self.threshold = threshold

    def load_policy(self) -> Policy:
        credential = os.getenv(self.key_var)
        if not credential:
            raise SettingsError(f"{self.key_var} is not set")
        threshold = self.threshold if self.threshold is not None else os.getenv(self.threshold_var)
        return Policy(credential=credential, threshold=threshold)


class InMemoryResultStore(ResultStore):
    """Session-scoped store: results by request id plus the most recent one."""

    def __init__(self) -> None:
        self._results: Dict[str, AnalysisResult] = {}
        self._latest: AnalysisResult | None = None

    def save(self, result: AnalysisResult) -> None:
        # A newer request for the same id supersedes the stored result.
        self._results[result.request_id] = result
        self._latest = result

    def get(self, request_id: str) -> AnalysisResult | None:
        return self._results.get(request_id)

    def latest(self) -> AnalysisResult | None:
        return self._latest

    def clear(self) -> None:
        self._results.clear()
        self._latest = None


class InMemoryMessageBus(MessageBus):
    def __init__(self) -> None:
        self.sent: List[CompletionSignal] = []

    def send(self, signal: CompletionSignal) -> None:
        self.sent.append(signal)

    def last(self) -> CompletionSignal | None:
        return self.sent[-1] if self.sent else None


class RecordingStatusPresenter(StatusPresenter):
    """Keeps the badge that a toolbar would display."""

    def __init__(self) -> None:
        self.history: List[AggregateStatus] = []
        self.badge: Badge = badge_for(AggregateStatus.NONE)

    def show(self, status: AggregateStatus) -> None:
        self.history.append(status)
        self.badge = badge_for(status)
        logger.debug("[Badge] %s -> %r", status.value, self.badge.text)
