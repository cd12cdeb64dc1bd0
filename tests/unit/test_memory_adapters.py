# Copyright (C) 2025 Check Mate Contributors
#
# This file is part of Check Mate Engine.
#
# Check Mate Engine is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import pytest

from checkmate_core.adapters import (
    EnvSettingsStore,
    InMemoryMessageBus,
    InMemoryResultStore,
    InMemorySettingsStore,
    RecordingStatusPresenter,
)
from checkmate_core.collaborators import SettingsError
from checkmate_core.schema import AggregateStatus, AnalysisResult, CompletionSignal


def test_in_memory_settings_store():
    store = InMemorySettingsStore(credential=" sk-abc ", threshold=0.95)
    policy = store.load_policy()
    assert policy.credential == "sk-abc"
    assert policy.threshold == 0.9

    store.set("threshold", "junk")
    assert store.load_policy().threshold == 0.7


def test_env_settings_store(monkeypatch):
    monkeypatch.setenv("CHECKMATE_API_KEY", "sk-env")
    monkeypatch.setenv("CHECKMATE_THRESHOLD", "0.6")
    policy = EnvSettingsStore().load_policy()
    assert policy.credential == "sk-env"
    assert policy.threshold == 0.6


def test_env_settings_store_explicit_threshold_wins(monkeypatch):
    monkeypatch.setenv("CHECKMATE_API_KEY", "sk-env")
    monkeypatch.setenv("CHECKMATE_THRESHOLD", "0.6")
    assert EnvSettingsStore(threshold=0.8).load_policy().threshold == 0.8


def test_env_settings_store_missing_key(monkeypatch):
    monkeypatch.delenv("CHECKMATE_API_KEY", raising=False)
    with pytest.raises(SettingsError):
        EnvSettingsStore().load_policy()


def test_result_store_newer_result_supersedes():
    store = InMemoryResultStore()
    first = AnalysisResult(request_id="r1", text="a")
    second = AnalysisResult(request_id="r1", text="b")
    other = AnalysisResult(request_id="r2", text="c")

    store.save(first)
    store.save(second)
    store.save(other)

    assert store.get("r1") is second
    assert store.latest() is other
    assert store.get("missing") is None

    store.clear()
    assert store.latest() is None


def test_message_bus_records_signals():
    bus = InMemoryMessageBus()
    assert bus.last() is None
    bus.send(CompletionSignal(request_id="r1", success=True))
    assert bus.last().request_id == "r1"
    assert len(bus.sent) == 1


def test_status_presenter_tracks_badge():
    presenter = RecordingStatusPresenter()
    assert presenter.badge.text == ""
    presenter.show(AggregateStatus.POSITIVE)
    presenter.show(AggregateStatus.NONE)
    assert presenter.history == [AggregateStatus.POSITIVE, AggregateStatus.NONE]
    assert presenter.badge.text == ""
