# Copyright (C) 2025 Check Mate Contributors
#
# This file is part of Check Mate Engine.
#
# Check Mate Engine is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Answer contract validation and failure classification."""

import asyncio
import json

import httpx
import pytest
from pydantic import ValidationError
from unittest.mock import MagicMock

from checkmate_core.schema.claims import TruthLabel
from checkmate_core.schema.verdict import Verdict
from checkmate_core.tools.sonar_client import parse_sonar_response
from checkmate_core.verification.failures import (
    MalformedResponseError,
    OracleFailureKind,
    classify_oracle_failure,
)
from checkmate_core.verification.verdict_resolver import resolve
from tests.fixtures.oracle_fixtures import sonar_payload


def _with_content(content):
    return {"choices": [{"message": {"content": content}}]}


class TestParseSonarResponse:
    def test_valid_answer(self):
        data = sonar_payload(
            "false",
            "Debunked.",
            citations=[{"url": "https://a.example", "title": "A"}],
            confidence=0.8,
        )
        j = parse_sonar_response(data)
        assert j.label is TruthLabel.FALSE
        assert j.raw_label == "false"
        assert j.rationale == "Debunked."
        assert j.citations[0].url == "https://a.example"
        assert j.citations[0].title == "A"
        assert j.confidence == 0.8

    def test_bare_url_citations_are_coerced(self):
        j = parse_sonar_response(sonar_payload(citations=["https://b.example"]))
        assert j.citations[0].url == "https://b.example"
        assert j.citations[0].title == ""

    def test_null_title_becomes_empty(self):
        j = parse_sonar_response(sonar_payload(citations=[{"url": "https://a.example", "title": None}]))
        assert j.citations[0].url == "https://a.example"
        assert j.citations[0].title == ""

    def test_numeric_references_are_kept(self):
        j = parse_sonar_response(sonar_payload(citations=[1, 2, 3]))
        assert [c.url for c in j.citations] == ["1", "2", "3"]

    def test_unusable_citation_items_are_dropped(self):
        citations = ["https://a.example", None, True, {"title": "no url"}, {"url": ""}, ["nested"]]
        j = parse_sonar_response(sonar_payload(citations=citations))
        assert [c.url for c in j.citations] == ["https://a.example"]

    def test_numeric_references_reach_hard_false_override(self):
        j = parse_sonar_response(sonar_payload("false", confidence=0.2, citations=[1, 2, 3]))
        assert resolve(j, 0.7) is Verdict.FALSE

    def test_alternate_field_names(self):
        answer = {"label": "TRUE", "rationale": "Yes.", "citations": [], "confidence": 1}
        j = parse_sonar_response(_with_content(json.dumps(answer)))
        assert j.label is TruthLabel.TRUE
        assert j.raw_label == "TRUE"

    def test_unknown_label_becomes_unclear(self):
        j = parse_sonar_response(sonar_payload("partly true"))
        assert j.label is TruthLabel.UNCLEAR
        assert j.raw_label == "partly true"

    def test_fenced_json_block(self):
        answer = json.dumps({"verdict": "true", "explanation": "ok", "citations": [], "confidence": 0.9})
        j = parse_sonar_response(_with_content(f"Here you go:\n```json\n{answer}\n```"))
        assert j.label is TruthLabel.TRUE

    @pytest.mark.parametrize(
        "data",
        [
            None,
            [],
            {},
            {"choices": []},
            {"choices": [{"message": {}}]},
            _with_content("   "),
            _with_content("[1, 2]"),
        ],
    )
    def test_structural_problems(self, data):
        with pytest.raises(MalformedResponseError):
            parse_sonar_response(data)

    def test_content_not_json(self):
        with pytest.raises(json.JSONDecodeError):
            parse_sonar_response(_with_content("The claim is true."))

    @pytest.mark.parametrize(
        "overrides",
        [
            {"verdict": ""},
            {"verdict": 1},
            {"explanation": None},
            {"citations": "https://x.example"},
            {"confidence": "0.9"},
            {"confidence": True},
            {"confidence": 1.5},
            {"confidence": -0.1},
        ],
    )
    def test_contract_violations(self, overrides):
        answer = {"verdict": "true", "explanation": "ok", "citations": [], "confidence": 0.5}
        answer.update(overrides)
        with pytest.raises(ValidationError):
            parse_sonar_response(_with_content(json.dumps(answer)))

    def test_missing_confidence(self):
        answer = {"verdict": "true", "explanation": "ok", "citations": []}
        with pytest.raises(ValidationError):
            parse_sonar_response(_with_content(json.dumps(answer)))


class TestClassifyOracleFailure:
    def test_deadline(self):
        assert classify_oracle_failure(asyncio.TimeoutError()).kind is OracleFailureKind.TIMEOUT

    def test_httpx_timeout(self):
        assert classify_oracle_failure(httpx.ReadTimeout("slow")).kind is OracleFailureKind.TIMEOUT

    def test_status(self):
        response = MagicMock(spec=httpx.Response)
        response.status_code = 503
        exc = httpx.HTTPStatusError("503", request=MagicMock(), response=response)
        failure = classify_oracle_failure(exc)
        assert failure.kind is OracleFailureKind.HTTP_STATUS
        assert failure.status_code == 503
        assert failure.to_trace_dict()["status_code"] == 503

    def test_malformed(self):
        assert classify_oracle_failure(MalformedResponseError("x")).kind is OracleFailureKind.MALFORMED

    def test_transport(self):
        assert classify_oracle_failure(httpx.ConnectError("refused")).kind is OracleFailureKind.TRANSPORT

    def test_unknown_exception_is_transport(self):
        failure = classify_oracle_failure(RuntimeError("boom"))
        assert failure.kind is OracleFailureKind.TRANSPORT
        assert "RuntimeError" in failure.message
