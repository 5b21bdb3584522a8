"""Tests for the backend HTTP client.

**Feature: daily-checklist**
"""

import json
from datetime import datetime, timezone

import httpx
import pytest

from dailycheck.errors import BackendError, ConfigurationError
from dailycheck.models import PlanWindow, PreTradePlan, RuleRecord
from dailycheck.remote.client import (
    CHECKLIST_PATH,
    RULES_BULK_PATH,
    RULES_PATH,
    BackendClient,
    plan_from_condition,
    plan_to_condition,
)

BASE_URL = "https://backend.test"


def _client(handler) -> BackendClient:
    return BackendClient(BASE_URL, transport=httpx.MockTransport(handler))


def _ok(data) -> httpx.Response:
    return httpx.Response(200, json={"status": True, "data": data})


class TestFetchRules:
    def test_fetch(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return _ok([
                {"id": 1, "name": "Max Risk 5%", "condition": {"max_risk_percent": 5}},
                {"id": 2, "name": "No Overtrade", "condition": {"max_positions": 3}},
            ])

        with _client(handler) as client:
            records = client.fetch_rules(5440722)

        assert seen["path"] == RULES_PATH
        assert seen["params"] == {"account_number": "5440722", "status": "not_executed"}
        assert [r.name for r in records] == ["Max Risk 5%", "No Overtrade"]

    def test_malformed_records_skipped(self):
        def handler(request):
            return _ok([{"id": 1, "name": ["not", "a", "name"]}, {"id": 2, "name": "No Overtrade"}])

        with _client(handler) as client:
            records = client.fetch_rules(1)

        assert [r.id for r in records] == [2]

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(500, json={"status": False}),
            httpx.Response(200, json={"status": False, "data": []}),
            httpx.Response(200, json={"status": True, "data": None}),
            httpx.Response(200, json={"status": True, "data": {"rules": []}}),
            httpx.Response(200, text="<html>oops</html>"),
        ],
    )
    def test_bad_responses_give_empty(self, response):
        with _client(lambda request: response) as client:
            assert client.fetch_rules(1) == []

    def test_connection_error_gives_empty(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with _client(handler) as client:
            assert client.fetch_rules(1) == []


class TestSaveRules:
    def test_bulk_upsert_payload(self):
        sent = {}

        def handler(request: httpx.Request) -> httpx.Response:
            sent["path"] = request.url.path
            sent["body"] = json.loads(request.content)
            return httpx.Response(200, json={"status": True})

        record = RuleRecord.model_validate(
            {"id": 1, "name": "Max Risk 2%", "condition": {"max_risk_percent": 2}, "status": "x"}
        )
        with _client(handler) as client:
            client.save_rules([record])

        assert sent["path"] == RULES_BULK_PATH
        assert sent["body"] == {
            "rules": [
                {"id": 1, "name": "Max Risk 2%", "condition": {"max_risk_percent": 2}, "status": "x"}
            ]
        }

    def test_nothing_to_save(self):
        with _client(lambda request: httpx.Response(200)) as client:
            with pytest.raises(ConfigurationError):
                client.save_rules([])

    def test_rejected(self):
        with _client(lambda request: httpx.Response(422, json={})) as client:
            with pytest.raises(BackendError, match="422"):
                client.save_rules([RuleRecord(name="Max Risk 2%")])


class TestPlansAndJournals:
    def _plan(self) -> PreTradePlan:
        return PreTradePlan(
            mood="Calm",
            planned_trades=2,
            planned_windows=[PlanWindow(start="07:00", end="09:00", label="London")],
            expected_high_time="08:30",
            expected_low_time="20:00",
            rr_target=2.0,
            submitted_at=datetime(2025, 1, 15, 6, 0, tzinfo=timezone.utc),
        )

    def test_plan_condition_keys(self):
        condition = plan_to_condition(self._plan())

        assert condition["plannedTrades"] == 2
        assert condition["rrTarget"] == 2.0
        assert condition["plannedWindows"] == [{"start": "07:00", "end": "09:00", "label": "London"}]
        assert plan_from_condition(condition) == self._plan()

    def test_save_plan(self):
        sent = {}

        def handler(request):
            sent["body"] = json.loads(request.content)
            return httpx.Response(201, json={"status": True})

        with _client(handler) as client:
            client.save_plan(5440722, self._plan())

        assert sent["body"]["account_number"] == "5440722"
        assert sent["body"]["type"] == "daily"
        assert sent["body"]["condition"]["mood"] == "Calm"

    def test_fetch_plans(self):
        def handler(request):
            assert request.url.path == CHECKLIST_PATH
            assert request.url.params["type"] == "daily"
            return _ok([
                {"condition": plan_to_condition(self._plan())},
                {"condition": {"plannedTrades": "lots", "mood": "Tired"}},
                "not a plan",
            ])

        with _client(handler) as client:
            plans = client.fetch_plans(1)

        assert len(plans) == 2
        assert plans[0] == self._plan()
        assert plans[1].mood == "Tired"
        assert plans[1].planned_trades == 0

    def test_fetch_plans_keeps_undated(self):
        def handler(request):
            return _ok([{"condition": {"mood": "Calm", "plannedTrades": 2, "rrTarget": 2}}])

        with _client(handler) as client:
            plans = client.fetch_plans(1)

        assert len(plans) == 1
        assert plans[0].submitted_at is None
        assert plans[0].planned_trades == 2
        assert plans[0].rr_target == 2.0

    def test_fetch_journals(self):
        def handler(request):
            assert request.url.params["type"] == "pre_entry"
            return _ok([
                {
                    "id": 42,
                    "created_at": "2025-01-15T07:30:00Z",
                    "condition": {
                        "mood": "Focused",
                        "entry": 2400,
                        "lots": 0.5,
                        "sl": 2395,
                        "rr": 2,
                        "valuePerPoint": 100,
                        "riskPct": 2.5,
                    },
                },
                {"created_at": "2025-01-15T08:00:00Z", "condition": {"mood": "Bored", "entry": "abc"}},
                ["not", "an", "item"],
            ])

        with _client(handler) as client:
            entries = client.fetch_journals(1)

        assert len(entries) == 2
        assert entries[0].id == "42"
        assert entries[0].value_per_point == 100
        assert entries[0].risk_pct == 2.5
        assert entries[1].id == "journal_1"
        assert entries[1].mood == "Bored"
        assert entries[1].entry is None

    def test_fetch_journals_keeps_partial_items(self):
        def handler(request):
            return _ok([
                {
                    "id": 1,
                    "created_at": "2025-01-15T07:30:00Z",
                    "condition": {"mood": "Neutral", "entry": 2400, "sl": 2395, "lots": 1, "rr": 2},
                },
                {
                    "id": 2,
                    "created_at": "2025-01-15T08:00:00Z",
                    "condition": {"mood": "Calm", "entry": 2400, "sl": 2395, "lots": 1, "rr": 2},
                },
                {"id": 3, "condition": {"mood": "Calm", "rr": 3}},
            ])

        with _client(handler) as client:
            entries = client.fetch_journals(1)

        assert [e.id for e in entries] == ["1", "2", "3"]
        assert entries[0].mood == "Neutral"
        assert entries[1].value_per_point is None
        assert entries[2].created_at is None
        assert entries[2].rr == 3
