"""HTTP client for the rules and behavioral-checklist backend.

Reads degrade to empty collections when the backend cannot be reached or
answers with something unparseable; callers evaluate the dependent rules
as unmet. Writes raise so the caller can decide what to tell the user.
"""

import logging
from typing import Any, Optional, Sequence

import httpx
from pydantic import ValidationError

from dailycheck.errors import BackendError, ConfigurationError
from dailycheck.models import PreTradePlan, RuleRecord, TradeJournalEntry

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0

RULES_PATH = "/api/v1/trade-rules"
RULES_BULK_PATH = "/api/v1/trade-rules/bulk-upsert"
CHECKLIST_PATH = "/api/v1/daily_behavioral_checklist"

# Backend condition keys for plans and journal entries.
_PLAN_KEYS = {
    "mood": "mood",
    "planned_trades": "plannedTrades",
    "planned_windows": "plannedWindows",
    "expected_high_time": "expectedHighTime",
    "expected_low_time": "expectedLowTime",
    "rr_target": "rrTarget",
    "notes": "notes",
    "submitted_at": "submittedAt",
}

_JOURNAL_KEYS = {
    "mood": "mood",
    "conditions": "conditions",
    "entry": "entry",
    "lots": "lots",
    "sl": "sl",
    "rr": "rr",
    "value_per_point": "valuePerPoint",
    "equity_at_entry": "equityAtEntry",
    "risk_cash": "riskCash",
    "risk_pct": "riskPct",
    "profit_at_tp": "profitAtTP",
    "loss_at_sl": "lossAtSL",
}


def _validate_lenient(model, data: dict[str, Any]):
    """Validate backend data, reading malformed fields as absent.

    Raises:
        ValidationError: If the data is still invalid without those fields.
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        bad = {err["loc"][0] for err in e.errors() if err["loc"]}
        if not bad & data.keys():
            raise
        logger.debug("Ignoring malformed %s fields: %s", model.__name__, sorted(bad))
        return model.model_validate({k: v for k, v in data.items() if k not in bad})


def plan_to_condition(plan: PreTradePlan) -> dict[str, Any]:
    """Convert a plan to the backend's condition payload."""
    data = plan.model_dump(mode="json")
    return {remote: data[local] for local, remote in _PLAN_KEYS.items()}


def plan_from_condition(condition: dict[str, Any]) -> PreTradePlan:
    """Build a plan from a backend condition payload.

    Malformed fields read as absent.

    Raises:
        ValidationError: If the payload is not a valid plan.
    """
    data = {
        local: condition[remote]
        for local, remote in _PLAN_KEYS.items()
        if condition.get(remote) is not None
    }
    return _validate_lenient(PreTradePlan, data)


def journal_to_condition(entry: TradeJournalEntry) -> dict[str, Any]:
    """Convert a journal entry to the backend's condition payload."""
    data = entry.model_dump(mode="json")
    return {remote: data[local] for local, remote in _JOURNAL_KEYS.items()}


def journal_from_item(item: dict[str, Any], index: int) -> TradeJournalEntry:
    """Build a journal entry from a backend checklist item.

    Malformed fields read as absent. Items without ``created_at`` keep
    no timestamp and are dated by the caller.

    Raises:
        ValidationError: If the item is not a valid journal entry.
    """
    condition = item.get("condition") or {}
    data = {
        local: condition[remote]
        for local, remote in _JOURNAL_KEYS.items()
        if condition.get(remote) is not None
    }
    item_id = item.get("id")
    data["id"] = str(item_id) if item_id is not None else f"journal_{index}"
    if item.get("created_at") is not None:
        data["created_at"] = item["created_at"]
    return _validate_lenient(TradeJournalEntry, data)


class BackendClient:
    """Client for the trade-rules and daily behavioral checklist API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Backend base URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self._client = httpx.Client(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._client.close()

    def __enter__(self) -> "BackendClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get_data(self, path: str, params: dict[str, Any], what: str) -> list[Any]:
        """GET an enveloped list, returning [] on any failure."""
        try:
            response = self._client.get(path, params=params)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Failed to fetch %s from backend: %s", what, e)
            return []

        if not isinstance(body, dict) or not body.get("status") or body.get("data") is None:
            logger.warning("Invalid %s response format: %r", what, body)
            return []
        data = body["data"]
        if not isinstance(data, list):
            logger.warning("Invalid %s response format: data is not a list", what)
            return []
        return data

    def _post(self, path: str, payload: dict[str, Any], what: str) -> None:
        try:
            response = self._client.post(path, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise BackendError(
                f"Failed to save {what}: {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise BackendError(f"Failed to save {what}: {e}") from e
        logger.info("Saved %s to backend", what)

    # ==================== Rules ====================

    def fetch_rules(self, account_number: int) -> list[RuleRecord]:
        """Fetch the account's rule records.

        Args:
            account_number: Trading account number.

        Returns:
            Rule records; empty if the backend could not be read.
        """
        items = self._get_data(
            RULES_PATH,
            {"account_number": account_number, "status": "not_executed"},
            "rules",
        )
        records = []
        for item in items:
            try:
                records.append(RuleRecord.model_validate(item))
            except ValidationError as e:
                logger.warning("Skipping malformed rule record %r: %s", item, e)
        return records

    def save_rules(self, records: Optional[Sequence[RuleRecord]]) -> None:
        """Bulk upsert patched rule records.

        Args:
            records: Records produced by ``patch_rules``.

        Raises:
            ConfigurationError: If there are no records to write.
            BackendError: If the backend rejects the write.
        """
        if not records:
            raise ConfigurationError("No server rules loaded yet")
        payload = {"rules": [r.model_dump(mode="json", exclude_unset=True) for r in records]}
        self._post(RULES_BULK_PATH, payload, "settings")

    # ==================== Plans and journals ====================

    def fetch_plans(self, account_number: int) -> list[PreTradePlan]:
        """Fetch every pre-trade plan saved for the account."""
        items = self._get_data(
            CHECKLIST_PATH, {"account_number": account_number, "type": "daily"}, "plans"
        )
        plans = []
        for item in items:
            try:
                plans.append(plan_from_condition(item.get("condition") or {}))
            except (ValidationError, AttributeError) as e:
                logger.warning("Skipping malformed plan %r: %s", item, e)
        return plans

    def fetch_journals(self, account_number: int) -> list[TradeJournalEntry]:
        """Fetch every pre-entry journal entry saved for the account."""
        items = self._get_data(
            CHECKLIST_PATH, {"account_number": account_number, "type": "pre_entry"}, "journals"
        )
        entries = []
        for index, item in enumerate(items):
            try:
                entries.append(journal_from_item(item, index))
            except (ValidationError, AttributeError) as e:
                logger.warning("Skipping malformed journal entry %r: %s", item, e)
        return entries

    def save_plan(self, account_number: int, plan: PreTradePlan) -> None:
        """Append a pre-trade plan.

        Raises:
            BackendError: If the backend rejects the write.
        """
        payload = {
            "account_number": str(account_number),
            "condition": plan_to_condition(plan),
            "type": "daily",
        }
        self._post(CHECKLIST_PATH, payload, "plan")

    def save_journal(self, account_number: int, entry: TradeJournalEntry) -> None:
        """Append a pre-entry journal entry.

        Raises:
            BackendError: If the backend rejects the write.
        """
        payload = {
            "account_number": str(account_number),
            "condition": journal_to_condition(entry),
            "type": "pre_entry",
        }
        self._post(CHECKLIST_PATH, payload, "journal")
