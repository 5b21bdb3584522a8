"""Reconciliation between backend rule records and RuleSettings.

Backend rules are loosely typed records: a display name plus an opaque
condition payload. Each record is tagged with a ``RuleCategory`` once, at the
boundary (an explicit ``category`` field wins, otherwise the name is looked
up in a fixed table). Everything after that dispatches on the tag, and each
category has its own condition schema.

``apply_rules`` merges records into settings; ``patch_rules`` projects
settings back onto the records that were loaded.
"""

import re
from enum import Enum
from typing import Any, Callable, Optional, Sequence, get_args

from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)

from dailycheck.engine.rules import format_number
from dailycheck.errors import ConfigurationError
from dailycheck.models import RuleRecord, RuleSession, RuleSettings


class RuleCategory(str, Enum):
    """Kinds of backend rule that map onto settings."""

    MAX_RISK = "max_risk"
    NO_OVERTRADE = "no_overtrade"
    MAX_SL = "max_sl"
    MAX_DAILY_DD = "max_daily_dd"
    RR_TARGET_DECLARED = "rr_target_declared"
    ALLOWED_SESSIONS = "allowed_sessions"
    FIRST_TRADE_GOAL = "first_trade_goal"
    MAX_SL_TP_CHANGE = "max_sl_tp_change"
    JOURNAL_BEFORE_NEW_TRADE = "journal_before_new_trade"


# Checked in order; "max sl/tp change" must come before "max sl".
_NAME_TABLE: list[tuple[RuleCategory, Callable[[str], bool]]] = [
    (RuleCategory.MAX_SL_TP_CHANGE, lambda n: "max sl/tp change" in n),
    (RuleCategory.MAX_RISK, lambda n: "max risk" in n),
    (RuleCategory.NO_OVERTRADE, lambda n: "no overtrade" in n),
    (RuleCategory.MAX_SL, lambda n: "max sl" in n and "change" not in n),
    (RuleCategory.MAX_DAILY_DD, lambda n: "max daily dd" in n),
    (RuleCategory.RR_TARGET_DECLARED, lambda n: "rr target declared" in n),
    (RuleCategory.ALLOWED_SESSIONS, lambda n: "allowed trading sessions" in n),
    (RuleCategory.FIRST_TRADE_GOAL, lambda n: "first trade must have goal" in n),
    (RuleCategory.JOURNAL_BEFORE_NEW_TRADE, lambda n: re.search("journal", n) is not None),
]


def classify(record: RuleRecord) -> Optional[RuleCategory]:
    """Determine which settings category a backend record belongs to.

    Args:
        record: Backend rule record.

    Returns:
        The category, or None for records that do not map onto settings.
    """
    if record.category:
        try:
            return RuleCategory(record.category.strip().lower())
        except ValueError:
            pass
    name = (record.name or "").lower()
    for category, matches in _NAME_TABLE:
        if matches(name):
            return category
    return None


# ==================== Condition schemas ====================


class _Condition(BaseModel):
    """Condition payload where a malformed field reads as absent.

    Booleans are malformed for numeric fields.
    """

    model_config = {"extra": "ignore"}

    @field_validator("*", mode="wrap")
    @classmethod
    def _drop_malformed(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        annotation = cls.model_fields[info.field_name].annotation
        if isinstance(value, bool) and bool not in get_args(annotation):
            return None
        try:
            return handler(value)
        except ValidationError:
            return None


class MaxRiskCondition(_Condition):
    max_risk_percent: Optional[float] = Field(default=None, ge=0)


class NoOvertradeCondition(_Condition):
    max_positions: Optional[int] = Field(default=None, ge=0)
    max_lots_per_trade: Optional[float] = Field(default=None, ge=0)


class MaxSLCondition(_Condition):
    max_sl_percent: Optional[float] = Field(default=None, ge=0)


class MaxDailyDDCondition(_Condition):
    max_dd_percent: Optional[float] = Field(default=None, ge=0)


class RRTargetCondition(_Condition):
    min_rr_allowed: Optional[float] = Field(default=None, ge=0)


class AllowedSessionsCondition(_Condition):
    allowed_sessions: Optional[list[RuleSession]] = None
    violate_outside_session: Optional[bool] = None


class FirstTradeGoalCondition(_Condition):
    require_first_trade_goal: Optional[bool] = None


class SLTPChangeCondition(_Condition):
    max_sl_tp_change_percent: Optional[float] = Field(default=None, ge=0)


class JournalCondition(_Condition):
    require_journal_before_new_trade: Optional[bool] = None


# Condition schema and condition key -> settings field, per category.
_CATEGORY_FIELDS: dict[RuleCategory, tuple[type[_Condition], dict[str, str]]] = {
    RuleCategory.MAX_RISK: (MaxRiskCondition, {"max_risk_percent": "max_risk_percent"}),
    RuleCategory.NO_OVERTRADE: (
        NoOvertradeCondition,
        {"max_positions": "max_positions", "max_lots_per_trade": "max_lots_per_trade"},
    ),
    RuleCategory.MAX_SL: (MaxSLCondition, {"max_sl_percent": "max_sl_percent"}),
    RuleCategory.MAX_DAILY_DD: (MaxDailyDDCondition, {"max_dd_percent": "max_daily_dd_percent"}),
    RuleCategory.RR_TARGET_DECLARED: (RRTargetCondition, {"min_rr_allowed": "min_rr_allowed"}),
    RuleCategory.ALLOWED_SESSIONS: (
        AllowedSessionsCondition,
        {
            "allowed_sessions": "allowed_sessions",
            "violate_outside_session": "violate_outside_session",
        },
    ),
    RuleCategory.FIRST_TRADE_GOAL: (
        FirstTradeGoalCondition,
        {"require_first_trade_goal": "require_first_trade_goal"},
    ),
    RuleCategory.MAX_SL_TP_CHANGE: (
        SLTPChangeCondition,
        {"max_sl_tp_change_percent": "max_sl_tp_change_percent"},
    ),
    RuleCategory.JOURNAL_BEFORE_NEW_TRADE: (
        JournalCondition,
        {"require_journal_before_new_trade": "require_journal_before_new_trade"},
    ),
}


def _condition_dict(record: RuleRecord) -> dict[str, Any]:
    return dict(record.condition) if isinstance(record.condition, dict) else {}


# ==================== Forward mapping ====================


def apply_rules(records: Sequence[RuleRecord], base: RuleSettings) -> RuleSettings:
    """Merge backend rule records into settings.

    For each category the first matching record is used. Fields that are
    absent or malformed keep the value from ``base``.

    Args:
        records: Backend rule records.
        base: Settings to merge into.

    Returns:
        New RuleSettings; ``base`` is not modified.
    """
    first_by_category: dict[RuleCategory, RuleRecord] = {}
    for record in records:
        category = classify(record)
        if category is not None and category not in first_by_category:
            first_by_category[category] = record

    updates: dict[str, Any] = {}
    for category, record in first_by_category.items():
        schema, fields = _CATEGORY_FIELDS[category]
        condition = schema.model_validate(_condition_dict(record))
        for condition_key, settings_field in fields.items():
            value = getattr(condition, condition_key)
            if value is not None:
                updates[settings_field] = value

    return base.model_copy(update=updates)


# ==================== Reverse mapping ====================


def _sessions_text(settings: RuleSettings) -> str:
    return "; ".join(s.describe() for s in settings.allowed_sessions) or "no sessions"


def _patch(category: RuleCategory, settings: RuleSettings) -> tuple[dict[str, Any], str, str]:
    """Get the condition patch, name and description for a category."""
    if category is RuleCategory.MAX_RISK:
        pct = format_number(settings.max_risk_percent)
        return (
            {"max_risk_percent": settings.max_risk_percent},
            f"Max Risk {pct}%",
            f"Risk per trade must not exceed {pct}% of the total account",
        )
    if category is RuleCategory.NO_OVERTRADE:
        return (
            {
                "max_positions": settings.max_positions,
                "max_lots_per_trade": settings.max_lots_per_trade,
            },
            "No Overtrade",
            f"No more than {settings.max_positions} open positions and "
            f"{format_number(settings.max_lots_per_trade)} lots per trade",
        )
    if category is RuleCategory.MAX_SL:
        pct = format_number(settings.max_sl_percent)
        return (
            {"max_sl_percent": settings.max_sl_percent},
            f"Max SL {pct}%",
            f"Stop loss must not exceed {pct}% of the total account",
        )
    if category is RuleCategory.MAX_DAILY_DD:
        pct = format_number(settings.max_daily_dd_percent)
        return (
            {"max_dd_percent": settings.max_daily_dd_percent},
            f"Max Daily DD {pct}%",
            f"Total drawdown during the day must not exceed {pct}% of opening equity",
        )
    if category is RuleCategory.RR_TARGET_DECLARED:
        rr = format_number(settings.min_rr_allowed)
        return (
            {"min_rr_allowed": settings.min_rr_allowed},
            f"RR Target Declared (min {rr})",
            f"Declare an RR target of at least {rr} before the first trade",
        )
    if category is RuleCategory.ALLOWED_SESSIONS:
        outside = "is a violation" if settings.violate_outside_session else "is allowed"
        return (
            {
                "allowed_sessions": [
                    s.model_dump(exclude_none=True) for s in settings.allowed_sessions
                ],
                "violate_outside_session": settings.violate_outside_session,
            },
            "Allowed Trading Sessions",
            f"Only trade within {_sessions_text(settings)}; trading outside {outside}",
        )
    if category is RuleCategory.FIRST_TRADE_GOAL:
        required = settings.require_first_trade_goal
        return (
            {"require_first_trade_goal": required},
            "First Trade Must Have Goal",
            "A pre-trade plan is required before the first trade"
            if required
            else "A pre-trade plan is optional",
        )
    if category is RuleCategory.MAX_SL_TP_CHANGE:
        pct = format_number(settings.max_sl_tp_change_percent)
        return (
            {"max_sl_tp_change_percent": settings.max_sl_tp_change_percent},
            f"Max SL/TP Change {pct}%",
            f"SL/TP must not move by more than {pct}% of the initial distance",
        )
    required = settings.require_journal_before_new_trade
    return (
        {"require_journal_before_new_trade": required},
        "Journal Before New Trade",
        "A pre-entry journal is required before each new trade"
        if required
        else "A pre-entry journal is optional",
    )


def patch_rules(
    settings: RuleSettings, records: Optional[Sequence[RuleRecord]]
) -> list[RuleRecord]:
    """Project settings onto previously loaded backend rule records.

    Matched records get their condition patched (other condition keys are
    kept) and their name and description regenerated. Other records pass
    through unchanged.

    Args:
        settings: Settings to write.
        records: Records loaded from the backend.

    Returns:
        New list of records; the input records are not modified.

    Raises:
        ConfigurationError: If no records have been loaded.
    """
    if not records:
        raise ConfigurationError("No server rules loaded yet")

    patched = []
    for record in records:
        category = classify(record)
        if category is None:
            patched.append(record)
            continue
        condition_patch, name, description = _patch(category, settings)
        patched.append(
            record.model_copy(
                update={
                    "condition": {**_condition_dict(record), **condition_patch},
                    "name": name,
                    "description": description,
                }
            )
        )
    return patched
