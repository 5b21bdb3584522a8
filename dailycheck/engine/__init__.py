"""Rule evaluation, aggregation, reconciliation and export."""

from dailycheck.engine.rules import RULE_KEYS, evaluate
from dailycheck.engine.aggregate import (
    DayRate,
    RangeSummary,
    date_window,
    day_rate,
    export_rows,
    iter_dates,
    range_summary,
)
from dailycheck.engine.export import build_csv, write_csv
from dailycheck.engine.reconcile import (
    RuleCategory,
    apply_rules,
    classify,
    patch_rules,
)

__all__ = [
    "RULE_KEYS",
    "evaluate",
    "DayRate",
    "RangeSummary",
    "date_window",
    "day_rate",
    "export_rows",
    "iter_dates",
    "range_summary",
    "build_csv",
    "write_csv",
    "RuleCategory",
    "apply_rules",
    "classify",
    "patch_rules",
]
