# minefinance/report.py
"""
Tabular and summary views of engine results, for the chart/summary consumers
and the CLI text output.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List

import pandas as pd

from minefinance.formatting import (
    format_currency,
    format_currency_short,
    format_npv_precise,
    format_ratio,
    to_fixed,
)
from minefinance.types import CalculationResult, CashFlowRecord, IrregularResult

COLUMNS = ["year", "cash_flow", "discounted_cash_flow", "cumulative_npv"]
_LABEL_COLUMNS = ("year", "rate")


def records_as_dicts(records: Iterable[CashFlowRecord]) -> List[Dict[str, Any]]:
    return [r.as_dict() for r in records]


def cashflow_frame(records: Iterable[CashFlowRecord]) -> pd.DataFrame:
    """One row per record, in emitted order (not re-sorted by year)."""
    return pd.DataFrame(records_as_dicts(records), columns=COLUMNS)


def render_table(rows: List[Dict[str, Any]], unit: str = "M") -> str:
    """Plain-text table of result rows; money columns get the short currency format."""
    df = pd.DataFrame(rows)
    if df.empty:
        return "(no cash flows)"
    for col in df.columns:
        if col not in _LABEL_COLUMNS:
            df[col] = df[col].map(lambda v: format_currency_short(v, unit))
    return df.to_string(index=False)


def summarize_annuity(result: CalculationResult, *, unit: str = "M") -> Dict[str, Any]:
    return {
        "npv": result.npv,
        "npv_display": format_currency_short(result.npv, unit),
        "npv_precise": format_npv_precise(result.npv, unit),
        "npv_full": format_currency(result.npv) if unit == "M" else None,
        "profitable": result.npv > 0,
        "years": len(result.cash_flows),
    }


def summarize_irregular(result: IrregularResult, *, unit: str = "M") -> Dict[str, Any]:
    return {
        "npv": result.npv,
        "npv_display": format_currency_short(result.npv, unit),
        "npv_precise": format_npv_precise(result.npv, unit),
        "bc_ratio": result.bc_ratio,
        "bc_ratio_display": format_ratio(result.bc_ratio),
        "bc_ratio_copy": to_fixed(result.bc_ratio),
        "pv_inflows": result.pv_inflows,
        "pv_outflows": result.pv_outflows,
        "profitable": result.npv > 0,
        "rows": len(result.cash_flows),
    }
