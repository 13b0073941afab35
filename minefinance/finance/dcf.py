# minefinance/finance/dcf.py
"""
Discounted cash flow engine.

Two entry points share one discounting rule, PV = CF / (1+i)^t:
 - compute_annuity_dcf(P, n, A, i%): flat annual cash flow over the life of mine
 - compute_irregular_dcf(rows, i%): arbitrary (year, amount) rows, plus B/C ratio

Pure functions only: no logging, no I/O, no module state.
"""
from __future__ import annotations

import math
from typing import Any, Iterable, List, Mapping, Sequence, Union

from minefinance.types import (
    BC_RATIO_SENTINEL,
    CalculationResult,
    CashFlowRecord,
    DomainError,
    IrregularFlowRow,
    IrregularResult,
    NumberOrUnset,
    ProjectInputs,
)

RowLike = Union[IrregularFlowRow, Mapping[str, Any], Sequence[Any]]


# ---------- input coercion ----------
def coerce_number(value: NumberOrUnset) -> float:
    """Unset (None or blank string) counts as 0; anything else goes through float()."""
    if value is None:
        return 0.0
    if isinstance(value, str) and not value.strip():
        return 0.0
    return float(value)


def rate_from_percent(discount_rate_percent: NumberOrUnset) -> float:
    rate = coerce_number(discount_rate_percent) / 100.0
    if 1.0 + rate == 0.0:
        raise DomainError("discount rate of -100% has no present value")
    return rate


def _as_year(value: Any) -> int:
    if value is None or isinstance(value, bool):
        raise DomainError(f"year must be an integer, got {value!r}")
    try:
        y = float(value)
    except (TypeError, ValueError):
        raise DomainError(f"year must be an integer, got {value!r}") from None
    if not y.is_integer():
        raise DomainError(f"year must be an integer, got {value!r}")
    return int(y)


# ---------- discounting ----------
def _growth(rate: float, year: int) -> float:
    base = 1.0 + rate
    try:
        return base ** year
    except OverflowError:
        # keep IEEE behaviour instead of raising
        return -math.inf if (base < 0 and year % 2) else math.inf


def present_value(amount: float, rate: float, year: int) -> float:
    """
    Value at year 0 of `amount` received in `year`, with `rate` as a decimal.
    Overflow and underflow of (1+rate)^year give inf / 0 / nan, never an exception.
    """
    factor = _growth(rate, year)
    if factor == 0.0:
        if amount == 0.0 or math.isnan(amount):
            return math.nan
        return math.copysign(math.inf, amount) * math.copysign(1.0, factor)
    return amount / factor


# ---------- annuity model ----------
def compute_annuity_dcf(
    initial_investment: NumberOrUnset,
    life_of_mine: NumberOrUnset,
    annual_revenue: NumberOrUnset,
    discount_rate_percent: NumberOrUnset,
) -> CalculationResult:
    """
    Year 0 carries -P undiscounted; years 1..floor(n) each carry A discounted
    at i. A fractional life of mine is truncated; a negative, -inf or NaN one
    leaves only year 0.
    """
    p = coerce_number(initial_investment)
    n = coerce_number(life_of_mine)
    a = coerce_number(annual_revenue)
    rate = rate_from_percent(discount_rate_percent)
    if n == math.inf:
        raise DomainError(f"life_of_mine must be finite, got {n}")
    # NaN or -inf: no operating years
    last_year = math.floor(n) if math.isfinite(n) else 0

    current_npv = -p
    rows: List[CashFlowRecord] = [
        CashFlowRecord(year=0, cash_flow=-p, discounted_cash_flow=-p, cumulative_npv=-p)
    ]

    for t in range(1, last_year + 1):
        discounted = present_value(a, rate, t)
        current_npv += discounted
        rows.append(
            CashFlowRecord(
                year=t,
                cash_flow=a,
                discounted_cash_flow=discounted,
                cumulative_npv=current_npv,
            )
        )

    return CalculationResult(npv=current_npv, cash_flows=tuple(rows))


def compute_project_metrics(inputs: ProjectInputs) -> CalculationResult:
    return compute_annuity_dcf(
        inputs.initial_investment,
        inputs.life_of_mine,
        inputs.annual_revenue,
        inputs.discount_rate,
    )


# ---------- irregular flows ----------
def to_row(row: RowLike) -> IrregularFlowRow:
    """Accept a row object, a {'year', 'amount'} mapping, or a (year, amount) pair."""
    if isinstance(row, IrregularFlowRow):
        return IrregularFlowRow(year=_as_year(row.year), amount=row.amount)
    if isinstance(row, Mapping):
        if "year" not in row:
            raise DomainError(f"cash flow row is missing 'year': {dict(row)!r}")
        return IrregularFlowRow(year=_as_year(row["year"]), amount=row.get("amount"))
    if isinstance(row, (list, tuple)) and len(row) == 2:
        return IrregularFlowRow(year=_as_year(row[0]), amount=row[1])
    raise DomainError(f"unsupported cash flow row: {row!r}")


def benefit_cost_ratio(pv_inflows: float, pv_outflows: float) -> float:
    """PV inflows over PV outflows; 9999 for inflow with no outflow, 0 for neither."""
    if pv_outflows == 0:
        return BC_RATIO_SENTINEL if pv_inflows > 0 else 0.0
    return pv_inflows / pv_outflows


def compute_irregular_dcf(
    rows: Iterable[RowLike],
    discount_rate_percent: NumberOrUnset,
) -> IrregularResult:
    """
    Rows are taken in the order given. Each row is discounted by its own
    `year`, so reordering the list only reorders the emitted records.
    """
    rate = rate_from_percent(discount_rate_percent)
    cumulative_npv = 0.0
    pv_inflows = 0.0
    pv_outflows = 0.0
    out: List[CashFlowRecord] = []

    for raw in rows:
        row = to_row(raw)
        cash_flow = coerce_number(row.amount)
        discounted = present_value(cash_flow, rate, row.year)
        cumulative_npv += discounted

        if discounted > 0:
            pv_inflows += discounted
        else:
            pv_outflows += abs(discounted)

        out.append(
            CashFlowRecord(
                year=row.year,
                cash_flow=cash_flow,
                discounted_cash_flow=discounted,
                cumulative_npv=cumulative_npv,
            )
        )

    return IrregularResult(
        npv=cumulative_npv,
        bc_ratio=benefit_cost_ratio(pv_inflows, pv_outflows),
        cash_flows=tuple(out),
        pv_inflows=pv_inflows,
        pv_outflows=pv_outflows,
    )
