# minefinance/types.py
"""
Value types shared by the DCF engine and its callers.

Every result is a fresh frozen dataclass; the engine never caches or
mutates a previous result.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Tuple, Union

# Empty form fields arrive as None or "" and count as zero.
Unset = Union[None, str]
NumberOrUnset = Union[float, int, None, str]

# Benefit/cost ratio reported when there is inflow but no outflow.
BC_RATIO_SENTINEL = 9999.0


class DomainError(ValueError):
    """Input the discounting model cannot evaluate (e.g. a -100% rate)."""


@dataclass(frozen=True)
class ProjectInputs:
    initial_investment: NumberOrUnset = None  # P ($M)
    life_of_mine: NumberOrUnset = None        # n (years)
    annual_revenue: NumberOrUnset = None      # A ($M/year)
    discount_rate: NumberOrUnset = None       # i (%)


@dataclass(frozen=True)
class CashFlowRecord:
    year: int
    cash_flow: float
    discounted_cash_flow: float
    cumulative_npv: float

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CalculationResult:
    npv: float
    cash_flows: Tuple[CashFlowRecord, ...]


@dataclass(frozen=True)
class IrregularFlowRow:
    """One row of the lab table. `year` is a label, not a list index."""
    year: int
    amount: NumberOrUnset = None


@dataclass(frozen=True)
class IrregularResult:
    npv: float
    bc_ratio: float
    cash_flows: Tuple[CashFlowRecord, ...]
    pv_inflows: float = 0.0
    pv_outflows: float = 0.0


@dataclass(frozen=True)
class ComparisonInput:
    name: str
    investment: NumberOrUnset = None
    revenue: NumberOrUnset = None
    life: NumberOrUnset = None
