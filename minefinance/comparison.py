# minefinance/comparison.py
"""
Side-by-side NPV profile of two flat-annuity projects across discount rates.

Each point is a plain Annuity Engine run; no IRR or crossover solving here.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import numpy as np

from minefinance.finance.dcf import compute_annuity_dcf
from minefinance.types import ComparisonInput

PROFILE_DECIMALS = 4

DEFAULT_PROJECT_A = ComparisonInput(name="Project A", investment=50.0, revenue=12.0, life=10)
DEFAULT_PROJECT_B = ComparisonInput(name="Project B", investment=80.0, revenue=18.0, life=12)


def default_rates() -> List[float]:
    """0% to 30% in 2% steps."""
    return [float(r) for r in np.arange(0, 32, 2)]


def project_npv(project: ComparisonInput, rate_percent: float) -> float:
    return compute_annuity_dcf(project.investment, project.life, project.revenue, rate_percent).npv


def npv_profile(
    project_a: ComparisonInput,
    project_b: ComparisonInput,
    rates: Optional[Iterable[float]] = None,
) -> List[Dict[str, Any]]:
    grid = default_rates() if rates is None else [float(r) for r in rates]
    return [
        {
            "rate": r,
            "npv_a": round(project_npv(project_a, r), PROFILE_DECIMALS),
            "npv_b": round(project_npv(project_b, r), PROFILE_DECIMALS),
        }
        for r in grid
    ]


def comparison_from_dict(d: Dict[str, Any], default_name: str) -> ComparisonInput:
    return ComparisonInput(
        name=str(d.get("name") or default_name),
        investment=d.get("investment"),
        revenue=d.get("revenue"),
        life=d.get("life"),
    )
