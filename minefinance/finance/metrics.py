"""
Finance metrics façade.

Design:
- Discounting lives only in minefinance.finance.dcf (singleton).
- This module must not *define* present_value (no 'def present_value' here).
- It re-exports the engine entry points used by the runner, reports and tests.
"""
from .dcf import (  # re-exports only
    benefit_cost_ratio as benefit_cost_ratio,
    compute_annuity_dcf as compute_annuity_dcf,
    compute_irregular_dcf as compute_irregular_dcf,
    compute_project_metrics as compute_project_metrics,
    present_value as present_value,
)

__all__ = [
    "benefit_cost_ratio",
    "compute_annuity_dcf",
    "compute_irregular_dcf",
    "compute_project_metrics",
    "present_value",
]
