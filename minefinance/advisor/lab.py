# minefinance/advisor/lab.py
"""
Lab workflows that hand engine numbers to the generative service.

Service failures never escape: each workflow logs them and returns the
fixed fallback text, so the calculator keeps working without the service.
Inputs the engine cannot evaluate still raise DomainError, before any call
is made.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from minefinance.comparison import npv_profile
from minefinance.finance.dcf import compute_project_metrics
from minefinance.types import CalculationResult, ComparisonInput, ProjectInputs
from .client import GenerativeService
from .parsing import ParseError, profile_rows
from .prompts import (
    PROFILE_SCHEMA,
    build_advisor_prompt,
    build_formula_prompt,
    build_profile_prompt,
    build_verdict_prompt,
)

logger = logging.getLogger(__name__)

ADVISOR_EMPTY = "I apologize, I couldn't generate a response at this time."
ADVISOR_ERROR = "I encountered an error connecting to the financial knowledge base. Please try again."
FORMULA_EMPTY = "Synthesis failed."
FORMULA_ERROR = "Error synthesizing formula."
VERDICT_EMPTY = "Analysis failed."
VERDICT_ERROR = "An error occurred during AI analysis."
CHART_ERROR_NOTE = "\n\n**Error:** Could not generate comparison chart data."


@dataclass
class ComparisonOutcome:
    verdict: str
    # rows as returned by the service ({rate, npvA, npvB}); empty on failure
    chart: List[Dict[str, float]] = field(default_factory=list)
    # the same grid computed locally by the annuity engine
    profile: List[Dict[str, Any]] = field(default_factory=list)


async def ask_advisor(
    service: GenerativeService,
    inputs: ProjectInputs,
    question: str,
    result: Optional[CalculationResult] = None,
) -> Optional[str]:
    if not question or not question.strip():
        return None
    res = result if result is not None else compute_project_metrics(inputs)
    prompt = build_advisor_prompt(inputs, res, question)
    try:
        text = await service.generate_narrative(prompt)
    except Exception:
        logger.exception("advisor request failed")
        return ADVISOR_ERROR
    return text or ADVISOR_EMPTY


async def synthesize_formula(service: GenerativeService, chain: Sequence[str]) -> Optional[str]:
    if not chain:
        return None
    prompt = build_formula_prompt(chain)
    try:
        text = await service.generate_narrative(prompt)
    except Exception:
        logger.exception("formula synthesis failed")
        return FORMULA_ERROR
    return text or FORMULA_EMPTY


async def compare_projects(
    service: GenerativeService,
    project_a: ComparisonInput,
    project_b: ComparisonInput,
) -> ComparisonOutcome:
    """Verdict text and chart rows are requested concurrently."""
    outcome = ComparisonOutcome(verdict="", profile=npv_profile(project_a, project_b))

    text_res, data_res = await asyncio.gather(
        service.generate_narrative(build_verdict_prompt(project_a, project_b)),
        service.generate_structured(build_profile_prompt(project_a, project_b), PROFILE_SCHEMA),
        return_exceptions=True,
    )

    for res in (text_res, data_res):
        if isinstance(res, BaseException) and not isinstance(res, ParseError):
            logger.error("comparison request failed", exc_info=res)
            outcome.verdict = VERDICT_ERROR
            return outcome

    outcome.verdict = text_res or VERDICT_EMPTY
    try:
        if isinstance(data_res, ParseError):
            raise data_res
        outcome.chart = profile_rows(data_res)
    except ParseError as e:
        logger.error("could not parse comparison chart data: %s", e)
        outcome.verdict += CHART_ERROR_NOTE
    return outcome
