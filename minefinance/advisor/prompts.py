# minefinance/advisor/prompts.py
"""
Prompt text for the generative lab features. Numbers come from the engine;
the wording is ours, the answers are the service's.
"""
from __future__ import annotations

from textwrap import dedent
from typing import Any, Dict, Sequence

from minefinance.formatting import format_currency_short
from minefinance.types import CalculationResult, ComparisonInput, NumberOrUnset, ProjectInputs

FORMULA_BLOCKS = ("P/F", "P/A", "A/P", "A/F", "F/P", "F/A")

GREETING = (
    "Hello! I am your Mine Finance Architect. I can help you interpret these results, "
    "suggest optimization strategies, or explain complex mining finance terms. Ask me anything!"
)

# Row schema for the NPV-profile request.
PROFILE_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "rate": {"type": "number"},
            "npvA": {"type": "number"},
            "npvB": {"type": "number"},
        },
        "required": ["rate", "npvA", "npvB"],
    },
}


def _raw(v: NumberOrUnset) -> str:
    return "" if v is None else str(v)


def build_advisor_prompt(inputs: ProjectInputs, result: CalculationResult, question: str) -> str:
    return dedent(f"""\
        You are a Senior Mine Finance Software Architect.
        Context: The user is analyzing a mining project with the following parameters:
        - Initial Investment (P): {format_currency_short(inputs.initial_investment)}
        - Life of Mine (n): {_raw(inputs.life_of_mine)} years
        - Annual Revenue (A): {format_currency_short(inputs.annual_revenue)}
        - Discount Rate (i): {_raw(inputs.discount_rate)}%

        Calculated Results:
        - NPV: {format_currency_short(result.npv)}

        User Question: "{question}"

        Provide a concise, professional financial answer. If the NPV is negative, explain the implications. If positive, highlight the value. Use LaTeX formatting for math if necessary, but keep it readable text mostly.
        """)


def build_formula_prompt(chain: Sequence[str]) -> str:
    unknown = [b for b in chain if b not in FORMULA_BLOCKS]
    if unknown:
        raise ValueError(f"unknown formula blocks: {unknown}; expected any of {FORMULA_BLOCKS}")
    chain_str = " into ".join(chain)
    return (
        f"The user has chained {chain_str} on the visual canvas. Synthesize these into one "
        "cohesive LaTeX formula and define the resulting relationship. Explain what financial "
        "conversion this represents."
    )


def build_verdict_prompt(a: ComparisonInput, b: ComparisonInput) -> str:
    return dedent(f"""\
        Perform Incremental Analysis for two projects:
        {a.name}: Investment ${_raw(a.investment)}M, Revenue ${_raw(a.revenue)}M, Life {_raw(a.life)}yrs.
        {b.name}: Investment ${_raw(b.investment)}M, Revenue ${_raw(b.revenue)}M, Life {_raw(b.life)}yrs.

        Calculate the Incremental IRR and the Crossover Rate (where NPV_A = NPV_B).
        Return a 'Verdict' explaining which project is safer versus which is more profitable.
        Use Markdown for formatting.
        """)


def build_profile_prompt(a: ComparisonInput, b: ComparisonInput) -> str:
    return dedent(f"""\
        For {a.name} (Inv {_raw(a.investment)}, Rev {_raw(a.revenue)}, Life {_raw(a.life)})
        and {b.name} (Inv {_raw(b.investment)}, Rev {_raw(b.revenue)}, Life {_raw(b.life)}):
        Provide a JSON array of NPV values for Project A and Project B at discount rates ranging from 0% to 30% in 2% increments.
        IMPORTANT OUTPUT RULES:
        1. Round all NPV values to exactly 4 decimal places.
        2. Do NOT use scientific notation (e.g. avoid 1.23E10).
        3. Output plain floating point numbers only.

        Use this schema: {{ rate: number, npvA: number, npvB: number }}.
        """)
