from __future__ import annotations
from typing import Dict, Any

# Parameter schema: units, type, min/max ranges, and description.
SCHEMA: Dict[str, Dict[str, Any]] = {
    "initial_investment": {"unit": "USD million",      "type": "float", "min": 0.0,    "max": 1e6,  "desc": "Upfront capital at year 0 (P)"},
    "life_of_mine":       {"unit": "years",            "type": "int",   "min": 0,      "max": 200,  "desc": "Operating years modelled (n)"},
    "annual_revenue":     {"unit": "USD million/year", "type": "float", "min": -1e6,   "max": 1e6,  "desc": "Flat annual net cash flow (A)"},
    "discount_rate":      {"unit": "percent",          "type": "float", "min": -99.99, "max": 1000.0, "desc": "Annual discount rate (i)"},
}

# camelCase field names accepted in configs.
ALIASES: Dict[str, str] = {
    "initialInvestment": "initial_investment",
    "lifeOfMine": "life_of_mine",
    "annualRevenue": "annual_revenue",
    "discountRate": "discount_rate",
}

# Top-level keys a scenario file may carry besides SCHEMA keys.
EXTRA_KEYS = {"name", "unit", "cashflows", "compare"}

# Glossary shown next to each input.
DEFINITIONS: Dict[str, Dict[str, str]] = {
    "initial_investment": {
        "symbol": "P",
        "name": "Initial Investment",
        "definition": "The total upfront capital expenditure required to start the mining project. "
                      "This includes exploration, equipment, and infrastructure costs incurred at Year 0.",
    },
    "life_of_mine": {
        "symbol": "n",
        "name": "Life of Mine",
        "definition": "The expected operational duration of the mine in years, determined by the "
                      "ore reserves and the annual production rate.",
    },
    "annual_revenue": {
        "symbol": "A",
        "name": "Annual Net Cash Flow",
        "definition": "The estimated net cash flow generated per year. Calculated as "
                      "(Revenue - Operating Costs - Taxes - Royalties).",
    },
    "discount_rate": {
        "symbol": "i",
        "name": "Discount Rate",
        "definition": "The rate of return used to discount future cash flows back to their present "
                      "value. It reflects the opportunity cost of capital and the risk profile of the project.",
    },
    "npv": {
        "symbol": "NPV",
        "name": "Net Present Value",
        "definition": "The sum of the present values of incoming and outgoing cash flows over a period "
                      "of time. A positive NPV indicates the project is projected to generate profit "
                      "above the discount rate.",
        "formula": "NPV = \\sum_{t=1}^{n} \\frac{R_t}{(1+i)^t} - P",
    },
}
