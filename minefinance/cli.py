# minefinance/cli.py
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

# Only imports the thin runner; heavy math stays behind scenario_runner
from .finance.flows import DEFAULT_DISCOUNT_RATE
from .scenario_runner import MODES, run_dir, run_table

logger = logging.getLogger(__name__)

LAB_MODES = ("ask", "formula")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="minefinance",
        description="Mining project DCF / NPV calculator",
    )
    p.add_argument(
        "--mode",
        default="auto",
        choices=list(MODES) + list(LAB_MODES) + ["glossary"],
        help="Execution mode (default: auto, picked from the scenario contents).",
    )
    p.add_argument(
        "--config",
        required=False,
        default=None,
        help="Path to a scenario YAML, or a directory of scenarios.",
    )
    p.add_argument(
        "--outputs-dir",
        default="outputs",
        help="Directory to write result files (default: outputs). Will be created if missing.",
    )
    p.add_argument(
        "--format",
        dest="fmt",
        default="csv",
        choices=["csv", "jsonl", "text"],
        help="Per-year results format; 'text' also prints the table (default: csv).",
    )
    p.add_argument(
        "--save-annual",
        action="store_true",
        help="If set, write per-year rows alongside summary.json.",
    )
    p.add_argument(
        "--amounts",
        nargs="+",
        type=float,
        default=None,
        help="With --mode flows and no --config: cash flows for years 0, 1, 2, ... (default: the lab table).",
    )
    p.add_argument("--rate", type=float, default=None, help="Discount rate in %% for --amounts (default: 10).")
    p.add_argument("--question", default="", help="Question for --mode ask.")
    p.add_argument("--chain", nargs="*", default=[], help="Formula blocks for --mode formula, e.g. A/F P/A.")
    p.add_argument("--narrate", action="store_true", help="With compare: also ask the service for a verdict.")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    v = p.add_mutually_exclusive_group()
    v.add_argument(
        "--strict",
        action="store_true",
        help="Enable strict validation (unknown keys raise).",
    )
    v.add_argument(
        "--relaxed",
        action="store_true",
        help="Enable relaxed validation (blank inputs count as zero).",
    )
    return p.parse_args(argv)


def _apply_validation_mode(ns: argparse.Namespace) -> None:
    # Default: leave env as-is; flags override explicitly.
    if ns.strict:
        os.environ["VALIDATION_MODE"] = "strict"
    elif ns.relaxed:
        os.environ["VALIDATION_MODE"] = "relaxed"


def _service():
    from .advisor.client import OpenAIService
    from .config import load_llm_settings

    return OpenAIService(load_llm_settings())


def _run_lab(ns: argparse.Namespace, cfg_path: Path | None) -> int:
    from .advisor.lab import ask_advisor, synthesize_formula
    from .config import load_model_config
    from .types import ProjectInputs
    from .validate import _mode_from_env_or_flag, validate_params_dict

    if ns.mode == "formula":
        text = asyncio.run(synthesize_formula(_service(), ns.chain))
        if text is None:
            print("ERROR: --chain needs at least one block", file=sys.stderr)
            return 2
    else:
        if not ns.question.strip():
            from .advisor.prompts import GREETING

            print(GREETING)
            return 0
        params = load_model_config(cfg_path) if cfg_path else {}
        # same guardrails as a scenario run; SystemExit maps to exit code 2
        validate_params_dict(params, mode=_mode_from_env_or_flag(None))
        inputs = ProjectInputs(
            initial_investment=params.get("initial_investment"),
            life_of_mine=params.get("life_of_mine"),
            annual_revenue=params.get("annual_revenue"),
            discount_rate=params.get("discount_rate"),
        )
        text = asyncio.run(ask_advisor(_service(), inputs, ns.question))
    print(text)
    return 0


def _print_glossary() -> None:
    from .schema import DEFINITIONS, SCHEMA

    for key, d in DEFINITIONS.items():
        unit = SCHEMA.get(key, {}).get("unit")
        head = f"{d['name']} ({d['symbol']})" + (f" [{unit}]" if unit else "")
        print(head)
        print(f"  {d['definition']}")
        if "formula" in d:
            print(f"  {d['formula']}")


def _narrate(params_path: Path) -> str:
    from .advisor.lab import compare_projects
    from .comparison import DEFAULT_PROJECT_A, DEFAULT_PROJECT_B, comparison_from_dict
    from .config import load_model_config

    entries = load_model_config(params_path).get("compare") or []
    if len(entries) == 2:
        a = comparison_from_dict(entries[0], "Project A")
        b = comparison_from_dict(entries[1], "Project B")
    else:
        a, b = DEFAULT_PROJECT_A, DEFAULT_PROJECT_B
    return asyncio.run(compare_projects(_service(), a, b)).verdict


def main(argv: list[str] | None = None) -> int:
    ns = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    _apply_validation_mode(ns)

    outputs_dir = Path(ns.outputs_dir).resolve()
    cfg_path: Path | None = Path(ns.config).resolve() if ns.config else None

    try:
        if ns.mode == "glossary":
            _print_glossary()
            return 0
        if ns.mode in LAB_MODES:
            return _run_lab(ns, cfg_path)

        file_fmt = "csv" if ns.fmt == "text" else ns.fmt
        if cfg_path is None:
            if ns.mode != "flows":
                print("ERROR: --config is required for this mode", file=sys.stderr)
                return 2
            # no scenario: the default lab table, or the --amounts given
            rate = DEFAULT_DISCOUNT_RATE if ns.rate is None else ns.rate
            rr = run_table(outputs_dir, amounts=ns.amounts, discount_rate=rate,
                           fmt=file_fmt, save_annual=ns.save_annual)
        else:
            outputs_dir.mkdir(parents=True, exist_ok=True)
            rr = run_dir(cfg_path, outputs_dir, mode=ns.mode, fmt=file_fmt, save_annual=ns.save_annual)

        if ns.fmt == "text":
            from .report import render_table

            print(json.dumps(rr.summary, indent=2))
            if rr.rows is not None:
                print(render_table(rr.rows, unit=str(rr.summary.get("unit") or "M")))
        if ns.narrate and rr.summary.get("mode") == "compare":
            print(_narrate(cfg_path))
    except SystemExit as e:
        # validation failures carry their message in e.code
        if isinstance(e.code, int):
            return e.code
        print(f"ERROR: {e.code}", file=sys.stderr)
        return 2
    except Exception as e:
        logger.debug("run failed", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0


__all__ = ["main"]
