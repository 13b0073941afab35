# minefinance/scenario_runner.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, List, Optional
from datetime import datetime
import json, csv
import logging

from .comparison import DEFAULT_PROJECT_A, DEFAULT_PROJECT_B, comparison_from_dict, npv_profile
from .finance.flows import DEFAULT_DISCOUNT_RATE, DEFAULT_ROWS, rows_from_amounts
from .finance.metrics import compute_annuity_dcf, compute_irregular_dcf
from .report import records_as_dicts, summarize_annuity, summarize_irregular
from .validate import (
    _mode_from_env_or_flag,
    load_params_from_file,
    validate_params_dict,
)

logger = logging.getLogger(__name__)

MODES = ("auto", "annuity", "flows", "compare")


@dataclass
class RunResult:
    summary: Dict[str, Any]
    summary_path: Path
    results_path: Optional[Path] = None
    rows: Optional[List[Dict[str, Any]]] = None


def _write_jsonl(path: Path, rows: List[Dict[str, Any]]) -> None:
    with path.open("w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row) + "\n")


def _write_csv(path: Path, rows: List[Dict[str, Any]]) -> None:
    if not rows:
        path.write_text("", encoding="utf-8")
        return
    hdr = list(rows[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=hdr)
        w.writeheader()
        w.writerows(rows)


def resolve_mode(mode: str, params: Dict[str, Any]) -> str:
    if mode not in MODES:
        raise ValueError(f"unknown mode: {mode!r}; expected one of {MODES}")
    if mode != "auto":
        return mode
    if "cashflows" in params:
        return "flows"
    if "compare" in params:
        return "compare"
    return "annuity"


def validate_and_run(mode: str, params: Dict[str, Any]) -> tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """Run one flattened scenario; returns (summary, per-row records)."""
    validate_params_dict(params, mode=_mode_from_env_or_flag(None))
    mode = resolve_mode(mode, params)
    unit = str(params.get("unit") or "M")

    if mode == "annuity":
        res = compute_annuity_dcf(
            params.get("initial_investment"),
            params.get("life_of_mine"),
            params.get("annual_revenue"),
            params.get("discount_rate"),
        )
        summary = summarize_annuity(res, unit=unit)
        rows = records_as_dicts(res.cash_flows)
    elif mode == "flows":
        res = compute_irregular_dcf(params.get("cashflows") or [], params.get("discount_rate"))
        summary = summarize_irregular(res, unit=unit)
        rows = records_as_dicts(res.cash_flows)
    else:
        entries = params.get("compare") or []
        if entries and len(entries) != 2:
            raise ValueError(f"compare needs exactly two projects, got {len(entries)}")
        if entries:
            a = comparison_from_dict(entries[0], "Project A")
            b = comparison_from_dict(entries[1], "Project B")
        else:
            a, b = DEFAULT_PROJECT_A, DEFAULT_PROJECT_B
        rows = npv_profile(a, b)
        summary = {"project_a": a.name, "project_b": b.name, "points": len(rows)}

    summary = {"mode": mode, "name": params.get("name"), "unit": unit, **summary}
    logger.info("ran %s scenario %s", mode, params.get("name") or "<unnamed>")
    return summary, rows


def _save_rows(out: Path, stem: str, rows: List[Dict[str, Any]], fmt: str) -> Path:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    base = f"{stem}_results_{stamp}"
    if fmt == "jsonl":
        path = out / f"{base}.jsonl"
        _write_jsonl(path, rows)
    elif fmt == "csv":
        path = out / f"{base}.csv"
        _write_csv(path, rows)
    else:
        raise SystemExit(f"unknown fmt: {fmt}")
    logger.info("wrote %d rows to %s", len(rows), path)
    return path


def run_dir(
    config: str | Path,
    out_dir: str | Path,
    *,
    mode: str = "auto",
    fmt: str = "jsonl",
    save_annual: bool = False,
) -> RunResult:
    """
    Run a single scenario file, or every *.yaml/*.yml file of a directory,
    and write summary.json (plus per-row results when save_annual is set).
    """
    cfg_path = Path(config)
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    summary_path = out / "summary.json"

    if cfg_path.is_dir():
        files = [f for f in sorted(cfg_path.glob("*.y*ml")) if f.is_file()]
        if not files:
            raise ValueError(f"{cfg_path}: no scenario files found")
        scenarios: Dict[str, Any] = {}
        for f in files:
            summary, rows = validate_and_run(mode, load_params_from_file(f))
            if save_annual:
                summary["results_path"] = str(_save_rows(out, f.stem, rows, fmt))
            scenarios[f.stem] = summary
        combined = {"scenarios": scenarios}
        summary_path.write_text(json.dumps(combined, indent=2), encoding="utf-8")
        return RunResult(summary=combined, summary_path=summary_path)

    params = load_params_from_file(cfg_path)
    summary, rows = validate_and_run(mode, params)
    summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")

    results_path: Optional[Path] = None
    if save_annual:
        results_path = _save_rows(out, cfg_path.stem, rows, fmt)

    return RunResult(summary=summary, summary_path=summary_path, results_path=results_path, rows=rows)


def run_table(
    out_dir: str | Path,
    *,
    amounts: Optional[List[float]] = None,
    discount_rate: float = DEFAULT_DISCOUNT_RATE,
    fmt: str = "jsonl",
    save_annual: bool = False,
) -> RunResult:
    """
    Run the uneven cash-flow table without a scenario file: the default lab
    table, or one row per amount labelled from year 0.
    """
    rows = DEFAULT_ROWS if amounts is None else rows_from_amounts(amounts)
    params: Dict[str, Any] = {
        "name": "lab_table",
        "discount_rate": discount_rate,
        "cashflows": [{"year": r.year, "amount": r.amount} for r in rows],
    }
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    summary_path = out / "summary.json"

    summary, records = validate_and_run("flows", params)
    summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")

    results_path: Optional[Path] = None
    if save_annual:
        results_path = _save_rows(out, "lab_table", records, fmt)

    return RunResult(summary=summary, summary_path=summary_path, results_path=results_path, rows=records)
