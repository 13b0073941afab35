# minefinance/validate.py
from __future__ import annotations
import os, sys
from pathlib import Path
from typing import Any, Dict, Iterable, List

from .config import load_model_config
from .schema import EXTRA_KEYS, SCHEMA

ANNUITY_KEYS = ("initial_investment", "life_of_mine", "annual_revenue", "discount_rate")
COMPARE_KEYS = ("investment", "revenue", "life")


def _mode_from_env_or_flag(flag: str | None) -> str:
    if flag in ("strict", "relaxed"):
        return flag
    env = (os.environ.get("VALIDATION_MODE") or "").lower()
    return env if env in ("strict", "relaxed") else "relaxed"


def _is_unset(v: Any) -> bool:
    return v is None or (isinstance(v, str) and not v.strip())


def _number(data: Dict[str, Any], key: str) -> float:
    try:
        return float(data[key])
    except (TypeError, ValueError):
        raise SystemExit(f"{key} must be a number, got {data[key]!r}") from None


def _check_rows(rows: Any, *, mode: str) -> None:
    if not isinstance(rows, list):
        raise SystemExit("cashflows must be a list of {year, amount} rows")
    for i, row in enumerate(rows):
        if not isinstance(row, dict) or "year" not in row:
            raise SystemExit(f"cashflows[{i}] must be a mapping with a 'year'")
        try:
            year = float(row["year"])
        except (TypeError, ValueError):
            raise SystemExit(f"cashflows[{i}].year must be an integer, got {row['year']!r}") from None
        if mode == "strict":
            if not year.is_integer():
                raise SystemExit(f"cashflows[{i}].year must be an integer, got {row['year']!r}")
            if "amount" not in row:
                raise SystemExit(f"cashflows[{i}] missing 'amount' (strict mode)")


def _check_compare_strict(entries: Any) -> None:
    if not isinstance(entries, list) or len(entries) != 2:
        raise SystemExit("compare must list exactly two projects (strict mode)")
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise SystemExit(f"compare[{i}] must be a mapping")
        missing = [k for k in COMPARE_KEYS if k not in entry or _is_unset(entry[k])]
        if missing:
            raise SystemExit(f"compare[{i}] missing required keys: {missing}")
        for k in COMPARE_KEYS:
            try:
                float(entry[k])
            except (TypeError, ValueError):
                raise SystemExit(f"compare[{i}].{k} must be a number, got {entry[k]!r}") from None


def validate_params_dict(data: Dict[str, Any], *, mode: str = "relaxed") -> None:
    """
    Guardrails on a flattened scenario:
      - relaxed: SCHEMA bounds on keys that are set; blanks count as zero later
      - strict : every annuity key present (or a cashflows table plus discount_rate,
                 or a compare list of two complete projects),
                 whole-year life_of_mine, unknown top-level keys rejected
    A -100% discount rate is rejected in both modes.
    """
    if mode == "strict":
        if "cashflows" in data:
            required = ["discount_rate"]
        elif "compare" in data:
            required = []
            _check_compare_strict(data["compare"])
        else:
            required = list(ANNUITY_KEYS)
        missing = [k for k in required if k not in data or _is_unset(data[k])]
        if missing:
            raise SystemExit(f"missing required keys: {missing}")

        allowed = set(SCHEMA) | EXTRA_KEYS
        unknown = [k for k in data.keys() if k not in allowed]
        if unknown:
            raise SystemExit(f"unknown top-level keys (strict mode): {unknown}")

    if "discount_rate" in data and not _is_unset(data["discount_rate"]):
        if _number(data, "discount_rate") == -100.0:
            raise SystemExit("discount_rate of -100% has no present value")

    for k, bounds in SCHEMA.items():
        if k not in data or _is_unset(data[k]):
            continue
        v = _number(data, k)
        lo = float(bounds.get("min", float("-inf")))
        hi = float(bounds.get("max", float("inf")))
        if not (lo <= v <= hi):
            raise SystemExit(f"{k} outside allowed range [{lo}, {hi}]: {v}")
        if mode == "strict" and bounds.get("type") == "int" and not v.is_integer():
            raise SystemExit(f"{k} must be a whole number of years (strict mode): {v}")

    if "cashflows" in data:
        _check_rows(data["cashflows"], mode=mode)

    cmp = data.get("compare")
    if cmp is not None and (not isinstance(cmp, list) or not all(isinstance(x, dict) for x in cmp)):
        raise SystemExit("compare must be a list of {name, investment, revenue, life} mappings")


def load_params_from_file(path: Path) -> Dict[str, Any]:
    p = Path(path)
    if p.is_dir():
        # scenario_runner handles directories; keep this function file-only
        raise SystemExit(f"{p} is a directory (expected a file)")
    return load_model_config(p)


def _iter_input_files(p: Path) -> Iterable[Path]:
    if p.is_file():
        yield p
    elif p.is_dir():
        for ext in ("*.yaml", "*.yml", "*.json"):
            yield from sorted(p.rglob(ext))


def _main(argv: List[str] | None = None) -> int:
    import argparse
    parser = argparse.ArgumentParser(prog="minefinance.validate", add_help=True)
    parser.add_argument("paths", nargs="+", help="YAML/JSON files or directories to validate")
    parser.add_argument("--mode", choices=["strict", "relaxed"], default=None, help="validation mode")
    args = parser.parse_args(argv)

    mode = _mode_from_env_or_flag(args.mode)
    had_error = False

    for raw in args.paths:
        target = Path(raw)
        any_seen = False
        for f in _iter_input_files(target):
            any_seen = True
            try:
                data = load_params_from_file(f)
                validate_params_dict(data, mode=mode)
                print(f"OK: {f}")
            except SystemExit as e:
                print(f"{f}: {e}", file=sys.stderr)
                had_error = True
            except ValueError as e:
                print(f"{f}: ERROR: {e}", file=sys.stderr)
                had_error = True
        if not any_seen:
            print(f"{target}: no YAML/JSON files found", file=sys.stderr)
            had_error = True

    return 1 if had_error else 0


if __name__ == "__main__":
    raise SystemExit(_main())
