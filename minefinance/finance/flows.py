# minefinance/finance/flows.py
"""
Editing helpers for the uneven cash-flow table.

Rows are immutable; every helper returns a new tuple. Years are labels:
adding or copying labels the new row with the current row count, removing
re-labels the remaining rows 0..k-1.
"""
from __future__ import annotations

from typing import Iterable, Tuple

from minefinance.types import IrregularFlowRow, NumberOrUnset

Rows = Tuple[IrregularFlowRow, ...]

DEFAULT_ROWS: Rows = (
    IrregularFlowRow(year=0, amount=-50.0),
    IrregularFlowRow(year=1, amount=10.0),
    IrregularFlowRow(year=2, amount=15.0),
    IrregularFlowRow(year=3, amount=20.0),
)
DEFAULT_DISCOUNT_RATE = 10.0


def _check_index(rows: Rows, index: int) -> None:
    if not 0 <= index < len(rows):
        raise IndexError(f"row index {index} out of range for {len(rows)} rows")


def add_row(rows: Iterable[IrregularFlowRow], amount: NumberOrUnset = 0.0) -> Rows:
    cur = tuple(rows)
    return cur + (IrregularFlowRow(year=len(cur), amount=amount),)


def update_row(rows: Iterable[IrregularFlowRow], index: int, amount: NumberOrUnset) -> Rows:
    cur = tuple(rows)
    _check_index(cur, index)
    return tuple(
        IrregularFlowRow(year=r.year, amount=amount) if i == index else r
        for i, r in enumerate(cur)
    )


def remove_row(rows: Iterable[IrregularFlowRow], index: int) -> Rows:
    cur = tuple(rows)
    _check_index(cur, index)
    remaining = [r for i, r in enumerate(cur) if i != index]
    return tuple(IrregularFlowRow(year=i, amount=r.amount) for i, r in enumerate(remaining))


def copy_row(rows: Iterable[IrregularFlowRow], index: int) -> Rows:
    """Append a duplicate of row `index` as the next year."""
    cur = tuple(rows)
    _check_index(cur, index)
    return add_row(cur, cur[index].amount)


def clear_rows() -> Rows:
    return (IrregularFlowRow(year=0, amount=0.0),)


def rows_from_amounts(amounts: Iterable[NumberOrUnset]) -> Rows:
    """Build a table the way the editor does, one add_row per amount."""
    rows: Rows = ()
    for amount in amounts:
        rows = add_row(rows, amount)
    return rows
