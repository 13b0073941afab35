import pytest

from minefinance.comparison import (
    DEFAULT_PROJECT_A,
    DEFAULT_PROJECT_B,
    comparison_from_dict,
    default_rates,
    npv_profile,
    project_npv,
)
from minefinance.finance.dcf import compute_annuity_dcf, compute_irregular_dcf
from minefinance.report import (
    COLUMNS,
    cashflow_frame,
    records_as_dicts,
    render_table,
    summarize_annuity,
    summarize_irregular,
)
from minefinance.types import ComparisonInput

LAB_ROWS = [(0, -50), (1, 10), (2, 15), (3, 20)]


def test_cashflow_frame_shape_and_order():
    res = compute_irregular_dcf(list(reversed(LAB_ROWS)), 10)
    df = cashflow_frame(res.cash_flows)
    assert list(df.columns) == COLUMNS
    assert df["year"].tolist() == [3, 2, 1, 0]
    assert df["cumulative_npv"].iloc[-1] == res.npv


def test_records_as_dicts_uses_chart_keys():
    rows = records_as_dicts(compute_annuity_dcf(50, 1, 12, 8).cash_flows)
    assert set(rows[0]) == set(COLUMNS)


def test_render_table_formats_money_columns():
    rows = records_as_dicts(compute_irregular_dcf(LAB_ROWS, 10).cash_flows)
    text = render_table(rows, unit="k")
    assert "$-50.00k" in text
    assert "$-13.49k" in text
    assert render_table([]) == "(no cash flows)"


def test_summarize_annuity():
    s = summarize_annuity(compute_annuity_dcf(50, 10, 12, 8))
    assert s["npv_display"] == "$30.52M"
    assert s["npv_precise"] == "$30.520977M"
    assert s["npv_full"] == "$30,520,976.79"
    assert s["profitable"] is True
    assert s["years"] == 11


def test_summarize_irregular():
    s = summarize_irregular(compute_irregular_dcf(LAB_ROWS, 10))
    assert s["bc_ratio_display"] == "0.73x"
    assert s["bc_ratio_copy"] == "0.73"
    assert s["profitable"] is False
    assert s["rows"] == 4


def test_summarize_irregular_sentinel():
    s = summarize_irregular(compute_irregular_dcf([(1, 5)], 10))
    assert s["bc_ratio"] == 9999
    assert s["bc_ratio_display"] == "9999.00x"


def test_default_rate_grid():
    assert default_rates() == [float(r) for r in range(0, 31, 2)]


def test_npv_profile_at_zero_rate_is_undiscounted():
    rows = npv_profile(DEFAULT_PROJECT_A, DEFAULT_PROJECT_B)
    assert len(rows) == 16
    assert rows[0] == {"rate": 0.0, "npv_a": 70.0, "npv_b": 136.0}


def test_npv_profile_matches_engine_and_falls_with_rate():
    rows = npv_profile(DEFAULT_PROJECT_A, DEFAULT_PROJECT_B, rates=[4, 8, 12])
    assert rows[1]["npv_a"] == pytest.approx(compute_annuity_dcf(50, 10, 12, 8).npv, abs=1e-4)
    npvs = [r["npv_b"] for r in rows]
    assert npvs == sorted(npvs, reverse=True)


def test_project_npv_blank_fields():
    assert project_npv(ComparisonInput(name="empty"), 10) == 0


def test_comparison_from_dict_defaults_name():
    c = comparison_from_dict({"investment": 5, "revenue": 1, "life": 8}, "Project B")
    assert c == ComparisonInput(name="Project B", investment=5, revenue=1, life=8)
