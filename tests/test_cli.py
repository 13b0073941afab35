import json
from pathlib import Path

import pytest

from minefinance import cli

SCENARIOS = Path(__file__).resolve().parents[1] / "minefinance" / "inputs" / "scenarios"


@pytest.fixture(autouse=True)
def _relaxed(monkeypatch):
    # cli.main may flip VALIDATION_MODE; monkeypatch restores it afterwards
    monkeypatch.setenv("VALIDATION_MODE", "relaxed")


def test_cli_missing_config_exits_2(tmp_path):
    assert cli.main(["--outputs-dir", str(tmp_path)]) == 2


def test_cli_invalid_mode_exits_2():
    with pytest.raises(SystemExit) as ei:
        cli._parse_args(["--mode", "nope"])
    assert ei.value.code == 2


def test_cli_annuity_writes_summary_and_csv(tmp_path):
    rc = cli.main([
        "--config", str(SCENARIOS / "release_case.yaml"),
        "--outputs-dir", str(tmp_path),
        "--save-annual",
    ])
    assert rc == 0
    summary = json.loads((tmp_path / "summary.json").read_text(encoding="utf-8"))
    assert summary["mode"] == "annuity"
    assert summary["npv_display"] == "$30.52M"
    csvs = list(tmp_path.glob("release_case_results_*.csv"))
    assert len(csvs) == 1
    lines = csvs[0].read_text(encoding="utf-8").splitlines()
    assert lines[0] == "year,cash_flow,discounted_cash_flow,cumulative_npv"
    assert len(lines) == 12


def test_cli_flows_jsonl(tmp_path):
    rc = cli.main([
        "--config", str(SCENARIOS / "uneven_flows.yaml"),
        "--outputs-dir", str(tmp_path),
        "--format", "jsonl",
        "--save-annual",
    ])
    assert rc == 0
    (path,) = tmp_path.glob("uneven_flows_results_*.jsonl")
    rows = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [r["year"] for r in rows] == [0, 1, 2, 3]
    summary = json.loads((tmp_path / "summary.json").read_text(encoding="utf-8"))
    assert summary["mode"] == "flows"
    assert summary["bc_ratio"] == pytest.approx(0.7303, abs=1e-4)


def test_cli_text_prints_table(tmp_path, capsys):
    rc = cli.main([
        "--config", str(SCENARIOS / "uneven_flows.yaml"),
        "--outputs-dir", str(tmp_path),
        "--format", "text",
    ])
    assert rc == 0
    out = capsys.readouterr().out
    assert "$-50.00M" in out
    assert "0.73x" in out


def test_cli_compare_profile(tmp_path):
    rc = cli.main(["--config", str(SCENARIOS / "compare_ab.yaml"), "--outputs-dir", str(tmp_path)])
    assert rc == 0
    summary = json.loads((tmp_path / "summary.json").read_text(encoding="utf-8"))
    assert summary["mode"] == "compare"
    assert summary["points"] == 16


def test_cli_directory_runs_every_scenario(tmp_path):
    out = tmp_path / "out"
    rc = cli.main(["--config", str(SCENARIOS), "--outputs-dir", str(out)])
    assert rc == 0
    summary = json.loads((out / "summary.json").read_text(encoding="utf-8"))
    assert set(summary["scenarios"]) == {"release_case", "uneven_flows", "compare_ab"}


def test_cli_strict_flag_rejects_fractional_life(tmp_path):
    cfg = tmp_path / "frac.yaml"
    cfg.write_text(
        "initial_investment: 50\nlife_of_mine: 2.5\nannual_revenue: 12\ndiscount_rate: 8\n",
        encoding="utf-8",
    )
    assert cli.main(["--config", str(cfg), "--outputs-dir", str(tmp_path / "o"), "--strict"]) == 2
    assert cli.main(["--config", str(cfg), "--outputs-dir", str(tmp_path / "o"), "--relaxed"]) == 0


def test_cli_minus_100_rate_exits_2(tmp_path, capsys):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("initial_investment: 50\ndiscount_rate: -100\n", encoding="utf-8")
    assert cli.main(["--config", str(cfg), "--outputs-dir", str(tmp_path / "o")]) == 2
    assert "-100%" in capsys.readouterr().err


def test_cli_bad_yaml_exits_1(tmp_path):
    cfg = tmp_path / "broken.yaml"
    cfg.write_text("a: [1, 2\n", encoding="utf-8")
    assert cli.main(["--config", str(cfg), "--outputs-dir", str(tmp_path / "o")]) == 1


def test_cli_ask_without_api_key(monkeypatch, capsys):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    assert cli.main(["--mode", "ask", "--question", "Is this mine viable?"]) == 1
    assert "API key not configured" in capsys.readouterr().err


def test_cli_glossary(capsys):
    assert cli.main(["--mode", "glossary"]) == 0
    out = capsys.readouterr().out
    assert "Life of Mine (n) [years]" in out
    assert "Net Present Value (NPV)" in out


def test_cli_ask_validates_scenario_before_service(tmp_path, monkeypatch, capsys):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("initial_investment: 50\nlife_of_mine: 10\nannual_revenue: 12\ndiscount_rate: -100\n",
                   encoding="utf-8")
    assert cli.main(["--mode", "ask", "--config", str(cfg), "--question", "why?"]) == 2
    assert "-100%" in capsys.readouterr().err


def test_cli_ask_without_question_prints_greeting(monkeypatch, capsys):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    assert cli.main(["--mode", "ask"]) == 0
    assert "Mine Finance Architect" in capsys.readouterr().out


def test_cli_flows_without_config_runs_lab_table(tmp_path):
    rc = cli.main(["--mode", "flows", "--outputs-dir", str(tmp_path), "--format", "jsonl", "--save-annual"])
    assert rc == 0
    summary = json.loads((tmp_path / "summary.json").read_text(encoding="utf-8"))
    assert summary["name"] == "lab_table"
    assert summary["npv"] == pytest.approx(-13.4861, abs=1e-4)
    assert summary["bc_ratio_display"] == "0.73x"
    (path,) = tmp_path.glob("lab_table_results_*.jsonl")
    assert len(path.read_text(encoding="utf-8").splitlines()) == 4


def test_cli_flows_with_amounts(tmp_path):
    rc = cli.main(["--mode", "flows", "--outputs-dir", str(tmp_path), "--amounts", "-100", "110", "--rate", "10"])
    assert rc == 0
    summary = json.loads((tmp_path / "summary.json").read_text(encoding="utf-8"))
    assert abs(summary["npv"]) < 1e-9
    assert summary["rows"] == 2


def test_cli_compare_strict(tmp_path):
    rc = cli.main(["--config", str(SCENARIOS / "compare_ab.yaml"), "--outputs-dir", str(tmp_path), "--strict"])
    assert rc == 0
