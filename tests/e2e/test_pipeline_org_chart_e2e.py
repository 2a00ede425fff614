"""
E2E: organograma CSV → flattening → CSV relacional.

Cenários:
- caminho feliz com mapping `ParentName=Name` e literais sobrescritos
  por config local (deep-merge)
- reprodutibilidade: dois runs idênticos geram o mesmo arquivo
- hierarquia inválida: o flattening falha, export é SKIPPED e nenhum
  arquivo é produzido
"""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd

from hierarchy_flow.core.pipeline.types import StepStatus

from tests.e2e._helpers import run_pipeline, write_csv, write_defaults


FLATTEN = {
    "parent_field": "ParentId",
    "child_field": "EmployeeId",
    "parent_child_mapping": "ParentName=Name",
}


def _run(run_dir: Path, rows, flatten=None, local_yaml=None):
    run_dir.mkdir(parents=True, exist_ok=True)
    dataset = write_csv(run_dir / "org_chart.csv", rows)
    defaults = write_defaults(run_dir, dataset=dataset, flatten=flatten or FLATTEN)
    local = None
    if local_yaml is not None:
        local = run_dir / "config.local.yaml"
        local.write_text(local_yaml, encoding="utf-8")
    return run_pipeline(run_dir, defaults, local)


def test_org_chart_happy_path(tmp_path: Path, org_chart_records):
    local_yaml = """\
steps:
  transform.hierarchy_to_relational:
    true_value: "1"
    false_value: "0"
"""
    ctx, result = _run(tmp_path / "run", org_chart_records, local_yaml=local_yaml)

    assert result.ok
    assert [r.status for r in result.steps.values()] == [StepStatus.SUCCESS] * 3

    out = Path(result.steps["export.csv"].payload["path"])
    df = pd.read_csv(out, dtype=str, keep_default_na=False)

    assert list(df.columns) == ["EmployeeId", "ParentId", "Name", "ParentName", "Title", "Level", "Top", "Bottom"]
    assert df["EmployeeId"].tolist() == ["E1", "E2", "E3", "E4", "E5"]
    assert df["Level"].tolist() == ["0", "1", "1", "2", "2"]
    assert df["Top"].tolist() == ["1", "0", "0", "0", "0"]
    assert df["Bottom"].tolist() == ["0", "0", "1", "1", "1"]

    e4 = df.set_index("EmployeeId").loc["E4"]
    assert e4["Name"] == "Bob"
    assert e4["ParentName"] == "Dan"

    messages = [e["message"] for e in ctx.events_for("transform.hierarchy_to_relational")]
    assert "hierarchy flattened" in messages

    summary = json.loads(json.dumps(result.to_dict()))
    assert summary["ok"] is True
    assert summary["steps"]["transform.hierarchy_to_relational"]["metrics"]["max_level"] == 2


def test_two_identical_runs_are_reproducible(tmp_path: Path, org_chart_records):
    _, result_a = _run(tmp_path / "run_a", org_chart_records)
    _, result_b = _run(tmp_path / "run_b", org_chart_records)

    assert result_a.steps["export.csv"].artifacts["csv_sha256"] == result_b.steps["export.csv"].artifacts["csv_sha256"]
    assert (
        result_a.steps["transform.hierarchy_to_relational"].payload["options_hash"]
        == result_b.steps["transform.hierarchy_to_relational"].payload["options_hash"]
    )


def test_invalid_hierarchy_produces_no_output(tmp_path: Path):
    rows = [
        {"EmployeeId": "A", "ParentId": None},
        {"EmployeeId": "B", "ParentId": None},
    ]
    flatten = {"parent_field": "ParentId", "child_field": "EmployeeId"}

    _, result = _run(tmp_path / "run", rows, flatten=flatten)

    flat = result.steps["transform.hierarchy_to_relational"]
    assert flat.status == StepStatus.FAILED
    assert flat.payload["error"]["type"] == "HIERARCHY_MULTIPLE_ROOTS"
    assert flat.payload["error"]["details"]["root_ids"] == ["A", "B"]
    assert "export.csv" not in result.steps
    assert not (tmp_path / "run" / "flattened.csv").exists()
