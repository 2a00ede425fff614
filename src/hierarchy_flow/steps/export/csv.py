"""Step canônico: export.csv (v1).

Materializa as linhas achatadas (`data.flattened_rows`) em um arquivo CSV,
com colunas na ordem do schema de saída (`data.flattened_schema`).

Config esperada (exemplo):
steps:
  export.csv:
    path: out/org_chart_flat.csv   # opcional; default <run_dir>/flattened.csv

Limites explícitos (v1):
- NÃO reordena linhas (ordem de travessia é preservada)
- NÃO converte literais top/bottom
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from hierarchy_flow.core.pipeline.context import (
    FLATTENED_ROWS_ARTIFACT,
    FLATTENED_SCHEMA_ARTIFACT,
    RunContext,
)
from hierarchy_flow.core.pipeline.step import Step
from hierarchy_flow.core.pipeline.types import StepKind, StepResult, StepStatus


DEFAULT_FILENAME = "flattened.csv"


def _resolve_output_path(step_cfg: Dict[str, Any], meta: Dict[str, Any]) -> Path:
    path_value = step_cfg.get("path")
    if isinstance(path_value, str) and path_value.strip():
        return Path(path_value).expanduser()

    run_dir = meta.get("run_dir")
    if not run_dir:
        raise ValueError("Missing required config: steps.export.csv.path (or meta.run_dir)")
    return Path(run_dir) / DEFAULT_FILENAME


@dataclass
class ExportCsvStep(Step):
    """Exporta as linhas achatadas para CSV."""

    id: str = "export.csv"
    kind: StepKind = StepKind.EXPORT
    depends_on: List[str] = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.depends_on is None:
            self.depends_on = ["transform.hierarchy_to_relational"]

    def run(self, ctx: RunContext) -> StepResult:
        step_cfg = ctx.step_config(self.id)

        try:
            rows = ctx.require_artifact(FLATTENED_ROWS_ARTIFACT, step_id=self.id)

            columns = None
            if ctx.has_artifact(FLATTENED_SCHEMA_ARTIFACT):
                columns = ctx.get_artifact(FLATTENED_SCHEMA_ARTIFACT).field_names()

            out_path = _resolve_output_path(step_cfg, ctx.meta or {})
            out_path.parent.mkdir(parents=True, exist_ok=True)

            df = pd.DataFrame(rows, columns=columns, dtype=object).convert_dtypes()
            df.to_csv(out_path, index=False, encoding="utf-8")

            sha256 = hashlib.sha256(out_path.read_bytes()).hexdigest()

            ctx.log(
                step_id=self.id,
                level="info",
                message="flattened rows exported",
                path=str(out_path),
                rows=int(df.shape[0]),
            )

            return StepResult(
                step_id=self.id,
                kind=self.kind,
                status=StepStatus.SUCCESS,
                summary="flattened rows exported",
                metrics={"rows": int(df.shape[0]), "columns": int(df.shape[1])},
                artifacts={"csv_path": str(out_path), "csv_sha256": sha256},
                payload={"path": str(out_path)},
            )

        except Exception as e:
            ctx.log(
                step_id=self.id,
                level="error",
                message="export.csv failed",
                error_type=e.__class__.__name__,
                error_message=str(e) or "error",
            )
            return StepResult(
                step_id=self.id,
                kind=self.kind,
                status=StepStatus.FAILED,
                summary=str(e) or "export.csv failed",
                payload={"error": {"type": e.__class__.__name__, "message": str(e) or "error"}},
            )
