"""Step canônico: transform.hierarchy_to_relational (v1).

Responsabilidades:
- Consumir os registros pai-filho (artifact `data.raw_rows`).
- Resolver e validar as opções do flattening (coleta todas as falhas).
- Obter o schema de entrada (declarado em `schema` ou inferido via pandas)
  e validar as opções contra ele.
- Executar o flattening tudo-ou-nada e publicar:
    - `data.flattened_rows`   → list[dict], uma linha por nó, em ordem de travessia
    - `data.flattened_schema` → RecordSchema de saída

Config esperada (exemplo):
steps:
  transform.hierarchy_to_relational:
    parent_field: ParentId
    child_field: EmployeeId
    parent_child_mapping: "ParentName=Name"   # campos do par devem ter o mesmo tipo;
                                              # se um for nullable, ambos saem nullable
    level_field: Level
    top_field: Top
    bottom_field: Bottom
    true_value: "Y"
    false_value: "N"
    max_depth: 50
    schema:            # opcional
      - {name: EmployeeId, type: string}
      - {name: ParentId, type: string, nullable: true}

Payload de erro:
- opções inválidas → CONFIG_INVALID_OPTIONS com `details.failures`
- violação estrutural/profundidade → código HIERARCHY_* com os ids ofensores

Registros duplicados (mesmo filho, mesmo pai) são aceitos: a primeira
ocorrência prevalece e a contagem vira warning do Step.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from hierarchy_flow.core.config.errors import FlattenOptionsError
from hierarchy_flow.core.config.hashing import compute_config_hash
from hierarchy_flow.core.config.options import (
    FlattenOptions,
    parse_flatten_options,
    validate_options_against_schema,
)
from hierarchy_flow.core.errors import invalid_options
from hierarchy_flow.core.exceptions import FlowException
from hierarchy_flow.core.hierarchy import flatten_hierarchy
from hierarchy_flow.core.pipeline.context import (
    FLATTENED_ROWS_ARTIFACT,
    FLATTENED_SCHEMA_ARTIFACT,
    RAW_ROWS_ARTIFACT,
    RunContext,
)
from hierarchy_flow.core.pipeline.step import Step
from hierarchy_flow.core.pipeline.types import StepKind, StepResult, StepStatus
from hierarchy_flow.core.schema import RecordSchema, infer_schema


SCHEMA_KEY = "schema"


def _resolve_input_schema(step_cfg: Dict[str, Any], raw_rows: List[Dict[str, Any]]) -> RecordSchema:
    declared = step_cfg.get(SCHEMA_KEY)
    if declared is not None:
        return RecordSchema.from_config(declared)
    return infer_schema(raw_rows)


def _error_payload(exc: Exception, step_id: str) -> Dict[str, Any]:
    if isinstance(exc, FlattenOptionsError):
        return invalid_options(failures=exc.to_details()["failures"], step=step_id).to_dict()
    if isinstance(exc, FlowException):
        return exc.to_payload().to_dict()
    return {"type": exc.__class__.__name__, "message": str(exc) or "error", "details": {}, "hint": None}


@dataclass
class TransformHierarchyToRelationalStep(Step):
    """Achata uma hierarquia pai-filho em linhas relacionais com level/top/bottom."""

    id: str = "transform.hierarchy_to_relational"
    kind: StepKind = StepKind.TRANSFORM
    depends_on: List[str] = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.depends_on is None:
            self.depends_on = ["ingest.load"]

    def run(self, ctx: RunContext) -> StepResult:
        step_cfg = ctx.step_config(self.id)

        try:
            options: FlattenOptions = parse_flatten_options(step_cfg)
            options_hash = compute_config_hash(options.to_dict())

            raw_rows = ctx.require_artifact(RAW_ROWS_ARTIFACT, step_id=self.id)
            if not isinstance(raw_rows, list):
                raise ValueError(f"{RAW_ROWS_ARTIFACT} must be a list of dicts")

            input_schema = _resolve_input_schema(step_cfg, raw_rows)
            if len(input_schema) > 0:
                validate_options_against_schema(options, input_schema)

            ctx.log(
                step_id=self.id,
                level="info",
                message="flatten options resolved",
                options_hash=options_hash,
                input_fields=input_schema.field_names(),
            )

            result = flatten_hierarchy(raw_rows, options=options, input_schema=input_schema)
            rows = result.to_records()
            summary = result.summary()

            ctx.set_artifact(FLATTENED_ROWS_ARTIFACT, rows)
            ctx.set_artifact(FLATTENED_SCHEMA_ARTIFACT, result.schema)

            if summary["duplicates_ignored"]:
                ctx.add_warning(
                    step_id=self.id,
                    message=f"{summary['duplicates_ignored']} duplicate record(s) ignored (first occurrence kept)",
                )

            ctx.log(
                step_id=self.id,
                level="info",
                message="hierarchy flattened",
                root_id=result.graph.root_id,
                **summary,
            )

            return StepResult(
                step_id=self.id,
                kind=self.kind,
                status=StepStatus.SUCCESS,
                summary="hierarchy flattened",
                metrics={"rows_in": len(raw_rows), "rows_out": len(rows), **summary},
                artifacts={"schema": result.schema.to_dict()},
                payload={
                    "options": options.to_dict(),
                    "options_hash": options_hash,
                    "root_id": result.graph.root_id,
                },
            )

        except Exception as e:
            error = _error_payload(e, self.id)
            ctx.log(
                step_id=self.id,
                level="error",
                message="transform.hierarchy_to_relational failed",
                error_type=error["type"],
                error_message=error["message"],
            )
            return StepResult(
                step_id=self.id,
                kind=self.kind,
                status=StepStatus.FAILED,
                summary=error["message"],
                payload={"error": error},
            )
