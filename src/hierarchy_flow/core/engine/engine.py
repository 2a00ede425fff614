# src/hierarchy_flow/core/engine/engine.py
"""
Engine de execução do pipeline do Hierarchy Flow.

Regras:
- O Engine **não** muta instâncias de StepResult in-place; qualquer
  enriquecimento (warnings do RunContext) cria uma nova instância via
  `dataclasses.replace`.
- Exceções escapando de um Step são convertidas em `ErrorPayload`
  (serializável e acionável) em `StepResult.payload["error"]`.
- `FlowException` preserva seu código estável (ex.: HIERARCHY_CYCLE_DETECTED)
  e os identificadores ofensores em `details`.
- Steps desabilitados por config ou com dependência FAILED são SKIPPED.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence

from hierarchy_flow.core.errors import (
    ErrorPayload,
    engine_configuration_error,
    engine_execution_error,
)
from hierarchy_flow.core.exceptions import FlowException
from hierarchy_flow.core.pipeline.context import RunContext
from hierarchy_flow.core.pipeline.step import Step
from hierarchy_flow.core.pipeline.types import StepKind, StepResult, StepStatus

from .planner import plan_execution


@dataclass(frozen=True)
class RunResult:
    """Resultado agregado de uma execução de pipeline."""

    steps: Dict[str, StepResult] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(r.status != StepStatus.FAILED for r in self.steps.values())

    def failed(self) -> List[StepResult]:
        return [r for r in self.steps.values() if r.status == StepStatus.FAILED]

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "steps": {sid: r.to_dict() for sid, r in self.steps.items()}}


class Engine:
    """Engine canônico do Hierarchy Flow (planner + executor)."""

    def __init__(self, *, steps: Sequence[Step], ctx: RunContext):
        self.steps: List[Step] = list(steps)
        self.ctx: RunContext = ctx

    def _is_enabled(self, step_id: str) -> bool:
        return bool(self.ctx.step_config(step_id).get("enabled", True))

    def _fail_fast(self) -> bool:
        engine_cfg = (self.ctx.config or {}).get("engine", {}) or {}
        return bool(engine_cfg.get("fail_fast", True))

    def _exception_to_error(self, exc: Exception, *, step_id: str) -> ErrorPayload:
        if isinstance(exc, FlowException):
            return exc.to_payload()
        return engine_execution_error(
            step=step_id,
            exc_type=exc.__class__.__name__,
            exc_message=str(exc) or None,
        )

    def _merge_ctx_warnings(self, step_id: str, result: StepResult) -> StepResult:
        merged: List[str] = []
        for msg in list(result.warnings or []) + list(self.ctx.warnings.get(step_id, [])):
            if msg not in merged:
                merged.append(msg)
        return replace(result, step_id=step_id, warnings=merged)

    def _mk_result(
        self,
        *,
        step: Step,
        status: StepStatus,
        summary: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> StepResult:
        kind = getattr(step, "kind", None) or StepKind.TRANSFORM
        r = StepResult(
            step_id=step.id,
            kind=kind,
            status=status,
            summary=summary,
            payload=dict(payload or {}),
        )
        return self._merge_ctx_warnings(step.id, r)

    def run(self) -> RunResult:
        ordered = plan_execution(self.steps)

        results: Dict[str, StepResult] = {}
        for step in ordered:
            sid = step.id

            if not self._is_enabled(sid):
                results[sid] = self._mk_result(
                    step=step, status=StepStatus.SKIPPED, summary="skipped by config"
                )
                self.ctx.log(step_id=sid, level="info", message="step skipped by config")
                continue

            deps = list(getattr(step, "depends_on", []) or [])
            failed_deps = [d for d in deps if d in results and results[d].status == StepStatus.FAILED]
            if failed_deps:
                results[sid] = self._mk_result(
                    step=step,
                    status=StepStatus.SKIPPED,
                    summary="skipped due to failed dependency",
                    payload={"failed_dependencies": failed_deps},
                )
                continue

            self.ctx.log(step_id=sid, level="info", message="step started")
            try:
                step_result = step.run(self.ctx)
            except Exception as e:
                error = self._exception_to_error(e, step_id=sid)
                results[sid] = self._mk_result(
                    step=step,
                    status=StepStatus.FAILED,
                    summary=error.message,
                    payload={"error": error.to_dict()},
                )
            else:
                if isinstance(step_result, StepResult):
                    results[sid] = self._merge_ctx_warnings(sid, step_result)
                else:
                    error = engine_configuration_error(
                        message="Step retornou tipo inválido",
                        details={
                            "step_id": sid,
                            "expected": "StepResult",
                            "received": type(step_result).__name__,
                        },
                        hint="Ajuste o Step para retornar StepResult",
                    )
                    results[sid] = self._mk_result(
                        step=step,
                        status=StepStatus.FAILED,
                        summary=error.message,
                        payload={"error": error.to_dict()},
                    )

            status = results[sid].status
            self.ctx.log(
                step_id=sid,
                level="error" if status == StepStatus.FAILED else "info",
                message="step finished",
                status=status.value,
            )
            if status == StepStatus.FAILED and self._fail_fast():
                break

        return RunResult(steps=results)
