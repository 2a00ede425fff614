# tests/core/pipeline/test_step_protocol.py
"""
Testes do contrato de Step (Protocol @runtime_checkable).

Garante que Steps concretos e Steps dummy satisfazem o protocolo por
duck typing, sem herança obrigatória.
"""

import pytest

try:
    from hierarchy_flow.core.pipeline.step import Step
    from hierarchy_flow.core.pipeline.types import StepResult, StepKind
except Exception as e:  # noqa: BLE001
    Step = None
    StepResult = None
    StepKind = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing pipeline core modules. Implement:\n"
            "- src/hierarchy_flow/core/pipeline/types.py (StepKind, StepStatus, StepResult)\n"
            "- src/hierarchy_flow/core/pipeline/step.py (Step Protocol)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_dummy_step_satisfies_protocol(DummyStep, dummy_ctx):
    _require_imports()
    step = DummyStep(step_id="ingest.load", kind=StepKind.INGEST)

    assert isinstance(step, Step), "DummyStep must satisfy Step Protocol (@runtime_checkable expected)."
    result = step.run(dummy_ctx)
    assert isinstance(result, StepResult)
    assert result.step_id == "ingest.load"


def test_canonical_steps_satisfy_protocol():
    _require_imports()
    from hierarchy_flow.steps.export.csv import ExportCsvStep
    from hierarchy_flow.steps.ingest.load import IngestLoadStep
    from hierarchy_flow.steps.transform.hierarchy_to_relational import TransformHierarchyToRelationalStep

    steps = [IngestLoadStep(), TransformHierarchyToRelationalStep(), ExportCsvStep()]

    assert all(isinstance(s, Step) for s in steps)
    assert [s.kind for s in steps] == [StepKind.INGEST, StepKind.TRANSFORM, StepKind.EXPORT]
    assert steps[1].depends_on == ["ingest.load"]
    assert steps[2].depends_on == ["transform.hierarchy_to_relational"]
