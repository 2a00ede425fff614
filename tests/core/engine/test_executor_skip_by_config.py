# tests/core/engine/test_executor_skip_by_config.py
"""
Testes de Steps desabilitados por configuração (`steps.<id>.enabled: false`).
"""

try:
    from hierarchy_flow.core.engine.engine import Engine
    from hierarchy_flow.core.pipeline.types import StepStatus
except Exception as e:
    Engine = None
    StepStatus = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def test_skip_by_config(DummyStep, dummy_ctx):
    assert Engine is not None, f"Missing Engine. Import error: {_IMPORT_ERR}"

    dummy_ctx.config["steps"]["export.csv"] = {"enabled": False}
    steps = [DummyStep(step_id="ingest.load"), DummyStep(step_id="export.csv", depends_on=["ingest.load"])]

    result = Engine(steps=steps, ctx=dummy_ctx).run()

    assert result.steps["ingest.load"].status == StepStatus.SUCCESS
    assert result.steps["export.csv"].status == StepStatus.SKIPPED
    assert result.steps["export.csv"].summary == "skipped by config"
    assert dummy_ctx.has_artifact("export.csv.ok") is False


def test_disabled_step_does_not_block_dependents(DummyStep, dummy_ctx):
    assert Engine is not None, f"Missing Engine. Import error: {_IMPORT_ERR}"

    dummy_ctx.config["steps"]["ingest.load"] = {"enabled": False}
    steps = [DummyStep(step_id="ingest.load"), DummyStep(step_id="export.csv", depends_on=["ingest.load"])]

    result = Engine(steps=steps, ctx=dummy_ctx).run()

    assert result.ok
    assert result.steps["ingest.load"].status == StepStatus.SKIPPED
    assert result.steps["export.csv"].status == StepStatus.SUCCESS
    messages = [e["message"] for e in dummy_ctx.events if e["step_id"] == "ingest.load"]
    assert messages == ["step skipped by config"]
