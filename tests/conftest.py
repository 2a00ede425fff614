# tests/conftest.py
"""
Fixtures compartilhados para testes do Hierarchy Flow.

Este módulo define fixtures reutilizáveis que fornecem:
- configuração mínima e determinística
- contexto de execução controlado (RunContext)
- Steps dummy para testes estruturais do planner/engine
- hierarquias de exemplo (organograma) como listas de registros

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Dados retornados são determinísticos e isolados (novas listas a cada uso)
    - Steps dummy utilizam duck typing em vez de herança
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture executa pipeline real
    - Nenhuma fixture realiza I/O

Este módulo existe como infraestrutura de teste e não
como validação funcional do engine de flattening.
"""

import pytest
from datetime import datetime, timezone


FLATTEN_STEP_ID = "transform.hierarchy_to_relational"


# =====================================================
# Config Loader fixtures
# =====================================================

@pytest.fixture
def project_like_config_defaults_yaml() -> str:
    """
    YAML de defaults semelhante ao `config.defaults.yaml` de um projeto real.

    Fornecido como string para evitar I/O; os testes do loader escrevem
    o conteúdo em `tmp_path` quando precisam de um arquivo.
    """
    return """\
engine:
  fail_fast: true
steps:
  ingest.load:
    path: data/org_chart.csv
  transform.hierarchy_to_relational:
    parent_field: ParentId
    child_field: EmployeeId
    max_depth: 50
"""


@pytest.fixture
def project_like_config_local_yaml() -> str:
    """YAML de overrides locais (sobrescreve apenas o que declara)."""
    return """\
steps:
  transform.hierarchy_to_relational:
    true_value: "1"
    false_value: "0"
"""


# =====================================================
# Pipeline fixtures (Step + RunContext)
# =====================================================

@pytest.fixture
def dummy_config() -> dict:
    """
    Configuração mínima e válida, já resolvida (sem loader nem merge).

    Invariantes:
        - `fail_fast` explicitamente habilitado
        - Opções do flattening apontam para os campos do organograma de exemplo
    """
    return {
        "engine": {"fail_fast": True},
        "steps": {
            FLATTEN_STEP_ID: {
                "parent_field": "ParentId",
                "child_field": "EmployeeId",
            },
        },
    }


@pytest.fixture
def dummy_ctx(dummy_config):
    """
    RunContext determinístico para testes.

    `run_id` e `created_at` são fixos; o timestamp é timezone-aware (UTC).
    """
    from hierarchy_flow.core.pipeline.context import RunContext

    return RunContext(
        run_id="run-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
        config=dummy_config,
        meta={"source": "pytest"},
    )


@pytest.fixture
def DummyStep():
    """
    Fixture factory que fornece uma implementação mínima e duck-typed de um Step.

    Retorna uma *classe* (não uma instância). O Step dummy:
    - expõe `id`, `kind` e `depends_on`
    - registra o artefato `<id>.ok` no RunContext
    - sempre retorna StepResult com status SUCCESS

    Usado por:
        - Testes de planner (ordenação, dependências)
        - Testes de engine (execução, status, transições)
    """
    from hierarchy_flow.core.pipeline.types import StepKind, StepStatus, StepResult

    class _DummyStep:
        def __init__(
            self,
            step_id: str = "ingest.load",
            kind: StepKind = StepKind.INGEST,
            depends_on=None,
        ):
            self.id = step_id
            self.kind = kind
            self.depends_on = depends_on or []

        def run(self, ctx):
            ctx.set_artifact(f"{self.id}.ok", True)
            return StepResult(
                step_id=self.id,
                kind=self.kind,
                status=StepStatus.SUCCESS,
                summary="dummy ok",
                artifacts={"ok": f"{self.id}.ok"},
                payload={"note": "dummy"},
            )

    return _DummyStep


# =====================================================
# Hierarquias de exemplo
# =====================================================

@pytest.fixture
def abcd_records() -> list:
    """
    Hierarquia canônica A/B/C/D:

        A
        ├── B
        │   └── D
        └── C
    """
    return [
        {"EmployeeId": "A", "ParentId": None, "Name": "Ana"},
        {"EmployeeId": "B", "ParentId": "A", "Name": "Bruno"},
        {"EmployeeId": "C", "ParentId": "A", "Name": "Carla"},
        {"EmployeeId": "D", "ParentId": "B", "Name": "Davi"},
    ]


@pytest.fixture
def org_chart_records() -> list:
    """
    Organograma com atributos do nó e do pai, para exercitar o mapping
    `ParentName=Name` e a widening de nullability em campos não mapeados.
    """
    return [
        {"EmployeeId": "E1", "ParentId": "", "Name": "Alice", "ParentName": "", "Title": "CEO"},
        {"EmployeeId": "E2", "ParentId": "E1", "Name": "Bob", "ParentName": "Alice", "Title": "CTO"},
        {"EmployeeId": "E3", "ParentId": "E1", "Name": "Carol", "ParentName": "Alice", "Title": "CFO"},
        {"EmployeeId": "E4", "ParentId": "E2", "Name": "Dan", "ParentName": "Bob", "Title": "Engineer"},
        {"EmployeeId": "E5", "ParentId": "E2", "Name": "Eve", "ParentName": "Bob", "Title": "Engineer"},
    ]


@pytest.fixture
def flatten_options_factory():
    """Factory de FlattenOptions com os campos do organograma de exemplo."""
    from hierarchy_flow.core.config.options import FlattenOptions

    def _make(**overrides):
        params = {"parent_field": "ParentId", "child_field": "EmployeeId"}
        params.update(overrides)
        return FlattenOptions(**params)

    return _make
