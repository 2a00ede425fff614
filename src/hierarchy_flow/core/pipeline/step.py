"""
Contrato canônico de Step do Hierarchy Flow.

Um Step é a menor unidade executável do pipeline: ler um dataset,
achatar uma hierarquia, exportar um arquivo. Cada Step interage apenas
via RunContext e produz um StepResult imutável.

Princípios fundamentais:
    - Steps não conhecem o Engine nem o planner
    - Steps não controlam ordem de execução
    - Conformidade é garantida por duck typing (@runtime_checkable)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable, List

from .context import RunContext
from .types import StepKind, StepResult


@runtime_checkable
class Step(Protocol):
    """
    Contrato canônico de um Step.

    Atributos obrigatórios:
        - id: identificador único e estável do Step
        - kind: classificação semântica do Step (`StepKind`)
        - depends_on: lista de `step_id` dos Steps dos quais depende

    Invariantes:
        - `run` é executado no máximo uma vez por execução
        - O retorno de `run` é sempre um `StepResult`
    """
    id: str
    kind: StepKind
    depends_on: List[str]

    def run(self, ctx: RunContext) -> StepResult:
        """Executa a etapa uma única vez usando exclusivamente o RunContext."""
        ...
