# src/hierarchy_flow/core/engine/planner.py
"""
Planejador de execução do pipeline (DAG de Steps).

Produz uma ordem topológica determinística: Kahn com um heap de Steps
prontos, de modo que empates são resolvidos pela ordem lexicográfica de
`step.id`. A mesma definição de pipeline gera sempre o mesmo plano.

Falhas de planejamento são fatais e nenhum plano parcial é devolvido:
    - id vazio ou duplicado → ValueError
    - dependência não registrada → UnknownDependencyError
    - ciclo (inclui auto-dependência) → DependencyCycleError

Este planner trata o grafo de *Steps*. Ciclos no grafo de *nós* de uma
hierarquia de dados são detectados em `core.hierarchy.graph`.
"""

from __future__ import annotations

import heapq
from typing import Dict, Iterable, List, Sequence

from hierarchy_flow.core.pipeline.step import Step


class UnknownDependencyError(ValueError):
    """Um Step declarou em `depends_on` um `step.id` que não foi registrado."""

    def __init__(self, step_id: str, dependency: str) -> None:
        super().__init__(f"Step '{step_id}' depends on unknown step '{dependency}'")
        self.step_id = step_id
        self.dependency = dependency


class DependencyCycleError(ValueError):
    """As dependências declaradas entre Steps não formam um DAG."""

    def __init__(self, step_ids: Sequence[str]) -> None:
        ids = sorted(step_ids)
        super().__init__(f"Cycle detected in step dependency graph: {', '.join(ids)}")
        self.step_ids = ids


def _index_steps(steps: Iterable[Step]) -> Dict[str, Step]:
    by_id: Dict[str, Step] = {}
    for s in steps:
        sid = getattr(s, "id", None)
        if not isinstance(sid, str) or not sid.strip():
            raise ValueError("step.id must be a non-empty string")
        if sid in by_id:
            raise ValueError(f"Duplicate step id: {sid}")
        by_id[sid] = s
    return by_id


def plan_execution(steps: Iterable[Step]) -> List[Step]:
    """Retorna os Steps em ordem topológica determinística."""
    by_id = _index_steps(steps)

    pending: Dict[str, int] = {}
    dependents: Dict[str, List[str]] = {sid: [] for sid in by_id}
    for sid, s in by_id.items():
        deps = set(getattr(s, "depends_on", None) or [])
        for dep in sorted(deps):
            if dep not in by_id:
                raise UnknownDependencyError(sid, dep)
            dependents[dep].append(sid)
        pending[sid] = len(deps)

    ready = [sid for sid, n in pending.items() if n == 0]
    heapq.heapify(ready)

    order: List[Step] = []
    while ready:
        sid = heapq.heappop(ready)
        order.append(by_id[sid])
        for child in dependents[sid]:
            pending[child] -= 1
            if pending[child] == 0:
                heapq.heappush(ready, child)

    if len(order) != len(by_id):
        raise DependencyCycleError([sid for sid, n in pending.items() if n > 0])

    return order
