"""
Registro estrutural de Steps do pipeline.

O `StepRegistry` valida cada Step no momento do registro: conformidade
com o Protocol `Step`, id não vazio e sem duplicidade. A ordem de
registro é preservada e entregue ao planner, que a usa apenas como
entrada (a ordem final é decidida pelas dependências).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .step import Step


class DuplicateStepIdError(ValueError):
    """Dois Steps registrados com o mesmo `step.id` (erro fatal de configuração)."""


@dataclass
class StepRegistry:
    """Registro canônico de Steps para validação estrutural pré-execução."""

    _steps: Dict[str, Step] = field(default_factory=dict, init=False, repr=False)

    def add(self, step: Step) -> "StepRegistry":
        if not isinstance(step, Step):
            raise TypeError(f"Object does not implement the Step protocol: {type(step).__name__}")

        step_id = step.id
        if not isinstance(step_id, str) or not step_id.strip():
            raise ValueError("step.id must be a non-empty string")
        if step_id in self._steps:
            raise DuplicateStepIdError(f"Duplicate step id: {step_id}")

        self._steps[step_id] = step
        return self

    def extend(self, steps: Iterable[Step]) -> "StepRegistry":
        for step in steps:
            self.add(step)
        return self

    def get(self, step_id: str) -> Step:
        return self._steps[step_id]

    def ids(self) -> List[str]:
        return list(self._steps)

    def list(self) -> List[Step]:
        return list(self._steps.values())

    def __contains__(self, step_id: object) -> bool:
        return step_id in self._steps

    def __len__(self) -> int:
        return len(self._steps)
