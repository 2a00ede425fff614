# src/hierarchy_flow/core/pipeline/__init__.py
"""
# Pipeline Core — Hierarchy Flow

Este pacote define os **contratos canônicos** que compõem um pipeline
no Hierarchy Flow, modelado como um **DAG explícito de Steps**.

## Componentes

- **types**: `StepStatus`, `StepKind`, `StepResult`
- **step**: `Step` (Protocol)
- **context**: `RunContext` (artefatos, logs, warnings)
- **registry**: `StepRegistry` (unicidade de `step.id`)

## Invariantes

- Cada Step possui um `step_id` único
- Comunicação entre Steps ocorre **apenas via RunContext**
"""

from .context import MissingArtifactError, RunContext  # noqa: F401
from .registry import DuplicateStepIdError, StepRegistry  # noqa: F401
from .step import Step  # noqa: F401
from .types import StepKind, StepResult, StepStatus  # noqa: F401
