# src/hierarchy_flow/core/engine/__init__.py
"""
Engine do Hierarchy Flow.

Componentes principais:
    - planner → ordenação topológica determinística e validações estruturais
    - engine  → execução coordenada de Steps com políticas explícitas

Invariantes:
    - Steps só são executados após suas dependências
    - Cada Step é executado no máximo uma vez por run
    - O resultado da execução reflete explicitamente o estado de cada Step
"""

from .engine import Engine, RunResult  # noqa: F401
from .planner import DependencyCycleError, UnknownDependencyError, plan_execution  # noqa: F401
