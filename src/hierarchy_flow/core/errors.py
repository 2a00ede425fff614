"""
Hierarchy Flow — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do Hierarchy Flow.
Erros são considerados artefatos de domínio e fazem parte do contrato operacional
do sistema, devendo ser:

- explícitos
- serializáveis
- rastreáveis
- acionáveis

Nenhuma decisão implícita é permitida.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro do Hierarchy Flow.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico (ids ofensores)
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Estrutura da hierarquia (GraphBuilder)
HIERARCHY_MISSING_ROOT = "HIERARCHY_MISSING_ROOT"
HIERARCHY_MULTIPLE_ROOTS = "HIERARCHY_MULTIPLE_ROOTS"
HIERARCHY_DANGLING_PARENT = "HIERARCHY_DANGLING_PARENT"
HIERARCHY_CONFLICTING_PARENT = "HIERARCHY_CONFLICTING_PARENT"
HIERARCHY_CYCLE_DETECTED = "HIERARCHY_CYCLE_DETECTED"
HIERARCHY_INVALID_NODE_RECORD = "HIERARCHY_INVALID_NODE_RECORD"

# Profundidade (Traversal)
HIERARCHY_MAX_DEPTH_EXCEEDED = "HIERARCHY_MAX_DEPTH_EXCEEDED"

# Configuração
CONFIG_INVALID_OPTIONS = "CONFIG_INVALID_OPTIONS"

# Engine / Execução
ENGINE_EXECUTION_ERROR = "ENGINE_EXECUTION_ERROR"
ENGINE_CONFIGURATION_ERROR = "ENGINE_CONFIGURATION_ERROR"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def invalid_options(
    *,
    failures: list,
    step: Optional[str] = None,
    hint: str = "Corrija as opções indicadas em steps.<step_id> antes de reexecutar o pipeline.",
) -> ErrorPayload:
    return ErrorPayload(
        type=CONFIG_INVALID_OPTIONS,
        message="Opções de configuração inválidas",
        details={
            "failures": failures,
            "step": step,
        },
        hint=hint,
    )


def engine_execution_error(
    *,
    step: Optional[str] = None,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
    hint: str = "Verifique os eventos do run para diagnosticar a falha. Nenhum fallback é aplicado automaticamente.",
) -> ErrorPayload:
    return ErrorPayload(
        type=ENGINE_EXECUTION_ERROR,
        message="Falha inesperada durante a execução do pipeline",
        details={
            "step": step,
            "exc_type": exc_type,
            "exc_message": exc_message,
        },
        hint=hint,
    )


def engine_configuration_error(
    *,
    message: str = "Configuração inválida para execução do pipeline",
    details: Optional[Dict[str, Any]] = None,
    hint: str = "Revise a configuração do run/steps e declare explicitamente as opções necessárias antes de reexecutar.",
) -> ErrorPayload:
    return ErrorPayload(
        type=ENGINE_CONFIGURATION_ERROR,
        message=message,
        details=details or {},
        hint=hint,
    )
