"""
Hierarchy Flow — Canonical Exceptions (v1)

Este módulo define exceções tipadas internas do Hierarchy Flow.

Objetivo:
- Permitir que o engine de flattening levante exceções semânticas tipadas
- Facilitar o mapeamento determinístico para ErrorPayload
- Identificar sempre o(s) nó(s) ofensor(es) em `details`

Regras:
- Não contém lógica de validação, apenas a forma do erro.
- Exceções carregam apenas dados estruturados (serializáveis).
- Toda violação estrutural ou de profundidade é fatal para o run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Sequence

from .errors import (
    ENGINE_EXECUTION_ERROR,
    HIERARCHY_CONFLICTING_PARENT,
    HIERARCHY_CYCLE_DETECTED,
    HIERARCHY_DANGLING_PARENT,
    HIERARCHY_INVALID_NODE_RECORD,
    HIERARCHY_MAX_DEPTH_EXCEEDED,
    HIERARCHY_MISSING_ROOT,
    HIERARCHY_MULTIPLE_ROOTS,
    ErrorPayload,
)


@dataclass(frozen=True)
class FlowException(Exception):
    """Base class para exceções internas do Hierarchy Flow.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    code: ClassVar[str] = ENGINE_EXECUTION_ERROR

    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message

    def to_payload(self) -> ErrorPayload:
        return ErrorPayload(
            type=self.code,
            message=self.message,
            details=dict(self.details),
            hint=self.hint,
        )


# ---------------------------------------------------------------------------
# Estrutura da hierarquia
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HierarchyError(FlowException):
    """Violação estrutural ou de profundidade da hierarquia (fatal para o run)."""


class InvalidNodeRecordError(HierarchyError):
    """Registro de entrada sem valor no campo filho."""

    code = HIERARCHY_INVALID_NODE_RECORD

    def __init__(self, *, child_field: str, position: Optional[int] = None) -> None:
        where = f" at position {position}" if position is not None else ""
        super().__init__(
            message=f"Record{where} has no value for child field '{child_field}'",
            details={"child_field": child_field, "position": position},
            hint="Todo registro precisa de um identificador não nulo no campo filho.",
        )


class ConflictingParentError(HierarchyError):
    """Mesmo nó declarado com dois pais diferentes (multi-parent)."""

    code = HIERARCHY_CONFLICTING_PARENT

    def __init__(self, node_id: Any, *, existing_parent: Any = None, conflicting_parent: Any = None) -> None:
        super().__init__(
            message=f"Node '{node_id}' is declared with conflicting parents "
            f"'{existing_parent}' and '{conflicting_parent}'",
            details={
                "node_id": node_id,
                "existing_parent": existing_parent,
                "conflicting_parent": conflicting_parent,
            },
            hint="Cada nó deve ter exatamente um pai. Remova o registro duplicado ou corrija o campo pai.",
        )

    @property
    def node_id(self) -> Any:
        return self.details["node_id"]


class MissingRootError(HierarchyError):
    """Nenhum nó sem pai no conjunto de entrada."""

    code = HIERARCHY_MISSING_ROOT

    def __init__(self) -> None:
        super().__init__(
            message="Hierarchy has no root node (no record with a null parent)",
            details={},
            hint="Os dados devem conter exatamente um nó raiz com campo pai nulo.",
        )


class MultipleRootsError(HierarchyError):
    """Mais de um nó sem pai no conjunto de entrada."""

    code = HIERARCHY_MULTIPLE_ROOTS

    def __init__(self, root_ids: Sequence[Any]) -> None:
        ids = list(root_ids)
        super().__init__(
            message=f"Hierarchy has {len(ids)} root nodes: {ids}",
            details={"root_ids": ids},
            hint="Os dados devem conter exatamente um nó raiz com campo pai nulo.",
        )

    @property
    def root_ids(self) -> List[Any]:
        return list(self.details["root_ids"])


class DanglingParentError(HierarchyError):
    """Nó referencia um pai que não existe no conjunto de nós."""

    code = HIERARCHY_DANGLING_PARENT

    def __init__(self, child_id: Any, parent_id: Any) -> None:
        super().__init__(
            message=f"Node '{child_id}' references missing parent '{parent_id}'",
            details={"child_id": child_id, "parent_id": parent_id},
            hint="Inclua o registro do pai ausente ou corrija o campo pai do nó.",
        )

    @property
    def child_id(self) -> Any:
        return self.details["child_id"]

    @property
    def parent_id(self) -> Any:
        return self.details["parent_id"]


class CycleDetectedError(HierarchyError):
    """Um nó é ancestral transitivo de si mesmo."""

    code = HIERARCHY_CYCLE_DETECTED

    def __init__(self, cycle_path: Sequence[Any]) -> None:
        path = list(cycle_path)
        super().__init__(
            message=f"Cycle detected in hierarchy: {' -> '.join(str(n) for n in path + path[:1])}",
            details={"cycle": path},
            hint="Quebre o ciclo corrigindo o campo pai de um dos nós listados.",
        )

    @property
    def cycle_path(self) -> List[Any]:
        return list(self.details["cycle"])


# ---------------------------------------------------------------------------
# Profundidade
# ---------------------------------------------------------------------------

class MaxDepthExceededError(HierarchyError):
    """Nó alcançado em nível maior que a profundidade máxima configurada."""

    code = HIERARCHY_MAX_DEPTH_EXCEEDED

    def __init__(self, node_id: Any, level: int, *, max_depth: Optional[int] = None) -> None:
        super().__init__(
            message=f"Node '{node_id}' reached level {level}, deeper than max depth {max_depth}",
            details={"node_id": node_id, "level": level, "max_depth": max_depth},
            hint="Aumente max_depth na configuração ou revise a hierarquia de entrada.",
        )

    @property
    def node_id(self) -> Any:
        return self.details["node_id"]

    @property
    def level(self) -> int:
        return int(self.details["level"])
