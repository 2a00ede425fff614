"""
Extração de nós a partir de registros brutos.

Este módulo adapta cada registro de entrada (um dict produzido pelo
ingest) em um `Node` imutável: identificador (campo filho), pai (campo
pai) e o mapa ordenado de atributos do registro.

Política de nulos (v1):
    - `None`, valores ausentes do pandas (NaN, NA, NaT) e strings em branco
      (célula vazia em CSV) significam "sem pai"
    - o mesmo critério vale para o campo filho, onde nulo é erro

Invariantes:
    - O registro de entrada nunca é mutado
    - `Node.parent is None` se e somente se o registro não declara pai

Limites explícitos:
    - Não valida unicidade de ids nem existência de pais (GraphBuilder)
    - Não normaliza valores (ids são comparados exatamente como lidos)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional

import pandas as pd

from hierarchy_flow.core.exceptions import InvalidNodeRecordError


def is_null(value: Any) -> bool:
    """Nulo para fins de hierarquia: None, missing do pandas ou string em branco."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if pd.api.types.is_scalar(value):
        return bool(pd.isna(value))
    return False


@dataclass(frozen=True)
class Node:
    """Uma entidade da hierarquia, identificada pelo valor do campo filho."""

    id: Any
    parent: Optional[Any]
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    @property
    def is_root(self) -> bool:
        return self.parent is None


def extract_node(
    record: Mapping[str, Any],
    *,
    parent_field: str,
    child_field: str,
    position: Optional[int] = None,
) -> Node:
    """
    Converte um registro bruto em `Node`.

    Raises:
        InvalidNodeRecordError: se o campo filho estiver ausente ou nulo.
    """
    node_id = record.get(child_field)
    if is_null(node_id):
        raise InvalidNodeRecordError(child_field=child_field, position=position)

    parent = record.get(parent_field)
    return Node(
        id=node_id,
        parent=None if is_null(parent) else parent,
        attributes=record,
    )


def extract_nodes(
    records: Iterable[Mapping[str, Any]],
    *,
    parent_field: str,
    child_field: str,
) -> Iterator[Node]:
    for position, record in enumerate(records):
        yield extract_node(record, parent_field=parent_field, child_field=child_field, position=position)
