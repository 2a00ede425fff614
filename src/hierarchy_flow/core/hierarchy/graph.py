"""
Construção e validação estrutural do grafo da hierarquia.

Este módulo consome uma sequência de `Node`s e produz um `ValidatedGraph`
imutável, garantindo que a entrada forme uma árvore bem formada antes de
qualquer travessia.

Validações (nesta ordem; a primeira violação é reportada):
    1. multi-parent   → ConflictingParentError (durante a inserção)
    2. raiz ausente   → MissingRootError
    3. raízes demais  → MultipleRootsError
    4. pai inexistente → DanglingParentError
    5. ciclo          → CycleDetectedError

Decisões arquiteturais:
    - Um registro repetido com o mesmo id e o mesmo pai é duplicata:
      a primeira ocorrência vence e a contagem é exposta no grafo
    - A adjacência `pai → filhos` preserva a ordem de primeira aparição,
      o que torna a travessia determinística
    - A detecção de ciclo usa subida por pais com coloração global
      (não visitado / no caminho / resolvido): cada nó é subido uma vez

Invariantes:
    - Um ValidatedGraph possui exatamente uma raiz
    - Todo pai referenciado existe no grafo
    - Nenhum nó é ancestral transitivo de si mesmo

Limites explícitos:
    - Não calcula níveis nem flags (Traversal)
    - Não conhece schema, mapping ou formato de saída
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from hierarchy_flow.core.exceptions import (
    ConflictingParentError,
    CycleDetectedError,
    DanglingParentError,
    MissingRootError,
    MultipleRootsError,
)

from .node import Node


_ON_PATH = 1
_RESOLVED = 2


@dataclass(frozen=True)
class ValidatedGraph:
    """
    Grafo de hierarquia validado e imutável.

    Campos:
    - root_id: id do único nó sem pai
    - nodes: id → Node, em ordem de primeira aparição
    - children: id → ids dos filhos, em ordem de primeira aparição
    - duplicates: quantidade de registros duplicados descartados
    """

    root_id: Any
    nodes: Mapping[Any, Node]
    children: Mapping[Any, Tuple[Any, ...]]
    duplicates: int = 0

    def __len__(self) -> int:
        return len(self.nodes)

    def node(self, node_id: Any) -> Node:
        return self.nodes[node_id]

    def children_of(self, node_id: Any) -> Tuple[Any, ...]:
        return self.children.get(node_id, ())

    def is_leaf(self, node_id: Any) -> bool:
        return not self.children_of(node_id)


@dataclass
class GraphBuilder:
    """
    Construtor incremental do grafo da hierarquia.

    O builder é dono exclusivo do estado em memória durante um run;
    após `build()` o resultado é um ValidatedGraph imutável e o builder
    pode ser descartado.
    """

    _nodes: Dict[Any, Node] = field(default_factory=dict, init=False, repr=False)
    _duplicates: int = field(default=0, init=False, repr=False)

    def add(self, node: Node) -> None:
        existing = self._nodes.get(node.id)
        if existing is None:
            self._nodes[node.id] = node
            return

        if existing.parent != node.parent:
            raise ConflictingParentError(
                node.id,
                existing_parent=existing.parent,
                conflicting_parent=node.parent,
            )
        self._duplicates += 1

    def add_all(self, nodes: Iterable[Node]) -> "GraphBuilder":
        for node in nodes:
            self.add(node)
        return self

    def build(self) -> ValidatedGraph:
        roots = [nid for nid, n in self._nodes.items() if n.is_root]
        if not roots:
            raise MissingRootError()
        if len(roots) > 1:
            raise MultipleRootsError(roots)

        for nid, n in self._nodes.items():
            if n.parent is not None and n.parent not in self._nodes:
                raise DanglingParentError(nid, n.parent)

        self._check_acyclic()

        children: Dict[Any, List[Any]] = {}
        for nid, n in self._nodes.items():
            if n.parent is not None:
                children.setdefault(n.parent, []).append(nid)

        return ValidatedGraph(
            root_id=roots[0],
            nodes=MappingProxyType(dict(self._nodes)),
            children=MappingProxyType({k: tuple(v) for k, v in children.items()}),
            duplicates=self._duplicates,
        )

    def _check_acyclic(self) -> None:
        state: Dict[Any, int] = {}
        for start in self._nodes:
            if state.get(start) == _RESOLVED:
                continue

            path: List[Any] = []
            current = start
            while current is not None and state.get(current) != _RESOLVED:
                if state.get(current) == _ON_PATH:
                    raise CycleDetectedError(path[path.index(current):])
                state[current] = _ON_PATH
                path.append(current)
                current = self._nodes[current].parent

            for nid in path:
                state[nid] = _RESOLVED


def build_graph(nodes: Iterable[Node]) -> ValidatedGraph:
    """Constrói e valida o grafo em uma única chamada."""
    return GraphBuilder().add_all(nodes).build()
