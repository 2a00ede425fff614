"""
Travessia e anotação de nível/top/bottom.

A travessia é em largura (BFS) a partir da raiz, visitando filhos na
ordem de primeira aparição. Isso garante que:
    - o nível de um nó é calculado depois do nível de seu pai
    - nós são visitados em ordem não decrescente de profundidade, então o
      limite `max_depth` é aplicado na primeira violação, sem revisitas
    - a ordem resultante é determinística para a mesma entrada

Invariantes:
    - level(raiz) = 0 e level(filho) = level(pai) + 1
    - top ⇔ nó é a raiz; bottom ⇔ nó não possui filhos
    - uma hierarquia com apenas a raiz tem top = bottom = True
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Deque, Dict, Mapping, Tuple

from hierarchy_flow.core.exceptions import MaxDepthExceededError

from .graph import ValidatedGraph


@dataclass(frozen=True)
class LevelInfo:
    level: int
    top: bool
    bottom: bool


def annotate(graph: ValidatedGraph, max_depth: int) -> Mapping[Any, LevelInfo]:
    """
    Anota cada nó do grafo com nível e flags, em ordem BFS.

    Returns:
        Mapping somente leitura id → LevelInfo; a ordem de iteração é a
        ordem da travessia (raiz primeiro).

    Raises:
        MaxDepthExceededError: no primeiro nó com nível > max_depth.
    """
    annotations: Dict[Any, LevelInfo] = {}
    queue: Deque[Tuple[Any, int]] = deque([(graph.root_id, 0)])

    while queue:
        node_id, level = queue.popleft()
        if level > max_depth:
            raise MaxDepthExceededError(node_id, level, max_depth=max_depth)

        children = graph.children_of(node_id)
        annotations[node_id] = LevelInfo(
            level=level,
            top=graph.node(node_id).is_root,
            bottom=not children,
        )
        queue.extend((child_id, level + 1) for child_id in children)

    return MappingProxyType(annotations)
