# tests/core/hierarchy/test_traversal.py
"""
Testes do Annotator (`annotate`): nível, top e bottom por nó, em BFS.

Cobre os limites de profundidade: o nó mais profundo em `max_depth`
passa; em `max_depth + 1` falha nomeando o nó e o nível alcançado.
"""

import pytest

from hierarchy_flow.core.exceptions import MaxDepthExceededError
from hierarchy_flow.core.hierarchy.graph import build_graph
from hierarchy_flow.core.hierarchy.node import Node
from hierarchy_flow.core.hierarchy.traversal import LevelInfo, annotate


def _chain(length):
    """N0 ← N1 ← ... ← N{length-1}; o nó mais profundo fica em level length-1."""
    nodes = [Node(id="N0", parent=None)]
    nodes += [Node(id=f"N{i}", parent=f"N{i - 1}") for i in range(1, length)]
    return build_graph(nodes)


def test_abcd_levels_and_flags():
    graph = build_graph([
        Node(id="A", parent=None),
        Node(id="B", parent="A"),
        Node(id="C", parent="A"),
        Node(id="D", parent="B"),
    ])

    info = annotate(graph, 50)

    assert list(info) == ["A", "B", "C", "D"]
    assert info["A"] == LevelInfo(level=0, top=True, bottom=False)
    assert info["B"] == LevelInfo(level=1, top=False, bottom=False)
    assert info["C"] == LevelInfo(level=1, top=False, bottom=True)
    assert info["D"] == LevelInfo(level=2, top=False, bottom=True)


def test_single_node_is_top_and_bottom():
    info = annotate(build_graph([Node(id="A", parent=None)]), 1)
    assert info["A"] == LevelInfo(level=0, top=True, bottom=True)


def test_deepest_level_equal_to_max_depth_succeeds():
    info = annotate(_chain(6), 5)
    assert info["N5"].level == 5


def test_deepest_level_above_max_depth_fails_naming_node():
    with pytest.raises(MaxDepthExceededError) as exc:
        annotate(_chain(7), 5)

    assert exc.value.node_id == "N6"
    assert exc.value.level == 6
    assert exc.value.details["max_depth"] == 5


def test_bfs_order_is_non_decreasing_in_level():
    graph = build_graph([
        Node(id="R", parent=None),
        Node(id="X", parent="R"),
        Node(id="X1", parent="X"),
        Node(id="Y", parent="R"),
        Node(id="X1a", parent="X1"),
        Node(id="Y1", parent="Y"),
    ])
    info = annotate(graph, 50)

    levels = [i.level for i in info.values()]
    assert levels == sorted(levels)
    assert list(info) == ["R", "X", "Y", "X1", "Y1", "X1a"]


def test_level_is_parent_level_plus_one():
    graph = _chain(4)
    info = annotate(graph, 50)
    for node_id, node in graph.nodes.items():
        if node.parent is not None:
            assert info[node_id].level == info[node.parent].level + 1


def test_annotations_are_read_only():
    info = annotate(_chain(2), 5)
    with pytest.raises(TypeError):
        info["N0"] = LevelInfo(level=9, top=False, bottom=False)  # type: ignore[index]
