# tests/core/hierarchy/test_node_extraction.py
"""
Testes da extração de nós (`extract_node` / `extract_nodes`).

Os testes asseguram que:
- o campo filho vira `Node.id` e o campo pai vira `Node.parent`
- None, strings em branco e missing do pandas significam "sem pai"
- campo filho nulo é erro tipado, identificando a posição do registro
- o registro de entrada nunca é mutado
"""

import math

import pandas as pd
import pytest

from hierarchy_flow.core.exceptions import InvalidNodeRecordError
from hierarchy_flow.core.hierarchy.node import Node, extract_node, extract_nodes, is_null


@pytest.mark.parametrize("value", [None, "", "   ", math.nan, pd.NA, pd.NaT])
def test_is_null_accepts_null_markers(value):
    assert is_null(value) is True


@pytest.mark.parametrize("value", ["A", 0, False, "0"])
def test_is_null_rejects_real_values(value):
    assert is_null(value) is False


def test_extract_node_reads_child_and_parent():
    record = {"EmployeeId": "B", "ParentId": "A", "Name": "Bruno"}

    node = extract_node(record, parent_field="ParentId", child_field="EmployeeId")

    assert node.id == "B"
    assert node.parent == "A"
    assert not node.is_root
    assert dict(node.attributes) == record


@pytest.mark.parametrize("parent", [None, "", float("nan")])
def test_extract_node_blank_parent_is_root(parent):
    node = extract_node(
        {"EmployeeId": "A", "ParentId": parent},
        parent_field="ParentId",
        child_field="EmployeeId",
    )
    assert node.parent is None
    assert node.is_root


def test_extract_node_missing_parent_key_is_root():
    node = extract_node({"EmployeeId": "A"}, parent_field="ParentId", child_field="EmployeeId")
    assert node.is_root


def test_extract_node_null_child_is_invalid_record():
    with pytest.raises(InvalidNodeRecordError) as exc:
        extract_node(
            {"EmployeeId": "  ", "ParentId": "A"},
            parent_field="ParentId",
            child_field="EmployeeId",
            position=3,
        )

    assert exc.value.details == {"child_field": "EmployeeId", "position": 3}
    assert exc.value.to_payload().type == "HIERARCHY_INVALID_NODE_RECORD"


def test_extract_node_does_not_mutate_record_and_attributes_are_read_only():
    record = {"EmployeeId": "A", "ParentId": None}
    node = extract_node(record, parent_field="ParentId", child_field="EmployeeId")

    with pytest.raises(TypeError):
        node.attributes["EmployeeId"] = "Z"  # type: ignore[index]

    record["EmployeeId"] = "Z"
    assert node.attributes["EmployeeId"] == "A"


def test_extract_nodes_is_lazy_and_reports_position():
    records = [
        {"EmployeeId": "A", "ParentId": None},
        {"EmployeeId": None, "ParentId": "A"},
    ]
    it = extract_nodes(records, parent_field="ParentId", child_field="EmployeeId")

    first = next(it)
    assert isinstance(first, Node)
    assert first.id == "A"

    with pytest.raises(InvalidNodeRecordError) as exc:
        next(it)
    assert exc.value.details["position"] == 1
