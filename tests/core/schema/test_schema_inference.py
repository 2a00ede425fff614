# tests/core/schema/test_schema_inference.py
"""
Testes da inferência de schema via pandas.

A inferência usa `DataFrame.convert_dtypes()`; a nulabilidade de cada
campo reflete a presença de valores ausentes na amostra.
"""

import pandas as pd

from hierarchy_flow.core.schema import FieldType, infer_schema, infer_schema_from_dataframe


def test_infer_schema_types_and_nullability():
    rows = [
        {"EmployeeId": "A", "ParentId": None, "Age": 40, "Salary": 10.5, "Active": True},
        {"EmployeeId": "B", "ParentId": "A", "Age": 30, "Salary": 8.0, "Active": False},
    ]

    schema = infer_schema(rows)

    assert schema.field_names() == ["EmployeeId", "ParentId", "Age", "Salary", "Active"]
    assert schema.get("EmployeeId").type == FieldType.STRING
    assert schema.get("EmployeeId").nullable is False
    assert schema.get("ParentId").nullable is True
    assert schema.get("Age").type == FieldType.LONG
    assert schema.get("Salary").type == FieldType.DOUBLE
    assert schema.get("Active").type == FieldType.BOOLEAN


def test_infer_schema_empty_rows():
    assert len(infer_schema([])) == 0


def test_infer_schema_from_dataframe_timestamp():
    df = pd.DataFrame({"HiredAt": pd.to_datetime(["2024-01-01", None])})

    schema = infer_schema_from_dataframe(df)

    assert schema.get("HiredAt").type == FieldType.TIMESTAMP
    assert schema.get("HiredAt").nullable is True
