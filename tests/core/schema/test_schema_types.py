# tests/core/schema/test_schema_types.py
"""
Testes dos tipos de schema (FieldType, SchemaField, RecordSchema).

Os testes asseguram que:
- tipos são parseados a partir de strings (case-insensitive)
- nomes duplicados são rejeitados
- schemas declarados em config são materializados com validação explícita
"""

import pytest

from hierarchy_flow.core.schema import (
    FieldType,
    RecordSchema,
    SchemaField,
    SchemaValidationError,
    UnsupportedFieldTypeError,
)


def test_field_type_parse():
    assert FieldType.parse("STRING") == FieldType.STRING
    assert FieldType.parse(" long ") == FieldType.LONG
    assert FieldType.parse(FieldType.INT) == FieldType.INT


@pytest.mark.parametrize("value", ["decimal", "", None, 3])
def test_field_type_parse_rejects_unknown(value):
    with pytest.raises(UnsupportedFieldTypeError):
        FieldType.parse(value)


def test_as_nullable_returns_new_field():
    f = SchemaField("Title", FieldType.STRING)
    widened = f.as_nullable()

    assert widened.nullable is True
    assert f.nullable is False
    assert widened.as_nullable() is widened


def test_record_schema_access():
    schema = RecordSchema.of([
        SchemaField("EmployeeId", FieldType.STRING),
        SchemaField("ParentId", FieldType.STRING, nullable=True),
    ])

    assert len(schema) == 2
    assert "ParentId" in schema
    assert "Missing" not in schema
    assert schema.field_names() == ["EmployeeId", "ParentId"]
    assert schema.get("Missing") is None
    assert schema.to_dict()[1] == {"name": "ParentId", "type": "string", "nullable": True}


def test_record_schema_rejects_duplicate_names():
    with pytest.raises(SchemaValidationError):
        RecordSchema.of([SchemaField("a", FieldType.INT), SchemaField("a", FieldType.STRING)])


def test_from_config():
    schema = RecordSchema.from_config([
        {"name": "EmployeeId", "type": "string"},
        {"name": "ParentId", "type": "string", "nullable": True},
        {"name": "Salary", "type": "double"},
    ])

    assert schema.get("Salary").type == FieldType.DOUBLE
    assert schema.get("ParentId").nullable is True
    assert schema.get("EmployeeId").nullable is False


@pytest.mark.parametrize(
    "data",
    [
        "EmployeeId:string",
        [{"type": "string"}],
        [{"name": "a", "type": "string", "nullable": "yes"}],
        ["a"],
    ],
)
def test_from_config_rejects_malformed(data):
    with pytest.raises(SchemaValidationError):
        RecordSchema.from_config(data)
