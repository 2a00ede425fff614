"""
Schema canônico de registros — Hierarchy Flow v1.

Este módulo define a representação tipada e ordenada de um schema de
registro, usada tanto para o schema de entrada (declarado ou inferido)
quanto para o schema de saída derivado pelo flattening.

Componentes principais:
    - FieldType    → enum de tipos primitivos suportados
    - SchemaField  → campo nomeado, tipado, com nulabilidade explícita
    - RecordSchema → sequência ordenada e imutável de campos

Princípios fundamentais:
    - A ordem dos campos é parte da identidade do schema
    - Nulabilidade é sempre explícita, nunca inferida em tempo de escrita
    - Estruturas são imutáveis (frozen) e serializáveis

Invariantes:
    - Nomes de campos são únicos dentro de um RecordSchema
    - `to_dict()` produz sempre a mesma estrutura para o mesmo schema

Limites explícitos:
    - Não valida valores de linhas contra o schema
    - Não conhece a semântica de hierarquia (pai, filho, mapping)

Esta implementação evita dependências externas (ex.: Pydantic) para manter
o core leve, seguindo o mesmo padrão do contrato interno.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from .errors import SchemaValidationError, UnsupportedFieldTypeError


class FieldType(str, Enum):
    """
    Tipos primitivos de campo suportados (v1).

    Os valores são strings para facilitar:
        - declaração em YAML/JSON
        - serialização do schema derivado
    """
    BOOLEAN = "boolean"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    BYTES = "bytes"
    TIMESTAMP = "timestamp"

    @classmethod
    def parse(cls, value: Any) -> "FieldType":
        if isinstance(value, FieldType):
            return value
        if not isinstance(value, str) or not value.strip():
            raise UnsupportedFieldTypeError(f"field type must be a non-empty string, got: {value!r}")
        try:
            return cls(value.strip().lower())
        except ValueError as e:
            allowed = sorted(t.value for t in cls)
            raise UnsupportedFieldTypeError(f"unsupported field type '{value}', expected one of {allowed}") from e


@dataclass(frozen=True)
class SchemaField:
    """Campo nomeado e tipado de um RecordSchema."""

    name: str
    type: FieldType
    nullable: bool = False

    def as_nullable(self) -> "SchemaField":
        if self.nullable:
            return self
        return replace(self, nullable=True)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type.value, "nullable": self.nullable}


@dataclass(frozen=True)
class RecordSchema:
    """
    Schema ordenado e imutável de um registro.

    Decisões arquiteturais:
        - Campos são armazenados como tupla (ordem estável, imutável)
        - Nomes duplicados são rejeitados na construção
        - Acesso por nome é O(n), suficiente para schemas tabulares usuais

    Invariantes:
        - Cada nome de campo aparece exatamente uma vez
        - Uma instância nunca é alterada após criada
    """

    fields: Tuple[SchemaField, ...]

    def __post_init__(self) -> None:
        fields = tuple(self.fields)
        seen = set()
        for f in fields:
            if not isinstance(f, SchemaField):
                raise SchemaValidationError(f"schema fields must be SchemaField, got: {type(f).__name__}")
            if f.name in seen:
                raise SchemaValidationError(f"duplicate field name in schema: {f.name}")
            seen.add(f.name)
        object.__setattr__(self, "fields", fields)

    # -----------------------------
    # Acesso
    # -----------------------------
    def __iter__(self) -> Iterator[SchemaField]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self.fields)

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get(self, name: str) -> Optional[SchemaField]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def to_dict(self) -> List[Dict[str, Any]]:
        return [f.to_dict() for f in self.fields]

    # -----------------------------
    # Construção
    # -----------------------------
    @classmethod
    def of(cls, fields: Sequence[SchemaField]) -> "RecordSchema":
        return cls(fields=tuple(fields))

    @classmethod
    def from_config(cls, data: Any) -> "RecordSchema":
        """Materializa um schema declarado como lista de `{name, type, nullable}`."""
        if not isinstance(data, list):
            raise SchemaValidationError("schema must be a list of field mappings")

        fields: List[SchemaField] = []
        for i, item in enumerate(data):
            if not isinstance(item, dict):
                raise SchemaValidationError(f"schema[{i}] must be a mapping")
            name = item.get("name")
            if not isinstance(name, str) or not name.strip():
                raise SchemaValidationError(f"schema[{i}].name is required")
            nullable = item.get("nullable", False)
            if not isinstance(nullable, bool):
                raise SchemaValidationError(f"schema[{i}].nullable must be boolean")
            fields.append(SchemaField(name=name.strip(), type=FieldType.parse(item.get("type")), nullable=nullable))

        return cls.of(fields)
