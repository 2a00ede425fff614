"""Inferência de schema a partir de linhas brutas (pandas).

Usado quando a configuração não declara `schema` explicitamente.

Política v1:
- dtypes são normalizados via `DataFrame.convert_dtypes()` (tipos nullable do pandas)
- bool → boolean, inteiro → long, float → double, datetime → timestamp
- qualquer outro dtype (object, string, misto) → string
- um campo é nullable se e somente se possui ao menos um valor ausente

Limites explícitos (v1):
- NÃO coerce valores
- NÃO usa amostragem: todas as linhas participam da inferência
"""

from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd

from .types import FieldType, RecordSchema, SchemaField


def _field_type_for(dtype: Any) -> FieldType:
    if pd.api.types.is_bool_dtype(dtype):
        return FieldType.BOOLEAN
    if pd.api.types.is_integer_dtype(dtype):
        return FieldType.LONG
    if pd.api.types.is_float_dtype(dtype):
        return FieldType.DOUBLE
    if pd.api.types.is_datetime64_any_dtype(dtype):
        return FieldType.TIMESTAMP
    return FieldType.STRING


def infer_schema_from_dataframe(df: pd.DataFrame) -> RecordSchema:
    converted = df.convert_dtypes()
    fields: List[SchemaField] = []
    for col in converted.columns:
        series = converted[col]
        fields.append(
            SchemaField(
                name=str(col),
                type=_field_type_for(series.dtype),
                nullable=bool(series.isna().any()),
            )
        )
    return RecordSchema.of(fields)


def infer_schema(rows: List[Dict[str, Any]]) -> RecordSchema:
    """Infere o schema de uma lista de registros (ordem de colunas = primeira aparição)."""
    if not rows:
        return RecordSchema.of([])
    return infer_schema_from_dataframe(pd.DataFrame(rows))
