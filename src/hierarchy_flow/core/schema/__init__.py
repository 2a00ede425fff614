"""Hierarchy Flow — Schema (core).

Componentes canônicos de schema de registro:
 - tipos (FieldType, SchemaField, RecordSchema)
 - declaração via config (lista de campos)
 - inferência a partir de linhas brutas (pandas)
"""

from .errors import (  # noqa: F401
    SchemaError,
    SchemaValidationError,
    UnsupportedFieldTypeError,
)

from .inference import infer_schema, infer_schema_from_dataframe  # noqa: F401
from .types import FieldType, RecordSchema, SchemaField  # noqa: F401
