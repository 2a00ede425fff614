"""Erros canônicos do domínio de Schema (Hierarchy Flow).

O schema de entrada é uma entrada estrutural crítica do flattening.
Falhas de declaração/inferência devem produzir erros explícitos e estáveis.
"""


class SchemaError(Exception):
    """Erro base do domínio de schema."""


class SchemaValidationError(SchemaError):
    """Schema declarado não é estruturalmente válido."""


class UnsupportedFieldTypeError(SchemaError):
    """Tipo de campo não suportado (v1)."""
