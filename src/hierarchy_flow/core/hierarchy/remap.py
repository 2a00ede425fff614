"""
Renomeação de campos pelo mapping pai → filho.

O mapping configurado (`original → alvo`) descreve campos cujos valores
são trocados ("swap") ao escrever a linha de um nó: o valor do campo
original é escrito sob o nome alvo, e o campo alvo recebe o valor do
campo que encabeça sua cadeia no mapping.

Exemplos:
    - {"a": "b"}              → a→b, b→a
    - {"a": "b", "b": "c"}    → a→b, b→c, c→a
    - campo fora do mapping   → identidade

Com isso cada linha de saída preenche cada campo de entrada exatamente
uma vez, e o schema derivado continua válido para todas as linhas.

Invariantes:
    - resolve_output_name(f) == f para todo f fora do mapping
    - a tabela resolvida é uma permutação dos campos do mapping
    - o mapping é somente leitura e compartilhado por todos os nós

Limites explícitos:
    - Não valida se o mapping referencia campos pai/filho nem se os alvos
      são únicos (responsabilidade da camada de configuração)
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, List, Mapping

from hierarchy_flow.core.schema import RecordSchema


def _swap_table(mapping: Mapping[str, str]) -> Dict[str, str]:
    table = dict(mapping)
    inverse = {target: source for source, target in mapping.items()}

    for target in mapping.values():
        if target in mapping:
            continue
        head = inverse[target]
        seen = {target}
        while head in inverse and head not in seen:
            seen.add(head)
            head = inverse[head]
        table[target] = head

    return table


class FieldRemapper:
    """Resolve o nome de saída de cada campo de atributo de um nó."""

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping = MappingProxyType(dict(mapping))
        self._resolved = MappingProxyType(_swap_table(self._mapping))

    @property
    def mapping(self) -> Mapping[str, str]:
        return self._mapping

    def is_mapped(self, field: str) -> bool:
        return field in self._resolved

    def resolve_output_name(self, field: str) -> str:
        return self._resolved.get(field, field)


def non_mapped_fields(
    schema: RecordSchema,
    mapping: Mapping[str, str],
    parent_field: str,
    child_field: str,
) -> List[str]:
    """
    Campos do schema que não são campo pai, campo filho, nem chave ou valor
    do mapping — exatamente os campos que passam a ser nullable na saída.

    A ordem retornada é a ordem do schema.
    """
    mapped = set(mapping.keys()) | set(mapping.values())
    return [
        name
        for name in schema.field_names()
        if name not in mapped and name != parent_field and name != child_field
    ]
