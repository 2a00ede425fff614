"""
Derivação do schema de saída e emissão de linhas relacionais.

Schema de saída:
    - todos os campos de entrada, na ordem original
    - campos não mapeados (nem pai, nem filho, nem mapping) viram nullable
    - campos pai/filho mantêm sua nulabilidade
    - campos mapeados trocam valores entre si: se um campo de um grupo do
      mapping é nullable, todos os campos do grupo saem nullable
    - ao final: level (INT), top (STRING), bottom (STRING)

Linha de saída (uma por nó, em ordem de travessia):
    - atributos do nó com a renomeação do mapping aplicada
    - level como inteiro
    - top/bottom como os literais configurados (default "Y"/"N")

Invariantes:
    - Cada linha depende apenas do seu nó e do seu LevelInfo
    - Linhas nunca são mutadas após emitidas
    - `RowEmitter.rows()` pode ser chamado várias vezes: cada chamada
      reitera o mesmo estado validado, produzindo as mesmas linhas
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Union

from hierarchy_flow.core.config.options import FlattenOptions
from hierarchy_flow.core.schema import FieldType, RecordSchema, SchemaField

from .graph import ValidatedGraph
from .node import Node
from .remap import FieldRemapper, non_mapped_fields
from .traversal import LevelInfo


Row = Dict[str, Any]


def _nullable_mapping_groups(schema: RecordSchema, mapping: Mapping[str, str]) -> List[str]:
    groups: List[set] = []
    for source, target in mapping.items():
        linked = [g for g in groups if source in g or target in g]
        merged = {source, target}.union(*linked)
        groups = [g for g in groups if g not in linked] + [merged]

    out: List[str] = []
    for group in groups:
        if any(name in schema and schema.get(name).nullable for name in group):
            out.extend(sorted(group))
    return out


def derive_schema(input_schema: Optional[RecordSchema], options: FlattenOptions) -> RecordSchema:
    """
    Gera o schema de saída a partir do schema de entrada e das opções.

    Raises:
        ValueError: se o schema de entrada estiver ausente ou vazio.
    """
    if input_schema is None or not len(input_schema):
        raise ValueError("Input schema is required.")

    widen = set(
        non_mapped_fields(
            input_schema,
            options.parent_child_mapping,
            options.parent_field,
            options.child_field,
        )
    )

    widen.update(_nullable_mapping_groups(input_schema, options.parent_child_mapping))

    fields: List[SchemaField] = [f.as_nullable() if f.name in widen else f for f in input_schema]
    fields.append(SchemaField(name=options.level_field, type=FieldType.INT))
    fields.append(SchemaField(name=options.top_field, type=FieldType.STRING))
    fields.append(SchemaField(name=options.bottom_field, type=FieldType.STRING))
    return RecordSchema.of(fields)


def emit_row(
    node: Node,
    level_info: LevelInfo,
    mapping: Union[FieldRemapper, Mapping[str, str]],
    options: FlattenOptions,
    field_names: Optional[Sequence[str]] = None,
) -> Row:
    """
    Produz a linha relacional de um nó.

    `field_names` restringe e ordena os campos de entrada (normalmente os
    nomes do schema de entrada); campos ausentes no registro saem como None
    e chaves do registro fora do schema são descartadas.
    """
    remapper = mapping if isinstance(mapping, FieldRemapper) else FieldRemapper(mapping)
    names = list(field_names) if field_names is not None else list(node.attributes.keys())
    allowed = set(names)

    row: Row = {name: None for name in names}
    for name, value in node.attributes.items():
        if name not in allowed:
            continue
        row[remapper.resolve_output_name(name)] = value

    row[options.level_field] = int(level_info.level)
    row[options.top_field] = options.true_value if level_info.top else options.false_value
    row[options.bottom_field] = options.true_value if level_info.bottom else options.false_value
    return row


class RowEmitter:
    """Emite o schema de saída uma vez e uma linha por nó validado."""

    def __init__(
        self,
        *,
        graph: ValidatedGraph,
        annotations: Mapping[Any, LevelInfo],
        options: FlattenOptions,
        input_schema: RecordSchema,
    ) -> None:
        self._graph = graph
        self._annotations = annotations
        self._options = options
        self._remapper = FieldRemapper(options.parent_child_mapping)
        self._field_names = tuple(input_schema.field_names())
        self.schema = derive_schema(input_schema, options)

    def __len__(self) -> int:
        return len(self._annotations)

    def __iter__(self) -> Iterator[Row]:
        return self.rows()

    def rows(self) -> Iterator[Row]:
        for node_id, info in self._annotations.items():
            yield emit_row(
                self._graph.node(node_id),
                info,
                self._remapper,
                self._options,
                self._field_names,
            )
