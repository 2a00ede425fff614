"""
Engine de flattening: hierarquia pai-filho → tabela relacional.

Máquina de estados de um run:

    INGEST → VALIDATE → ANNOTATE → DERIVE_SCHEMA → EMIT_ROWS → DONE
                 │           │
                 └───────────┴──→ FAILED (terminal)

Política tudo-ou-nada:
    - toda validação estrutural e de profundidade ocorre antes de qualquer
      linha ser produzida
    - em falha, nenhum schema e nenhuma linha são expostos; a exceção
      tipada identifica a primeira violação encontrada

O engine recebe opções já validadas (`FlattenOptions`) e um schema de
entrada já tipado; ele não sabe como foram obtidos e não reverifica
regras de configuração.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

import pandas as pd

from hierarchy_flow.core.config.options import FlattenOptions
from hierarchy_flow.core.schema import RecordSchema

from .emitter import Row, RowEmitter
from .graph import GraphBuilder, ValidatedGraph
from .node import extract_nodes
from .traversal import LevelInfo, annotate


class FlattenState(str, Enum):
    INGEST = "ingest"
    VALIDATE = "validate"
    ANNOTATE = "annotate"
    DERIVE_SCHEMA = "derive_schema"
    EMIT_ROWS = "emit_rows"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class FlattenResult:
    """
    Resultado completo e consistente de um run de flattening.

    `rows()` é lazy e reiniciável: cada chamada devolve um novo iterador
    sobre o mesmo estado validado (somente leitura).
    """

    schema: RecordSchema
    graph: ValidatedGraph
    annotations: Mapping[Any, LevelInfo]
    emitter: RowEmitter

    def rows(self) -> Iterator[Row]:
        return self.emitter.rows()

    def to_records(self) -> List[Row]:
        return list(self.rows())

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.to_records(), columns=self.schema.field_names(), dtype=object).convert_dtypes()

    @property
    def node_count(self) -> int:
        return len(self.annotations)

    @property
    def leaf_count(self) -> int:
        return sum(1 for info in self.annotations.values() if info.bottom)

    @property
    def max_level(self) -> int:
        return max(info.level for info in self.annotations.values())

    def summary(self) -> Dict[str, int]:
        return {
            "nodes": self.node_count,
            "leaves": self.leaf_count,
            "max_level": self.max_level,
            "duplicates_ignored": self.graph.duplicates,
        }


class HierarchyFlattener:
    """Executa um run de flattening e expõe o estado corrente da máquina."""

    def __init__(self, *, options: FlattenOptions, input_schema: Optional[RecordSchema]) -> None:
        self.options = options
        self.input_schema = input_schema
        self.state = FlattenState.INGEST

    def run(self, records: Iterable[Mapping[str, Any]]) -> FlattenResult:
        try:
            builder = GraphBuilder().add_all(
                extract_nodes(
                    records,
                    parent_field=self.options.parent_field,
                    child_field=self.options.child_field,
                )
            )

            self.state = FlattenState.VALIDATE
            graph = builder.build()

            self.state = FlattenState.ANNOTATE
            annotations = annotate(graph, self.options.max_depth)

            self.state = FlattenState.DERIVE_SCHEMA
            emitter = RowEmitter(
                graph=graph,
                annotations=annotations,
                options=self.options,
                input_schema=self.input_schema,
            )
        except Exception:
            self.state = FlattenState.FAILED
            raise

        self.state = FlattenState.EMIT_ROWS
        result = FlattenResult(schema=emitter.schema, graph=graph, annotations=annotations, emitter=emitter)
        self.state = FlattenState.DONE
        return result


def flatten_hierarchy(
    records: Iterable[Mapping[str, Any]],
    *,
    options: FlattenOptions,
    input_schema: Optional[RecordSchema],
) -> FlattenResult:
    """Atalho funcional para `HierarchyFlattener(...).run(records)`."""
    return HierarchyFlattener(options=options, input_schema=input_schema).run(records)
