"""
Engine de flattening de hierarquias do Hierarchy Flow.

Este pacote contém a única parte do sistema com conteúdo algorítmico:
construção do grafo a partir de registros pai-filho, validação
estrutural, anotação de nível/top/bottom e emissão de linhas
relacionais sob a política de renomeação configurada.

Componentes (das folhas para o topo):
    - node      → extração de Node a partir de registros brutos
    - graph     → GraphBuilder e ValidatedGraph (raiz, ciclos, multi-parent)
    - traversal → anotação BFS de nível/top/bottom com limite de profundidade
    - remap     → FieldRemapper e campos não mapeados
    - emitter   → schema de saída e linhas relacionais
    - flatten   → orquestração tudo-ou-nada de um run

Limites explícitos:
    - Não realiza I/O
    - Não registra eventos (erros são exceções tipadas)
    - Não mantém estado entre runs
"""

from .emitter import RowEmitter, derive_schema, emit_row  # noqa: F401
from .flatten import FlattenResult, FlattenState, HierarchyFlattener, flatten_hierarchy  # noqa: F401
from .graph import GraphBuilder, ValidatedGraph, build_graph  # noqa: F401
from .node import Node, extract_node, extract_nodes, is_null  # noqa: F401
from .remap import FieldRemapper, non_mapped_fields  # noqa: F401
from .traversal import LevelInfo, annotate  # noqa: F401
