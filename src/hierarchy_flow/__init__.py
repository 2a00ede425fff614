# src/hierarchy_flow/__init__.py
"""
Hierarchy Flow — flattening de hierarquias pai-filho em tabelas relacionais.

Este pacote raiz define o namespace público do Hierarchy Flow: um engine
que recebe um conjunto de arestas (filho → pai), valida que elas formam
uma única árvore enraizada e acíclica, anota cada nó com nível, topo e
folha, e emite uma linha relacional por nó.

Arquitetura em alto nível:
    - core.schema    → tipos de campo e schema de registros (inferência via pandas)
    - core.config    → carregamento, merge, hashing e opções do flattening
    - core.hierarchy → extração de nós, validação estrutural, travessia e emissão
    - core.pipeline  → protocolos, contexto de execução e registro de Steps
    - core.engine    → planejamento (DAG) e execução do pipeline
    - steps          → ingest.load, transform.hierarchy_to_relational, export.csv

Limites explícitos:
    - Não há execução distribuída nem estado entre runs
    - Cada run processa um conjunto de arestas completo e autocontido
"""

from .core.config.options import FlattenOptions, parse_flatten_options  # noqa: F401
from .core.hierarchy import FlattenResult, flatten_hierarchy  # noqa: F401

__all__ = ["FlattenOptions", "FlattenResult", "flatten_hierarchy", "parse_flatten_options"]
