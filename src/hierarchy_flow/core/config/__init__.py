# src/hierarchy_flow/core/config/__init__.py

"""
Camada de configuração do Hierarchy Flow.

Este pacote é o colaborador de configuração do engine de flattening:
carrega, mescla e identifica configurações de execução, e converte o
bloco do Step de flattening em opções tipadas e pré-validadas.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução de configuração final via deep-merge determinístico
    - Geração de hash canônico para rastreabilidade
    - Parsing e validação das opções de flattening (FlattenOptions)

Invariantes:
    - A configuração final é um dicionário puro (dict)
    - Opções inválidas nunca chegam ao engine

Limites explícitos:
    - Não executa pipeline
    - Não valida a estrutura da hierarquia (responsabilidade do engine)
"""

from .errors import (  # noqa: F401
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    FlattenOptionsError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash  # noqa: F401
from .loader import load_config  # noqa: F401
from .merge import deep_merge  # noqa: F401
from .options import (  # noqa: F401
    FlattenOptions,
    OptionFailure,
    parse_flatten_options,
    parse_mapping_spec,
    parse_max_depth,
    validate_options_against_schema,
)
