# src/hierarchy_flow/core/config/hashing.py
"""
Identidade estrutural de configurações e opções resolvidas.

O Step de flattening registra `options_hash` (hash de
`FlattenOptions.to_dict()`), de modo que dois runs possam ser comparados:
mesmas opções + mesma entrada → mesma saída.

O hash é SHA-256 sobre JSON canônico (chaves ordenadas, separadores
compactos, UTF-8). Mappings somente leitura são aceitos; valores não
serializáveis em JSON entram pela sua representação `str`.
"""

import hashlib
import json
from typing import Any, Mapping


def canonical_json(config: Mapping[str, Any]) -> str:
    if not isinstance(config, Mapping):
        raise TypeError(
            f"Config para hashing deve ser um mapping, recebido: {type(config).__name__}"
        )
    return json.dumps(
        dict(config),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def compute_config_hash(config: Mapping[str, Any]) -> str:
    """Hexdigest SHA-256 (64 caracteres) da forma canônica de `config`."""
    return hashlib.sha256(canonical_json(config).encode("utf-8")).hexdigest()
