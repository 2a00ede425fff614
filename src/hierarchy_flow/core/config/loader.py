# src/hierarchy_flow/core/config/loader.py
"""
Resolução da configuração efetiva de um run.

Camadas, em ordem crescente de prioridade:
    1. arquivo de defaults (obrigatório)
    2. arquivo local (opcional; ignorado se não existir)
    3. overrides programáticos (opcional; ex.: `{"steps": {"ingest.load": {"path": ...}}}`)

Formatos: YAML (.yaml, .yml) via PyYAML e JSON (.json).

A configuração resolvida é validada apenas estruturalmente: raiz dict e
blocos `engine`/`steps` (quando presentes) também dict. Opções de Steps
são interpretadas pelos próprios Steps (ver `options.py`).
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge

_SECTION_KEYS = ("engine", "steps")


def _read_document(path: Path) -> Any:
    suffix = path.suffix.lower()
    with path.open("r", encoding="utf-8") as f:
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(f)
        if suffix == ".json":
            text = f.read()
            return json.loads(text) if text.strip() else None
    raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")


def _check_structure(data: Any, *, source: str) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict ({source}), recebido: {type(data).__name__}"
        )
    for key in _SECTION_KEYS:
        section = data.get(key)
        if section is not None and not isinstance(section, dict):
            raise InvalidConfigRootTypeError(
                f"Bloco '{key}' deve ser dict ({source}), recebido: {type(section).__name__}"
            )
    return data


def _load_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise DefaultsNotFoundError(f"Arquivo de configuração não encontrado: {path}")
    return _check_structure(_read_document(path), source=str(path))


def load_config(
    *,
    defaults_path: str,
    local_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Carrega defaults, aplica o arquivo local e os overrides via `deep_merge`.

    Raises:
        DefaultsNotFoundError: defaults inexistente.
        UnsupportedConfigFormatError: extensão não suportada.
        InvalidConfigRootTypeError: raiz ou bloco `engine`/`steps` não-dict.
        ConfigTypeConflictError: conflito de tipo durante o merge.
    """
    effective = _load_file(Path(defaults_path))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))

    if overrides:
        effective = deep_merge(effective, _check_structure(overrides, source="overrides"))

    return effective
