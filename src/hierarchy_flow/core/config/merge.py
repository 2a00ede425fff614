# src/hierarchy_flow/core/config/merge.py
"""
Deep-merge de configuração (defaults ← override local).

Política:
    - dict → merge recursivo por chave
    - list → sobrescrita total (ex.: `schema` declarado)
    - escalar → sobrescrita direta
    - int ↔ float são intercambiáveis; bool não é número
    - valor `None` na base aceita qualquer override; override `None`
      limpa o valor da base (ex.: descartar um `schema` declarado)
    - demais conflitos de tipo → `ConfigTypeConflictError` com o caminho
      completo da chave (ex.: `steps.export.csv.path`)

Um override local pode, por exemplo, trocar apenas `max_depth` do Step
de flattening sem repetir `parent_field`/`child_field` declarados nos
defaults.
"""

from copy import deepcopy
from typing import Any, Dict, Tuple

from .errors import ConfigTypeConflictError


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _compatible(base_value: Any, override_value: Any) -> bool:
    if base_value is None or override_value is None:
        return True
    if _is_number(base_value) and _is_number(override_value):
        return True
    return type(base_value) is type(override_value)


def _merge_at(base: Dict[str, Any], override: Dict[str, Any], path: Tuple[str, ...]) -> Dict[str, Any]:
    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        key_path = path + (str(key),)
        if key not in result:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]
        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = _merge_at(base_value, override_value, key_path)
            continue

        if isinstance(override_value, list) and (base_value is None or isinstance(base_value, list)):
            result[key] = deepcopy(override_value)
            continue

        if not _compatible(base_value, override_value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo em '{'.'.join(key_path)}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        result[key] = deepcopy(override_value)

    return result


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Mescla `override` sobre `base` sem mutar nenhum dos dois.

    Raises:
        ConfigTypeConflictError: raiz não-dict ou conflito de tipo em alguma chave.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )
    return _merge_at(base, override, ())
