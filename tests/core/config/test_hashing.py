# tests/core/config/test_hashing.py
"""
Testes do hashing canônico de configuração.

O hash identifica opções resolvidas de um run (`options_hash` no
payload do Step de flattening); ele deve ser estável à ordem de chaves
e sensível a qualquer mudança de valor.
"""

import pytest

from hierarchy_flow.core.config.hashing import compute_config_hash
from hierarchy_flow.core.config.options import FlattenOptions


def test_hash_is_stable_to_key_order():
    a = {"parent_field": "P", "child_field": "C", "max_depth": 50}
    b = {"max_depth": 50, "child_field": "C", "parent_field": "P"}

    assert compute_config_hash(a) == compute_config_hash(b)


def test_hash_changes_with_values():
    a = {"max_depth": 50}
    b = {"max_depth": 49}

    assert compute_config_hash(a) != compute_config_hash(b)


def test_hash_is_sha256_hex():
    h = compute_config_hash({})
    assert len(h) == 64
    int(h, 16)


def test_hash_of_flatten_options_is_deterministic():
    opts1 = FlattenOptions(parent_field="P", child_field="C", parent_child_mapping={"x": "y"})
    opts2 = FlattenOptions(parent_field="P", child_field="C", parent_child_mapping={"x": "y"})

    assert compute_config_hash(opts1.to_dict()) == compute_config_hash(opts2.to_dict())


def test_hash_rejects_non_dict():
    with pytest.raises(TypeError):
        compute_config_hash(["not", "a", "dict"])  # type: ignore[arg-type]


def test_hash_accepts_read_only_mapping():
    from types import MappingProxyType

    cfg = {"parent_field": "P", "child_field": "C"}

    assert compute_config_hash(MappingProxyType(cfg)) == compute_config_hash(cfg)
