# src/hierarchy_flow/core/config/options.py
"""
Opções tipadas do flattening de hierarquia.

Este módulo converte o bloco de configuração do Step
`transform.hierarchy_to_relational` (um dict já resolvido pelo loader)
em um valor imutável `FlattenOptions`, aplicando defaults explícitos e
validando as regras de consistência entre opções.

Defaults canônicos (v1):
    - level_field  → "Level"
    - top_field    → "Top"
    - bottom_field → "Bottom"
    - true_value   → "Y"
    - false_value  → "N"
    - max_depth    → 50

Decisões arquiteturais:
    - Falhas são coletadas (FailureCollector) e reportadas em conjunto,
      nunca uma a uma
    - Valores vazios ou ausentes recebem o default declarado
    - `max_depth` é parseado de forma tipada; valor não numérico é erro
      de configuração, nunca erro estrutural da hierarquia
    - O mapping pai → filho é parseado a partir de pares `chave=valor`
      separados por `;`

Invariantes:
    - Um FlattenOptions válido nunca referencia os campos pai/filho no mapping
    - Cada campo alvo do mapping é usado por exatamente uma chave
    - `parent_field != child_field`

Limites explícitos:
    - Não conhece registros de entrada
    - Não executa flattening
    - A validação contra o schema de entrada é feita à parte
      (`validate_options_against_schema`), pois o schema só é conhecido
      após o ingest

Este módulo existe para que o engine receba configuração pré-validada,
sem precisar reverificar nenhuma regra de configuração.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from hierarchy_flow.core.schema import RecordSchema

from .errors import FlattenOptionsError


PARENT_FIELD = "parent_field"
CHILD_FIELD = "child_field"
PARENT_CHILD_MAPPING = "parent_child_mapping"
LEVEL_FIELD = "level_field"
LEVEL_FIELD_DEFAULT = "Level"
TOP_FIELD = "top_field"
TOP_FIELD_DEFAULT = "Top"
BOTTOM_FIELD = "bottom_field"
BOTTOM_FIELD_DEFAULT = "Bottom"
TRUE_VALUE = "true_value"
TRUE_VALUE_DEFAULT = "Y"
FALSE_VALUE = "false_value"
FALSE_VALUE_DEFAULT = "N"
MAX_DEPTH = "max_depth"
MAX_DEPTH_DEFAULT = 50

MAPPING_PAIR_DELIMITER = ";"
MAPPING_KEY_VALUE_DELIMITER = "="

# Códigos estáveis de falha
MISSING_PARENT_FIELD = "MISSING_PARENT_FIELD"
MISSING_CHILD_FIELD = "MISSING_CHILD_FIELD"
CONFLICTING_FIELD_NAMES = "CONFLICTING_FIELD_NAMES"
INVALID_OPTION_TYPE = "INVALID_OPTION_TYPE"
MALFORMED_MAPPING = "MALFORMED_MAPPING"
MAPPING_REFERENCES_KEY_FIELD = "MAPPING_REFERENCES_KEY_FIELD"
DUPLICATE_MAPPING_TARGET = "DUPLICATE_MAPPING_TARGET"
INVALID_MAX_DEPTH = "INVALID_MAX_DEPTH"
CONFLICTING_OUTPUT_FIELDS = "CONFLICTING_OUTPUT_FIELDS"
CONFLICTING_FLAG_VALUES = "CONFLICTING_FLAG_VALUES"
UNKNOWN_FIELD = "UNKNOWN_FIELD"
MAPPING_TYPE_MISMATCH = "MAPPING_TYPE_MISMATCH"
OUTPUT_FIELD_COLLISION = "OUTPUT_FIELD_COLLISION"


@dataclass(frozen=True)
class OptionFailure:
    """Falha de validação de uma opção, com ação corretiva e propriedade ofensora."""

    code: str
    message: str
    corrective_action: str
    config_property: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "corrective_action": self.corrective_action,
            "config_property": self.config_property,
        }


@dataclass
class FailureCollector:
    """Acumula falhas de configuração e as levanta de uma só vez."""

    _failures: List[OptionFailure] = field(default_factory=list, init=False, repr=False)

    def add_failure(
        self,
        code: str,
        message: str,
        corrective_action: str,
        *,
        config_property: Optional[str] = None,
    ) -> None:
        self._failures.append(
            OptionFailure(
                code=code,
                message=message,
                corrective_action=corrective_action,
                config_property=config_property,
            )
        )

    @property
    def failures(self) -> List[OptionFailure]:
        return list(self._failures)

    def get_or_raise(self) -> None:
        if self._failures:
            raise FlattenOptionsError(self.failures)


@dataclass(frozen=True)
class FlattenOptions:
    """
    Configuração resolvida e validada do flattening.

    Todos os campos são concretos: defaults já foram aplicados.
    O mapping é exposto como `MappingProxyType` (somente leitura) e
    compartilhado por todas as decisões de renomeação.
    """

    parent_field: str
    child_field: str
    parent_child_mapping: Mapping[str, str] = field(default_factory=dict)
    level_field: str = LEVEL_FIELD_DEFAULT
    top_field: str = TOP_FIELD_DEFAULT
    bottom_field: str = BOTTOM_FIELD_DEFAULT
    true_value: str = TRUE_VALUE_DEFAULT
    false_value: str = FALSE_VALUE_DEFAULT
    max_depth: int = MAX_DEPTH_DEFAULT

    def __post_init__(self) -> None:
        object.__setattr__(self, "parent_child_mapping", MappingProxyType(dict(self.parent_child_mapping)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            PARENT_FIELD: self.parent_field,
            CHILD_FIELD: self.child_field,
            PARENT_CHILD_MAPPING: dict(self.parent_child_mapping),
            LEVEL_FIELD: self.level_field,
            TOP_FIELD: self.top_field,
            BOTTOM_FIELD: self.bottom_field,
            TRUE_VALUE: self.true_value,
            FALSE_VALUE: self.false_value,
            MAX_DEPTH: self.max_depth,
        }


# ---------------------------------------------------------------------------
# Parsing de opções individuais
# ---------------------------------------------------------------------------

def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _str_option(
    step_cfg: Mapping[str, Any],
    key: str,
    default: str,
    collector: FailureCollector,
) -> str:
    value = step_cfg.get(key)
    if _is_blank(value):
        return default
    if not isinstance(value, str):
        collector.add_failure(
            INVALID_OPTION_TYPE,
            f"Option '{key}' must be a string, got {type(value).__name__}.",
            f"Please provide '{key}' as a string.",
            config_property=key,
        )
        return default
    return value.strip()


def _key_field(
    step_cfg: Mapping[str, Any],
    key: str,
    code: str,
    collector: FailureCollector,
) -> Optional[str]:
    value = step_cfg.get(key)
    if _is_blank(value):
        collector.add_failure(
            code,
            f"Option '{key}' is null/empty.",
            f"Please provide a valid '{key}'.",
            config_property=key,
        )
        return None
    if not isinstance(value, str):
        collector.add_failure(
            INVALID_OPTION_TYPE,
            f"Option '{key}' must be a string, got {type(value).__name__}.",
            f"Please provide '{key}' as a field name string.",
            config_property=key,
        )
        return None
    return value.strip()


def parse_mapping_spec(spec: Any, collector: Optional[FailureCollector] = None) -> Dict[str, str]:
    """
    Parseia a especificação do mapping pai → filho.

    Formatos aceitos:
        - string `"a=b;c=d"` (espaços ao redor de chaves/valores são removidos,
          segmentos vazios são ignorados)
        - dict `{"a": "b"}` (forma natural em YAML)
        - None / string vazia → mapping vazio (identidade)

    Pares malformados são reportados ao collector como `MALFORMED_MAPPING`;
    sem collector, levantam `FlattenOptionsError` imediatamente.
    """
    local = collector if collector is not None else FailureCollector()
    mapping: Dict[str, str] = {}

    if _is_blank(spec):
        return mapping

    if isinstance(spec, dict):
        for k, v in spec.items():
            if _is_blank(k) or _is_blank(v) or not isinstance(k, str) or not isinstance(v, str):
                local.add_failure(
                    MALFORMED_MAPPING,
                    f"Invalid mapping entry: {k!r} -> {v!r}.",
                    "Mapping keys and values must be non-empty field names.",
                    config_property=PARENT_CHILD_MAPPING,
                )
                continue
            mapping[k.strip()] = v.strip()

    elif isinstance(spec, str):
        for segment in spec.split(MAPPING_PAIR_DELIMITER):
            if not segment.strip():
                continue
            parts = segment.split(MAPPING_KEY_VALUE_DELIMITER)
            if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
                local.add_failure(
                    MALFORMED_MAPPING,
                    f"Could not parse mapping pair '{segment.strip()}'.",
                    "Use 'parentField=childField' pairs separated by ';'.",
                    config_property=PARENT_CHILD_MAPPING,
                )
                continue
            mapping[parts[0].strip()] = parts[1].strip()

    else:
        local.add_failure(
            INVALID_OPTION_TYPE,
            f"Option '{PARENT_CHILD_MAPPING}' must be a string or a mapping, got {type(spec).__name__}.",
            "Use 'parentField=childField' pairs separated by ';'.",
            config_property=PARENT_CHILD_MAPPING,
        )

    if collector is None:
        local.get_or_raise()
    return mapping


def parse_max_depth(value: Any, collector: Optional[FailureCollector] = None) -> int:
    """
    Parse tipado de `max_depth` (parse-or-fail).

    Aceita inteiros e strings numéricas; ausente/vazio → 50.
    Valores não numéricos, booleanos, fracionários ou < 1 são
    falhas `INVALID_MAX_DEPTH` (erro de configuração).
    """
    local = collector if collector is not None else FailureCollector()

    def _fail() -> int:
        local.add_failure(
            INVALID_MAX_DEPTH,
            f"Invalid max depth: {value!r}.",
            "Please provide a positive integer as max depth.",
            config_property=MAX_DEPTH,
        )
        if collector is None:
            local.get_or_raise()
        return MAX_DEPTH_DEFAULT

    if _is_blank(value):
        return MAX_DEPTH_DEFAULT

    if isinstance(value, bool):
        return _fail()

    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = int(value.strip())
        except ValueError:
            return _fail()
    else:
        return _fail()

    if parsed < 1:
        return _fail()
    return parsed


# ---------------------------------------------------------------------------
# Parsing completo
# ---------------------------------------------------------------------------

def parse_flatten_options(step_cfg: Optional[Mapping[str, Any]]) -> FlattenOptions:
    """
    Resolve e valida as opções do flattening.

    Args:
        step_cfg: bloco `steps.transform.hierarchy_to_relational` da config.

    Returns:
        FlattenOptions: opções concretas, com defaults aplicados.

    Raises:
        FlattenOptionsError: com todas as falhas encontradas.
    """
    cfg: Mapping[str, Any] = step_cfg if isinstance(step_cfg, Mapping) else {}
    collector = FailureCollector()

    parent_field = _key_field(cfg, PARENT_FIELD, MISSING_PARENT_FIELD, collector)
    child_field = _key_field(cfg, CHILD_FIELD, MISSING_CHILD_FIELD, collector)

    if parent_field is not None and parent_field == child_field:
        collector.add_failure(
            CONFLICTING_FIELD_NAMES,
            "Parent field is same as child field.",
            "Parent field needs to be different from child field.",
            config_property=PARENT_FIELD,
        )

    mapping = parse_mapping_spec(cfg.get(PARENT_CHILD_MAPPING), collector)
    targets = list(mapping.values())

    if parent_field is not None and (parent_field in mapping or parent_field in targets):
        collector.add_failure(
            MAPPING_REFERENCES_KEY_FIELD,
            "Parent key field found in mapping.",
            "Parent key field cannot be part of parent -> child mapping.",
            config_property=PARENT_CHILD_MAPPING,
        )
    if child_field is not None and (child_field in mapping or child_field in targets):
        collector.add_failure(
            MAPPING_REFERENCES_KEY_FIELD,
            "Child key field found in mapping.",
            "Child key field cannot be part of parent -> child mapping.",
            config_property=PARENT_CHILD_MAPPING,
        )

    duplicated = sorted({t for t in targets if targets.count(t) > 1})
    if duplicated:
        collector.add_failure(
            DUPLICATE_MAPPING_TARGET,
            f"Mapping targets used more than once: {duplicated}.",
            "Each child field can be the target of a single parent field.",
            config_property=PARENT_CHILD_MAPPING,
        )

    level_field = _str_option(cfg, LEVEL_FIELD, LEVEL_FIELD_DEFAULT, collector)
    top_field = _str_option(cfg, TOP_FIELD, TOP_FIELD_DEFAULT, collector)
    bottom_field = _str_option(cfg, BOTTOM_FIELD, BOTTOM_FIELD_DEFAULT, collector)

    if len({level_field, top_field, bottom_field}) != 3:
        collector.add_failure(
            CONFLICTING_OUTPUT_FIELDS,
            f"Level, top and bottom fields must be distinct: "
            f"'{level_field}', '{top_field}', '{bottom_field}'.",
            "Please provide distinct names for level, top and bottom fields.",
            config_property=LEVEL_FIELD,
        )

    true_value = _str_option(cfg, TRUE_VALUE, TRUE_VALUE_DEFAULT, collector)
    false_value = _str_option(cfg, FALSE_VALUE, FALSE_VALUE_DEFAULT, collector)
    if true_value == false_value:
        collector.add_failure(
            CONFLICTING_FLAG_VALUES,
            f"True and false values are both '{true_value}'.",
            "Please provide different values for true and false.",
            config_property=FALSE_VALUE,
        )

    max_depth = parse_max_depth(cfg.get(MAX_DEPTH), collector)

    collector.get_or_raise()

    return FlattenOptions(
        parent_field=parent_field or "",
        child_field=child_field or "",
        parent_child_mapping=mapping,
        level_field=level_field,
        top_field=top_field,
        bottom_field=bottom_field,
        true_value=true_value,
        false_value=false_value,
        max_depth=max_depth,
    )


def validate_options_against_schema(options: FlattenOptions, schema: RecordSchema) -> None:
    """
    Valida as opções contra o schema de entrada, uma vez conhecido.

    Regras v1:
        - campos pai, filho e todos os campos do mapping existem no schema
        - cada par do mapping compartilha tipo e nulabilidade
        - level/top/bottom não colidem com campos de entrada

    Raises:
        FlattenOptionsError: com todas as falhas encontradas.
    """
    collector = FailureCollector()

    for prop, name in ((PARENT_FIELD, options.parent_field), (CHILD_FIELD, options.child_field)):
        if name not in schema:
            collector.add_failure(
                UNKNOWN_FIELD,
                f"Field '{name}' not found in input schema.",
                f"Please provide a '{prop}' present in the input schema.",
                config_property=prop,
            )

    for source, target in options.parent_child_mapping.items():
        missing = [n for n in (source, target) if n not in schema]
        if missing:
            collector.add_failure(
                UNKNOWN_FIELD,
                f"Mapping '{source}={target}' references fields not in input schema: {missing}.",
                "Mapping fields must exist in the input schema.",
                config_property=PARENT_CHILD_MAPPING,
            )
            continue
        src, tgt = schema.get(source), schema.get(target)
        if src.type != tgt.type:
            collector.add_failure(
                MAPPING_TYPE_MISMATCH,
                f"Mapping '{source}={target}' joins fields of different types: "
                f"{src.type.value} vs {tgt.type.value}.",
                "Mapped fields must share the same type.",
                config_property=PARENT_CHILD_MAPPING,
            )

    for prop, name in (
        (LEVEL_FIELD, options.level_field),
        (TOP_FIELD, options.top_field),
        (BOTTOM_FIELD, options.bottom_field),
    ):
        if name in schema:
            collector.add_failure(
                OUTPUT_FIELD_COLLISION,
                f"Output field '{name}' already exists in input schema.",
                f"Please provide a '{prop}' not present in the input schema.",
                config_property=prop,
            )

    collector.get_or_raise()
