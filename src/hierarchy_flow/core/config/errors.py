# src/hierarchy_flow/core/config/errors.py
"""
Exceções canônicas da camada de configuração do Hierarchy Flow.

Este módulo define a hierarquia oficial de exceções utilizadas durante
o carregamento, a resolução e a validação de opções de configuração.

Erros de configuração são detectados **antes** do engine de flattening
executar; o engine assume que nenhum deles pode ocorrer em sua entrada.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção aqui representa erro estrutural da hierarquia

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não depende de Engine, Pipeline ou Steps
"""

from __future__ import annotations

from typing import Any, Dict, List


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração do Hierarchy Flow.

    Permite captura genérica de erros de configuração e distinção clara
    entre falhas de configuração e falhas estruturais da hierarquia.
    """


class DefaultsNotFoundError(ConfigError):
    """
    Exceção levantada quando o arquivo de configuração base (defaults)
    não é encontrado no caminho especificado.

    Limites explícitos:
        - Não tenta inferir ou criar defaults automaticamente
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Exceção levantada quando o formato do arquivo de configuração
    não é suportado pelo loader (v1: YAML ou JSON).
    """


class InvalidConfigRootTypeError(ConfigError):
    """
    Exceção levantada quando o conteúdo raiz da configuração
    não é um dicionário (`dict`).
    """


class ConfigTypeConflictError(ConfigError):
    """
    Exceção levantada quando ocorre conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"steps": {"transform.hierarchy_to_relational": {"max_depth": 10}}}
        - override: {"steps": "disabled"}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
    """


class FlattenOptionsError(ConfigError):
    """
    Exceção levantada quando as opções do flattening são inválidas.

    Carrega **todas** as falhas coletadas na validação (não apenas a
    primeira), cada uma com código estável, ação corretiva e a
    propriedade de configuração ofensora.
    """

    def __init__(self, failures: List[Any]) -> None:
        self.failures = list(failures)
        summary = "; ".join(getattr(f, "message", str(f)) for f in self.failures)
        super().__init__(f"Invalid flatten options: {summary}" if summary else "Invalid flatten options")

    @property
    def codes(self) -> List[str]:
        return [getattr(f, "code", "") for f in self.failures]

    def to_details(self) -> Dict[str, Any]:
        return {"failures": [f.to_dict() for f in self.failures]}
