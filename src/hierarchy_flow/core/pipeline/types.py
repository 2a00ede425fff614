"""
Tipos canônicos do pipeline do Hierarchy Flow.

Componentes principais:
    - StepStatus → enum de estados finais (SUCCESS, SKIPPED, FAILED)
    - StepKind   → enum de classificação semântica de Steps
    - StepResult → estrutura imutável de resultado de execução

Invariantes:
    - Enums possuem valores textuais canônicos (serializáveis em JSON)
    - StepResult é imutável e seguro contra mutação acidental
    - Tipos não dependem de engine, pipeline ou do domínio de hierarquia
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class StepKind(str, Enum):
    """
    Tipos semânticos de Steps no pipeline.

    Tipos definidos:
        - INGEST: leitura de dados de uma fonte externa
        - TRANSFORM: transformações estruturais (ex.: flattening)
        - EXPORT: materialização de resultados

    O tipo é puramente informativo: o Engine não o utiliza para decidir
    execução.
    """
    INGEST = "ingest"
    TRANSFORM = "transform"
    EXPORT = "export"


class StepStatus(str, Enum):
    """
    Estados finais possíveis da execução de um Step.

    Estados definidos:
        - SUCCESS: execução concluída com sucesso
        - SKIPPED: execução pulada por decisão explícita (config ou dependência falha)
        - FAILED: execução interrompida por erro

    O status é um valor final, não transitório.
    """
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class StepResult:
    """
    Resultado imutável da execução de um Step.

    Campos:
        - step_id: identificador único do Step
        - kind: tipo semântico do Step
        - status: estado final da execução do Step
        - summary: resumo textual da execução
        - metrics: métricas numéricas produzidas pelo Step
        - warnings: avisos não fatais gerados durante a execução
        - artifacts: referências a artefatos produzidos (ex.: caminhos)
        - payload: dados adicionais (ex.: `error`, `impact`)
    """
    step_id: str
    kind: StepKind
    status: StepStatus
    summary: str
    metrics: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    artifacts: Dict[str, Any] = field(default_factory=dict)
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def error(self) -> Optional[Dict[str, Any]]:
        """`payload["error"]` de um Step FAILED; None caso contrário."""
        error = self.payload.get("error")
        return error if isinstance(error, dict) else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_id": self.step_id,
            "kind": self.kind.value,
            "status": self.status.value,
            "summary": self.summary,
            "metrics": dict(self.metrics),
            "warnings": list(self.warnings),
            "artifacts": dict(self.artifacts),
            "payload": dict(self.payload),
        }
