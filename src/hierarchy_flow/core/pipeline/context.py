"""
Contexto de execução compartilhado do pipeline.

Este módulo define o `RunContext`, a estrutura canônica utilizada para
compartilhar estado explícito entre Steps durante uma run.

O RunContext atua como o único meio permitido de:
    - troca indireta de informações entre Steps (artifact store)
    - registro de logs estruturados de execução
    - coleta de warnings não fatais associados a Steps

Artefatos canônicos (v1):
    - data.raw_rows          → registros brutos (list[dict]) publicados pelo ingest
    - data.flattened_rows    → linhas relacionais produzidas pelo flattening
    - data.flattened_schema  → schema de saída (RecordSchema)

Invariantes:
    - Cada run possui seu próprio contexto (sem estado global)
    - Logs sempre incluem `run_id`, `step_id`, `level` e timestamp UTC
    - Warnings são agrupados por `step_id`

Limites explícitos:
    - Não executa Steps
    - Não persiste dados automaticamente
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


RAW_ROWS_ARTIFACT = "data.raw_rows"
FLATTENED_ROWS_ARTIFACT = "data.flattened_rows"
FLATTENED_SCHEMA_ARTIFACT = "data.flattened_schema"


class MissingArtifactError(KeyError):
    """Artefato exigido por um Step ainda não foi publicado no contexto."""

    def __init__(self, key: str, *, step_id: Optional[str] = None) -> None:
        super().__init__(key)
        self.key = key
        self.step_id = step_id

    def __str__(self) -> str:
        suffix = f" (required by {self.step_id})" if self.step_id else ""
        return f"Missing required artifact: {self.key}{suffix}"


@dataclass
class RunContext:
    """
    Contexto de execução compartilhado de uma run do pipeline.

    Campos canônicos:
    - run_id: identificador único da execução
    - created_at: timestamp de criação do contexto
    - config: configuração efetiva (defaults + local deep-merge)
    - meta: metadados de execução (ex.: run_dir)
    - events: log estruturado de eventos
    - warnings: warnings por step_id
    """
    run_id: str
    created_at: datetime
    config: Dict[str, Any]
    meta: Dict[str, Any] = field(default_factory=dict)

    _artifacts: Dict[str, Any] = field(default_factory=dict, init=False, repr=False)
    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    # -----------------------------
    # Artifact store
    # -----------------------------
    def set_artifact(self, key: str, value: Any) -> None:
        self._artifacts[key] = value

    def has_artifact(self, key: str) -> bool:
        return key in self._artifacts

    def get_artifact(self, key: str) -> Any:
        if key not in self._artifacts:
            raise MissingArtifactError(key)
        return self._artifacts[key]

    def require_artifact(self, key: str, *, step_id: str) -> Any:
        """Como `get_artifact`, mas identifica o Step consumidor no erro."""
        if key not in self._artifacts:
            raise MissingArtifactError(key, step_id=step_id)
        return self._artifacts[key]

    # -----------------------------
    # Config por Step
    # -----------------------------
    def step_config(self, step_id: str) -> Dict[str, Any]:
        cfg = self.config if isinstance(self.config, dict) else {}
        steps_cfg = cfg.get("steps")
        if not isinstance(steps_cfg, dict):
            return {}
        step_cfg = steps_cfg.get(step_id) or {}
        return step_cfg if isinstance(step_cfg, dict) else {}

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, step_id: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "step_id": step_id,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, step_id: str, message: str) -> None:
        self.warnings.setdefault(step_id, []).append(message)

    def events_for(self, step_id: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e.get("step_id") == step_id]
