"""Step canônico: ingest.load (v1).

Responsabilidades:
- ler o conjunto de arestas pai-filho de um arquivo (CSV / Parquet / JSON)
- registrar origem (path + tipo) e fingerprint (sha256) no StepResult
- publicar os registros como artifact `data.raw_rows`

Config esperada (exemplo):
steps:
  ingest.load:
    path: data/org_chart.csv
    delimiter: ";"      # apenas CSV (default ",")
    encoding: latin-1   # apenas CSV (default utf-8)

Limites explícitos (v1):
- NÃO infere schema (responsabilidade do flattening)
- NÃO normaliza valores: CSV é lido como texto, célula vazia permanece ""
"""

from __future__ import annotations

import csv
import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple

import pandas as pd

from hierarchy_flow.core.pipeline.context import RAW_ROWS_ARTIFACT, RunContext
from hierarchy_flow.core.pipeline.step import Step
from hierarchy_flow.core.pipeline.types import StepKind, StepResult, StepStatus


def _resolve_path(path_value: Any) -> Path:
    if not isinstance(path_value, str) or not path_value.strip():
        raise ValueError("Missing required config: steps.ingest.load.path")

    p = Path(path_value).expanduser().resolve()
    if not p.exists():
        raise FileNotFoundError(f"File not found: {p}")
    if not p.is_file():
        raise ValueError(f"Path is not a file: {p}")
    return p


def _sha256_and_bytes(path: Path) -> Tuple[str, int]:
    h = hashlib.sha256()
    size = 0
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
            size += len(chunk)
    return h.hexdigest(), size


def _csv_options(step_cfg: Dict[str, Any]) -> Tuple[str, str]:
    delimiter = step_cfg.get("delimiter", ",")
    encoding = step_cfg.get("encoding", "utf-8")
    if not isinstance(delimiter, str) or len(delimiter) != 1:
        raise ValueError(f"steps.ingest.load.delimiter must be a single character, got {delimiter!r}")
    if not isinstance(encoding, str) or not encoding.strip():
        raise ValueError("steps.ingest.load.encoding must be a non-empty string")
    return delimiter, encoding


def _load_csv(path: Path, step_cfg: Dict[str, Any]) -> List[Dict[str, Any]]:
    delimiter, encoding = _csv_options(step_cfg)
    with path.open("r", encoding=encoding, newline="") as f:
        return list(csv.DictReader(f, delimiter=delimiter))


def _frame_to_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    # inteiros com nulos chegam como float64/NaN; convert_dtypes restaura Int64
    # e astype(object) + where entrega int/str nativos e None no lugar de NA
    df = df.convert_dtypes()
    return df.astype(object).where(df.notna(), None).to_dict(orient="records")


def _load_parquet(path: Path, step_cfg: Dict[str, Any]) -> List[Dict[str, Any]]:
    return _frame_to_records(pd.read_parquet(path))


def _load_json(path: Path, step_cfg: Dict[str, Any]) -> List[Dict[str, Any]]:
    lines = path.suffix.lower() == ".jsonl"
    return _frame_to_records(pd.read_json(path, orient="records", lines=lines, dtype=False))


_LOADERS = {
    ".csv": ("csv", _load_csv),
    ".parquet": ("parquet", _load_parquet),
    ".json": ("json", _load_json),
    ".jsonl": ("json", _load_json),
}


@dataclass
class IngestLoadStep(Step):
    """Carrega registros de um arquivo e registra origem + fingerprint."""

    id: str = "ingest.load"
    kind: StepKind = StepKind.INGEST
    depends_on: List[str] = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.depends_on is None:
            self.depends_on = []

    def run(self, ctx: RunContext) -> StepResult:
        step_cfg = ctx.step_config(self.id)

        try:
            path = _resolve_path(step_cfg.get("path"))
            suffix = path.suffix.lower()
            if suffix not in _LOADERS:
                raise ValueError(f"Unsupported file extension: {suffix}")

            sha256, size_bytes = _sha256_and_bytes(path)
            source_type, loader = _LOADERS[suffix]
            rows = loader(path, step_cfg)
            if not rows:
                ctx.add_warning(step_id=self.id, message=f"dataset is empty: {path.name}")

            ctx.set_artifact(RAW_ROWS_ARTIFACT, rows)
            ctx.log(
                step_id=self.id,
                level="info",
                message="dataset loaded",
                source_type=source_type,
                source_path=str(path),
                rows=len(rows),
            )

            return StepResult(
                step_id=self.id,
                kind=self.kind,
                status=StepStatus.SUCCESS,
                summary="dataset loaded",
                metrics={"rows": len(rows), "bytes": size_bytes},
                artifacts={
                    "source_path": str(path),
                    "source_type": source_type,
                    "source_bytes": size_bytes,
                    "source_sha256": sha256,
                },
                payload={
                    "source": {
                        "path": str(path),
                        "type": source_type,
                        "sha256": sha256,
                        "bytes": size_bytes,
                    }
                },
            )

        except Exception as e:
            ctx.log(
                step_id=self.id,
                level="error",
                message="ingest.load failed",
                error_type=e.__class__.__name__,
                error_message=str(e) or "error",
            )
            return StepResult(
                step_id=self.id,
                kind=self.kind,
                status=StepStatus.FAILED,
                summary=str(e) or "ingest.load failed",
                payload={"error": {"type": e.__class__.__name__, "message": str(e) or "error"}},
            )
