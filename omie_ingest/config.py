"""
Configuration models and YAML I/O for omie-ingest.

Key models:
- OrchestratorConfig: Retry budget, backoff, worker count and per-request
  timeout for one fetch run. Frozen: it is built once and passed to the
  orchestrator, which shares it read-only across worker threads.
- SourceConfig: Which document family to fetch, for which market scope,
  from which base URL.
- ImportConfig: Top-level config (source + orchestrator + concept filter).

Key functions:
- load_config(path) -> ImportConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.

Why Pydantic + YAML:
- Pydantic gives us strict validation, type coercion, and clear error messages.
- YAML is human-editable for batch jobs that re-run the same import.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from omie_ingest.exceptions import ConfigValidationError
from omie_ingest.types import Concept, Dataset, SystemType

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.omie.es/sites/default/files/dados/"
DEFAULT_USER_AGENT = "omie-ingest/0.1 (+https://www.omie.es/)"


class OrchestratorConfig(BaseModel):
    """Settings for one orchestrator run. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(
        3, ge=1, description="Total fetch attempts per date, first attempt included"
    )
    base_delay: float = Field(
        1.0, ge=0, description="Seconds; retry n waits base_delay * n"
    )
    concurrency: int = Field(5, ge=1, description="Number of worker threads")
    request_timeout: float = Field(
        30.0, gt=0, description="Seconds allowed for one HTTP request"
    )


class SourceConfig(BaseModel):
    """Where and what to fetch."""

    model_config = ConfigDict(frozen=True)

    dataset: Dataset = Field(Dataset.MARGINAL_PRICE, description="Document family")
    system: SystemType = Field(
        SystemType.IBERIAN,
        description="Market scope; only used by energy_by_technology",
    )
    base_url: str = Field(DEFAULT_BASE_URL, description="Root of the OMIE file tree")
    user_agent: str = Field(DEFAULT_USER_AGENT)


class ImportConfig(BaseModel):
    """Top-level configuration for an import run."""

    source: SourceConfig = Field(default_factory=SourceConfig)
    orchestrator: OrchestratorConfig = Field(default_factory=OrchestratorConfig)
    concepts: list[Concept] | None = Field(
        None,
        description=(
            "Marginal price series to keep. If omitted, all series are kept. "
            "Ignored for energy_by_technology."
        ),
    )

    @model_validator(mode="after")
    def _check_concepts_not_empty(self) -> ImportConfig:
        if self.concepts is not None and not self.concepts:
            raise ValueError(
                "'concepts' is an empty list. Omit it to keep every series."
            )
        return self


def load_config(path: str | Path) -> ImportConfig:
    """Load and validate a YAML config into an ImportConfig model.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigValidationError: If the file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigValidationError(f"Config file is empty: {path}")
    if not isinstance(raw, dict):
        raise ConfigValidationError(
            f"Config file must contain a mapping, got {type(raw).__name__}: {path}"
        )
    logger.info("Loaded config from %s", path)
    return ImportConfig.model_validate(raw)


def save_config(config: ImportConfig, path: str | Path) -> None:
    """Serialize an ImportConfig to YAML."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json", exclude_none=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write("# omie-ingest configuration\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved config to %s", path)
