"""Application settings loaded from YAML with environment variable overrides."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from docchat.vectorstore.base import UPSERT_BATCH_SIZE

logger = logging.getLogger(__name__)

ENV_PREFIX = "DOCCHAT_"

# ---------------------------------------------------------------------------
# Settings sections
# ---------------------------------------------------------------------------


class EmbeddingSettings(BaseModel):
    provider: str = "openai"
    model: str = "text-embedding-ada-002"
    dimension: int = 1536
    api_key: str | None = None
    base_url: str | None = None
    azure_endpoint: str | None = None
    api_version: str | None = None


class VectorStoreSettings(BaseModel):
    backend: str = "faiss"
    path: str = "local_data/vectorstore"
    index_name: str = "pdf-chatter"
    namespace: str = ""
    url: str | None = None
    api_key: str | None = None


class LLMSettings(BaseModel):
    provider: str = "openai"
    model: str = "gpt-4o-mini"
    temperature: float = 0.7
    max_tokens: int = 1000
    api_key: str | None = None
    base_url: str | None = None
    azure_endpoint: str | None = None
    api_version: str | None = None


class ChunkingSettings(BaseModel):
    strategy: str = "recursive"
    chunk_size: int = 1000
    chunk_overlap: int = 200


class RetrievalSettings(BaseModel):
    top_k: int = 3
    allow_unscoped: bool = False
    max_concurrency: int = 1


class IngestionSettings(BaseModel):
    supported_formats: list[str] = Field(
        default_factory=lambda: [".pdf", ".txt", ".docx"]
    )
    max_file_size_mb: int = 100
    batch_size: int = Field(default=UPSERT_BATCH_SIZE, ge=1, le=UPSERT_BATCH_SIZE)
    max_stored_chars: int = 1000
    replace_existing: bool = True


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    vectorstore: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    chunking: ChunkingSettings = Field(default_factory=ChunkingSettings)
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)


def _find_settings_file() -> Path | None:
    """Walk up from cwd looking for settings.yaml."""
    profile = os.getenv(f"{ENV_PREFIX}PROFILE", "")
    names = [f"settings-{profile}.yaml", "settings.yaml"] if profile else ["settings.yaml"]

    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        for name in names:
            candidate = parent / name
            if candidate.exists():
                return candidate
    return None


def _apply_env_overrides(raw: dict[str, Any], environ: dict[str, str]) -> dict[str, Any]:
    """Overlay ``DOCCHAT_<SECTION>_<FIELD>`` variables onto raw settings.

    Values are left as strings; pydantic coerces them to the field type.
    """
    merged = {key: dict(value or {}) for key, value in raw.items()}
    for section, model in Settings.model_fields.items():
        section_cls = model.annotation
        prefix = f"{ENV_PREFIX}{section.upper()}_"
        for field_name in section_cls.model_fields:
            value = environ.get(prefix + field_name.upper())
            if value is None:
                continue
            if section_cls.model_fields[field_name].annotation == list[str]:
                value = [v.strip() for v in value.split(",") if v.strip()]
            merged.setdefault(section, {})[field_name] = value
            logger.debug("Settings override from env: %s.%s", section, field_name)
    return merged


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file, then apply environment overrides.

    Args:
        path: Explicit settings file. When omitted, ``settings.yaml`` (or
            ``settings-<profile>.yaml``) is searched upward from cwd.
    """
    settings_path = Path(path) if path else _find_settings_file()

    raw: dict[str, Any] = {}
    if settings_path is not None:
        with open(settings_path, encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
        logger.info("Loaded settings from %s", settings_path)

    return Settings(**_apply_env_overrides(raw, dict(os.environ)))
