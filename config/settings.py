"""Environment-driven configuration using Pydantic Settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All configuration comes from environment variables / .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Search ---
    search_threshold: float = 0.5
    search_top_k: int = 10
    dimension_mismatch_policy: Literal["skip", "fail"] = "skip"

    # --- Embeddings ---
    embedding_backend: Literal["local", "http"] = "local"
    embedding_api_url: str = "http://localhost:8000"
    embedding_timeout_seconds: float = 10.0
    embedding_max_attempts: int = 2
    local_embedding_dim: int = 64

    # --- Document store ---
    store_backend: Literal["memory", "jsonl", "bigquery"] = "memory"
    store_path: str = "corpus.jsonl"
    store_timeout_seconds: float = 10.0

    # --- BigQuery ---
    gcp_project_id: str = ""
    bq_dataset: str = "similarity_search"
    bq_documents_table: str = "documents"

    # --- Observability ---
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    @property
    def bq_documents_table_id(self) -> str:
        return f"{self.gcp_project_id}.{self.bq_dataset}.{self.bq_documents_table}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
