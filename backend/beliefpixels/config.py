"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    pixels_env: str = "development"
    pixels_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Language model
    anthropic_api_key: str = ""
    model_cheap: str = "claude-haiku-4-5-20251001"
    model_mid: str = "claude-sonnet-4-5-20250929"
    model_frontier: str = "claude-sonnet-4-5-20250929"

    # Embedding provider
    openai_api_key: str = ""
    embedding_model: str = "text-embedding-3-small"

    # Vector store: cloud triple, then self-hosted URL, then local directory
    chroma_tenant: str = ""
    chroma_database: str = ""
    chroma_api_key: str = ""
    chroma_url: str = ""
    chroma_persist_dir: str = ""

    collection_prefix: str = "pixels"
    extraction_prompt_path: str = ""
    deterministic_pixel_ids: bool = False
    processed_log_path: str = "data/processed_messages.jsonl"

    model_config = {"env_file": (".env", ".env.local"), "env_file_encoding": "utf-8"}


settings = Settings()
