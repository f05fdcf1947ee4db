"""gemini_context configuration: loaded from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "GEMINI_CONTEXT_", "env_file": ".env"}

    # API key used by the HTTP service; library callers pass their own
    google_api_key: str = ""

    # Endpoints
    api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    upload_base: str = "https://generativelanguage.googleapis.com/upload/v1beta/files"
    generate_model: str = "gemini-2.0-flash"
    embedding_model: str = "text-embedding-004"

    # Payloads above this size go through the resumable upload
    max_inline_bytes: int = 20 * 1024 * 1024

    # Seconds; applies to every outbound request
    request_timeout: float = 120.0


settings = Settings()
