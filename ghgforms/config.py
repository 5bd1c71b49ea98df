"""GHG forms configuration — loaded from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "GHGFORMS_", "env_file": ".env"}

    # Storage
    database_path: str = "ghgforms.db"

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Client-side persistence
    persistence_url: str = "http://localhost:3001"
    request_timeout: float = 30.0
    save_debounce_seconds: float = 2.0
    default_user_id: str = "default-user"


settings = Settings()
