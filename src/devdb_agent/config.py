"""Configuration settings for the application."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Pydantic settings class for the application."""

    # Define the settings with default values and types
    # These will be loaded from environment variables or a .env file if not provided
    LOG_LEVEL: str = "warning"  # Options: debug, info, warning, error, critical

    # LLM Configuration
    PLANNER: str = "anthropic"
    ANTHROPIC_API_KEY: str | None = None
    ANTHROPIC_MODEL: str = "claude-sonnet-4-20250514"
    MAX_TOKENS: int = 700
    MAX_STEPS: int = 8
    PROVIDER_TIMEOUT: float = 60.0

    # Target defaults (back-filled into tool arguments)
    PROJECT: str = ""
    COMPOSE_FILE: str = ""  # also the only path allowed to contain ".."
    DB_SERVICE: str = ""
    DB_VOLUME_KEY: str = "db_data"

    # Target application tree
    APP_DIR: str | None = None
    APP_ENV_FILE: str | None = None

    # Guard rails
    ENV: str = "development"  # "production" refuses every guarded operation
    ENSURE_DOCKER_AUTO: bool = True
    DRY_RUN: bool = False
    VOLUME_PROMPT_DEFAULT: bool = False

    # Engine
    COMPOSE_CMD: str | None = None  # Options: docker-compose, "docker compose", docker
    ENGINE_BOOTSTRAPPER: str = "colima"

    class Config:
        """Configuration for Pydantic settings."""

        # Load environment variables from a .env file
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
