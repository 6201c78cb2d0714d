# -*- coding: utf-8 -*-
"""
LearnHub/Backend/src/config/settings.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Application settings built on Pydantic.

Configuration is read from the environment and, when present, from a .env
file, giving every environment one central place for its settings.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

"""The .env file is loaded ONLY if it exists.
Inside containers the variables passed by Docker/Compose are used instead.
"""
# Base directory for the project (LearnHub/Backend/)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Candidate .env locations
ROOT_ENV_PATH = (BASE_DIR.parent / ".env").resolve()
BACKEND_ENV_PATH = (BASE_DIR / ".env").resolve()


class Settings(BaseSettings):
    """Application settings loaded from the environment."""

    # Priority: 1) root .env, 2) backend .env, 3) environment only
    _env_file = None
    if ROOT_ENV_PATH.exists():
        _env_file = ROOT_ENV_PATH
    elif BACKEND_ENV_PATH.exists():
        _env_file = BACKEND_ENV_PATH

    model_config = SettingsConfigDict(
        env_file=_env_file,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str | None = None
    postgres_db: str = "learnhub"
    postgres_user: str = "learnhub"
    postgres_password: str = "learnhub"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    database_echo: bool = False

    # JWT
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440

    # Application
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_domain: str | None = None
    frontend_port: int | None = None
    auto_create_tables: bool = False
    uvicorn_reload: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # CORS
    ssl_enabled: bool = False
    cors_allow_origins: str = ""
    cors_allow_credentials: bool = True
    cors_allow_methods: str = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
    cors_allow_headers: str = "Authorization,Content-Type"

    # Exams
    exam_default_pass_percent: float = 50.0
    exam_deadline_enforced: bool = True
    exam_deadline_grace_seconds: int = 30  # network slack on top of the duration
    exam_history_page_limit: int = 100

    def get_allowed_origins(self) -> list[str]:
        """Build the list of allowed CORS origins.
        Priority: explicit cors_allow_origins -> domain/port -> dev defaults.
        """
        if self.cors_allow_origins:
            return [
                origin.strip()
                for origin in self.cors_allow_origins.split(",")
                if origin.strip()
            ]

        allowed: list[str] = []

        if self.app_domain:
            if self.ssl_enabled:
                allowed.append(f"https://{self.app_domain}")
            else:
                allowed.append(f"http://{self.app_domain}")
                allowed.append(f"https://{self.app_domain}")

        port = self.frontend_port or 5173
        allowed.extend(
            [
                f"http://localhost:{port}",
                f"http://127.0.0.1:{port}",
            ]
        )
        return allowed

    def get_cors_methods(self) -> list[str]:
        """Return the allowed HTTP methods for CORS."""
        if self.cors_allow_methods == "*":
            return ["*"]
        return [
            method.strip()
            for method in self.cors_allow_methods.split(",")
            if method.strip()
        ]

    def get_cors_headers(self) -> list[str]:
        """Return the allowed headers for CORS."""
        if self.cors_allow_headers == "*":
            return ["*"]
        return [
            header.strip()
            for header in self.cors_allow_headers.split(",")
            if header.strip()
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Build database URL from components if not provided directly
        if not self.database_url:
            self.database_url = self._build_database_url()

    def _build_database_url(self) -> str:
        """Build database URL from individual components."""
        driver = "postgresql+asyncpg"
        return f"{driver}://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    def get_config_source(self) -> str:
        """Describe where the configuration came from, for debugging."""
        if ROOT_ENV_PATH.exists():
            return f"root: {ROOT_ENV_PATH}"
        elif BACKEND_ENV_PATH.exists():
            return f"backend: {BACKEND_ENV_PATH}"
        else:
            return "environment variables only"


settings = Settings()
