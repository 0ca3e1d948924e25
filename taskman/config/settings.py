# taskman/config/settings.py
# Application configuration loaded from the environment

import os
from typing import List, Optional

from dotenv import load_dotenv

DEVELOPMENT_SECRET_KEY = "developmentsecret"


class Settings:
    """Runtime configuration for the API, the database and token signing"""

    def __init__(
        self,
        database_url: str = "sqlite:///./taskman.db",
        secret_key: Optional[str] = None,
        algorithm: str = "HS256",
        access_token_expire_hours: int = 24,
        api_prefix: str = "/api",
        cors_origins: Optional[List[str]] = None,
        environment: str = "production",
        log_level: str = "INFO",
        database_sslmode: Optional[str] = None,
        host: str = "0.0.0.0",
        port: int = 8000,
        reload: bool = False,
        admin_email: str = "admin@example.com",
        admin_password: str = "admin123",
    ):
        self.environment = environment.lower()
        if not secret_key:
            if not self.is_development:
                raise ValueError("SECRET_KEY must be set outside development")
            secret_key = DEVELOPMENT_SECRET_KEY

        self.database_url = database_url
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_expire_hours = access_token_expire_hours
        self.api_prefix = api_prefix.rstrip("/")
        self.cors_origins = cors_origins if cors_origins is not None else ["http://localhost:3000"]
        self.log_level = log_level.upper()
        self.database_sslmode = database_sslmode
        self.host = host
        self.port = port
        self.reload = reload
        self.admin_email = admin_email
        self.admin_password = admin_password

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def database_connect_args(self) -> dict:
        """Driver arguments for the configured database URL"""
        url = self.database_url.lower()
        if url.startswith("sqlite"):
            # Request handlers run in FastAPI's threadpool
            return {"check_same_thread": False}
        if url.startswith("postgresql"):
            return {"sslmode": self.database_sslmode or "require"}
        return {}

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (and a .env file if present)"""
        load_dotenv()

        origins = os.getenv("CORS_ORIGINS")
        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///./taskman.db"),
            secret_key=os.getenv("SECRET_KEY"),
            algorithm=os.getenv("ALGORITHM", "HS256"),
            access_token_expire_hours=int(os.getenv("ACCESS_TOKEN_EXPIRE_HOURS", "24")),
            api_prefix=os.getenv("API_PREFIX", "/api"),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()] if origins else None,
            environment=os.getenv("ENVIRONMENT", "production"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            database_sslmode=os.getenv("DATABASE_SSLMODE"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            reload=os.getenv("RELOAD", "false").lower() == "true",
            admin_email=os.getenv("ADMIN_EMAIL", "admin@example.com"),
            admin_password=os.getenv("ADMIN_PASSWORD", "admin123"),
        )
