"""
Centralised application configuration
"""
import json

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings, read from environment variables and .env"""

    # API Settings
    API_TITLE: str = "Garment Exchange API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Vendor garment inventory and retailer order placement"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_DEBUG: bool = False

    # Database
    # PostgreSQL in production (postgresql+psycopg2://...), SQLite for local runs
    DATABASE_URL: str = "sqlite:///./garments.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    # How long a placement waits for a contended lock before aborting
    DB_LOCK_TIMEOUT_SECONDS: float = 5.0

    # Schema bootstrap
    AUTO_CREATE_TABLES: bool = True
    LOAD_SAMPLE_DATA: bool = False

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000"

    LOG_LEVEL: str = "INFO"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
