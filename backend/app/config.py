"""Environment settings module"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # App
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # CORS
    ALLOWED_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    # Logging
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR
    LOG_FILE: Optional[str] = None  # console only when unset

    # Matching
    DEFAULT_RECOMMENDATION_LIMIT: int = 6
    MAX_RECOMMENDATION_LIMIT: int = 50
    ROOMMATE_MATCH_LIMIT: int = 20
    NEARBY_UNIVERSITY_RADIUS_MILES: float = 50.0

    @property
    def allowed_origins_list(self) -> list[str]:
        """CORS allowed origins"""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
