from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Any, Dict, List, Optional

DEFAULT_CRITERIA = [
    {
        "key": "innovation",
        "label": "Innovation",
        "description": "Originality of the idea and approach",
        "max_score": 10,
    },
    {
        "key": "technical",
        "label": "Technical Implementation",
        "description": "Depth and quality of the technical work",
        "max_score": 10,
    },
    {
        "key": "presentation",
        "label": "Presentation",
        "description": "Clarity of the poster, video and pitch",
        "max_score": 10,
    },
    {
        "key": "impact",
        "label": "Impact",
        "description": "Usefulness and reach of the solution",
        "max_score": 10,
    },
    {
        "key": "fairness",
        "label": "Fairness & Ethics",
        "description": "Attention to fairness, privacy and ethical concerns",
        "max_score": 10,
    },
]


class Settings(BaseSettings):
    # Database settings
    DATABASE_URL: str = "sqlite:///./event_evaluation.db"

    # JWT settings
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Seed admin, created on startup if missing
    DEFAULT_ADMIN_NAME: str = "Root Admin"
    DEFAULT_ADMIN_EMAIL: str = "admin@example.com"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"

    # API settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Event Evaluation API"
    DEBUG: bool = False
    CORS_ORIGINS: list = ["*"]

    # Rate limiting (only active when REDIS_URL is set)
    REDIS_URL: Optional[str] = None
    RATE_LIMIT_PER_MINUTE: int = 100

    # Logging
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    # Evaluation settings
    DEFAULT_CATEGORY: str = "general"
    SCORE_MIN: float = 0
    EVALUATION_CRITERIA: List[Dict[str, Any]] = DEFAULT_CRITERIA

    class Config:
        env_file = ".env"
        case_sensitive = True

@lru_cache()
def get_settings() -> Settings:
    """
    Get settings instance with caching
    Returns:
        Settings instance
    """
    return Settings()
