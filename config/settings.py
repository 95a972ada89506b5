from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List, Optional

class Settings(BaseSettings):
    APP_NAME: str = "Claims Proposal Analytics"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None
    MAX_ROWS: int = 200_000
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    # Contact block printed on every proposal
    VENDOR_CONTACT_EMAIL: str = "contact@eyther.ai"
    VENDOR_CONTACT_PHONE: str = "+91 98765 43210"
    VENDOR_TEAM_MEMBER: str = "Eyther Team"

    class Config:
        env_file = ".env"

@lru_cache
def get_settings() -> Settings:
    return Settings()
