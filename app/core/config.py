from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql://ptcoach_user:ptcoach_password@db:5432/ptcoach_db"
    SECRET_KEY: str = "SECRET_KEY_FOR_PTCOACH"
    # Recreating the schema on every start is for local development only
    RESET_DATABASE: bool = False
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    ADMIN_ACCESS_CODE: str = "ADMIN_ACCESS_CODE_FOR_PTCOACH"

    REDIS_URL: Optional[str] = None
    CACHE_TTL: int = 300

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:8080",
    ]
    LOG_LEVEL: str = "INFO"

    @property
    def REFRESH_SECRET_KEY(self) -> str:
        return self.SECRET_KEY + "_refresh"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"


settings = Settings()
