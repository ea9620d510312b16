import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Find .env even in frozen or packaged mode
POSSIBLE_ENV_PATHS = [
    Path(__file__).resolve().parent.parent / ".env",        # normal
    Path(sys.executable).resolve().parent / ".env",         # frozen exe
    Path.cwd() / ".env",                                    # runtime cwd
]

for env_path in POSSIBLE_ENV_PATHS:
    if env_path.exists():
        load_dotenv(env_path, override=False)
        break


class Settings(BaseSettings):
    # Database
    DATABASE_URL: Optional[str] = None
    DATABASE_HOST: Optional[str] = None
    DATABASE_PORT: str = "5432"
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = ""
    DATABASE_NAME: str = "fintrack"

    # JWT
    SECRET_KEY: str = "supersecretkey_change_this"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30

    # Passwords
    ARGON2_ROUNDS: int = 3
    ARGON2_MEMORY_COST: int = 65536
    PASSWORD_MIN_LENGTH: int = 6
    RESET_TOKEN_EXPIRE_MINUTES: int = 10
    EXPOSE_RESET_TOKEN: bool = False

    # Uploads
    UPLOAD_DIR: str = "uploads"
    AVATAR_MAX_BYTES: int = 2 * 1024 * 1024

    # Server
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]
    REQUEST_TIMEOUT_SECONDS: float = 30.0
    SERVER_HOST: str = "127.0.0.1"
    SERVER_PORT: int = 5000

    # Logging
    LOG_FILE: Optional[str] = "app.log"
    LOG_LEVEL: str = "DEBUG"

    class Config:
        env_file = ".env"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.DATABASE_HOST:
            return (
                f"postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
                f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
            )
        return "sqlite:///./fintrack.db"


settings = Settings()
