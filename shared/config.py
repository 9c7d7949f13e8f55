from pydantic_settings import BaseSettings
from pathlib import Path

ROOT_DIR = Path(__file__).parent.parent


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./tracking.db"
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    DEFAULT_LIMIT: int = 100
    SCRIPT_PATH: Path = ROOT_DIR / "backend" / "app" / "static" / "tracker.js"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_prefix = "TRACKER_"
        env_file = ROOT_DIR / ".env"
        case_sensitive = True

settings = Settings()
