from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    DATABASE_URL: str
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 120
    ENV: str = "local"  # Environment setting
    LOG_LEVEL: str = "INFO"

    # Analytics: characters per document segment
    SEGMENT_SIZE: int = 500

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
