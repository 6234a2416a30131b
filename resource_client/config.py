from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):
    # App
    APP_NAME: str = "Resource Client"
    DEBUG: bool = False

    # Gateway
    MAJOR_API_BASE_URL: str = "https://go-api.prod.major.build"
    MAJOR_JWT_TOKEN: str = ""

    # Headers
    SERVICE_JWT_HEADER: str = "x-major-jwt"
    USER_JWT_HEADER: str = "x-major-user-jwt"

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

@lru_cache()
def get_settings() -> Settings:
    return Settings()
