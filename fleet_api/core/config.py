from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    # Application metadata
    PROJECT_NAME: str = "Fleet API"
    PROJECT_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # API settings
    API_V1_STR: str = "/api"

    # Database settings (hosted Postgres behind the backend-as-a-service)
    DATABASE_URL: str

    # Hosted auth provider
    SUPABASE_URL: str
    SUPABASE_ANON_KEY: str  # restricted tier, user-facing auth calls
    SUPABASE_SERVICE_ROLE_KEY: str  # elevated tier, admin user management
    AUTH_TIMEOUT: int = 10  # seconds
    PASSWORD_RESET_REDIRECT_URL: str = "http://localhost:5173/reset-password"

    # CORS settings
    BACKEND_CORS_ORIGINS: str = "http://localhost:5173,http://localhost:8000"

    # Position simulator
    SIMULATOR_ENABLED: bool = True
    SIMULATOR_INTERVAL_SECONDS: float = 10.0
    SIMULATOR_ACTIVATE_COUNT: int = 3
    SIMULATOR_ACTIVATE_WHEN_IDLE: bool = True

    # Analytics
    DAILY_TRIPS_WINDOW_DAYS: int = 30

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse the CORS origins string into a list."""
        return [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env files

settings = Settings()
