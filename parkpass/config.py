from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # Database
    DATABASE_URL: Optional[str] = None
    PGHOST: Optional[str] = None
    PGDATABASE: Optional[str] = None
    PGUSER: Optional[str] = None
    PGPASSWORD: Optional[str] = None
    PGSSLMODE: str = "require"
    AUTO_CREATE_SCHEMA: bool = True

    # Security
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Application
    PROJECT_NAME: str = "ParkPass Parking Marketplace"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Booking rules
    RESERVATION_BUFFER_MINUTES: int = 60
    EXTENSION_MINUTES: int = 60
    CANCELLATION_CUTOFF_MINUTES: int = 60
    REMINDER_LEAD_MINUTES: int = 60
    NOTIFICATION_RETENTION_DAYS: int = 30

    # Background sweeps
    SCHEDULER_ENABLED: bool = True
    EXPIRY_SWEEP_SECONDS: int = 300
    REMINDER_SWEEP_SECONDS: int = 3600
    CLEANUP_SWEEP_SECONDS: int = 86400

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.PGHOST and self.PGDATABASE:
            return f"postgresql://{self.PGUSER}:{self.PGPASSWORD}@{self.PGHOST}/{self.PGDATABASE}?sslmode={self.PGSSLMODE}"
        return "sqlite:///./parkpass.db"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
