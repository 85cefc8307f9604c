"""
Core configuration and settings for the Review Service
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Service information
    service_name: str = Field(default="review-service")
    service_version: str = Field(default="1.0.0")
    environment: str = Field(default="development")

    # Server configuration
    port: int = Field(default=8010)
    host: str = Field(default="0.0.0.0")  # nosec B104

    # Database configuration
    mongodb_uri: Optional[str] = Field(default=None)
    mongodb_host: str = Field(default="localhost")
    mongodb_port: int = Field(default=27017)
    mongodb_username: Optional[str] = Field(default=None)
    mongodb_password: Optional[str] = Field(default=None)
    mongodb_database: str = Field(default="bookstore")
    mongodb_timeout_ms: int = Field(default=5000)

    @property
    def mongodb_url(self) -> str:
        """Construct MongoDB connection URL"""
        if self.mongodb_uri:
            return self.mongodb_uri
        if self.mongodb_username and self.mongodb_password:
            return (
                f"mongodb://{self.mongodb_username}:{self.mongodb_password}"
                f"@{self.mongodb_host}:{self.mongodb_port}/{self.mongodb_database}?authSource=admin"
            )
        return f"mongodb://{self.mongodb_host}:{self.mongodb_port}/{self.mongodb_database}"

    # Review listing
    reviews_default_page_size: int = Field(default=10, ge=1)
    reviews_max_page_size: int = Field(default=100, ge=1)

    # Logging configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")
    log_to_file: bool = Field(default=False)
    log_to_console: bool = Field(default=True)
    log_file_path: str = Field(default="logs/review-service.log")

    # Tracing
    enable_tracing: bool = Field(default=True)

    # JWT Authentication configuration
    jwt_secret: str = Field(default="your_jwt_secret_key")
    jwt_algorithm: str = Field(default="HS256")


# Global config instance
config = Config()
