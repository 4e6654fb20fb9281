"""
Core configuration and settings for the Product Admin console
Values come from environment variables or a local .env file
"""

from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file before the settings are built
load_dotenv()


class Config(BaseSettings):
    """Application configuration with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Service information
    service_name: str = Field(default="product-admin")
    service_version: str = Field(default="1.0.0")
    environment: str = Field(default="development")

    # Admin REST API
    api_base_url: str = Field(default="http://localhost:8080/api")
    request_timeout: float = Field(default=10.0, gt=0)
    admin_access_token: Optional[str] = Field(default=None)
    correlation_id_header: str = Field(default="X-Correlation-ID")

    # Variant editing limits
    max_images_per_variant: int = Field(default=5, ge=1)
    max_image_size_bytes: int = Field(default=5 * 1024 * 1024, ge=1)
    max_title_length: int = Field(default=500, ge=1)

    # Logging configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")
    log_to_file: bool = Field(default=False)
    log_to_console: bool = Field(default=True)
    log_file_path: str = Field(default="logs/product-admin.log")


# Global config instance
config = Config()
