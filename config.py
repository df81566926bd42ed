"""Configuration management for the service scaffold"""
from pathlib import Path
from typing import List, Literal, Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings


LOCAL_FRONTEND_ORIGIN = "http://127.0.0.1:3000"


class Config(BaseSettings):
    """Configuration class with Pydantic validation and environment-based settings"""

    # Application
    app_name: str = Field(default="App", description="Application name")
    environment: str = Field(default="development", description="Runtime environment (development or production)")
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=5000, ge=1, le=65535, description="Server port")

    # Logging
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = Field(
        default=None, description="Log level (DEBUG in development, INFO otherwise)"
    )
    log_dir: Path = Field(default=Path("storage/logs"), description="Directory for rotating log files")
    log_retention_days: int = Field(default=90, ge=1, description="Days of rotated log files to keep")
    enable_request_logging: bool = Field(default=True, description="Enable HTTP request logging")

    # CORS
    url_development: str = Field(default="http://localhost:3000", description="Allowed development origin")
    url_production: Optional[str] = Field(default=None, description="Allowed production origin")

    # Routing and metrics
    api_prefix: str = Field(default="/api", description="Mount point of the API router")
    metrics_path: str = Field(default="/metrics", description="Mount point of the Prometheus scrape endpoint")
    prometheus_enabled: bool = Field(default=True, description="Enable Prometheus exposition")

    class Config:
        env_prefix = ""
        env_file = ".env"
        extra = "ignore"
        case_sensitive = False

    @validator('log_level', pre=True)
    def normalize_log_level(cls, v):
        """Accept log levels in any case"""
        if isinstance(v, str):
            v = v.strip().upper()
            if v == "WARN":
                v = "WARNING"
            return v or None
        return v

    @validator('environment')
    def normalize_environment(cls, v):
        return v.strip().lower()

    @validator('api_prefix', 'metrics_path')
    def validate_mount_path(cls, v):
        """Mount paths must be absolute and must not end with a slash"""
        if not v.startswith("/") or v == "/":
            raise ValueError("mount paths must start with '/' and name a sub-path")
        return v.rstrip("/")

    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.environment == "development"

    @property
    def effective_log_level(self) -> str:
        """Configured log level, or the environment default"""
        if self.log_level:
            return self.log_level
        return "DEBUG" if self.is_development() else "INFO"

    @property
    def cors_allowlist(self) -> List[str]:
        """Origins allowed to make cross-origin requests"""
        origins = [LOCAL_FRONTEND_ORIGIN, self.url_development]
        if self.url_production:
            origins.append(self.url_production)
        return origins
