"""Application configuration settings"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = Field(default="QuickChat")
    debug: bool = Field(default=False)
    version: str = Field(default="0.1.0")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")

    # Storage
    store_backend: Literal["json", "sql"] = Field(default="json")
    data_dir: Path = Field(default=Path("."))
    users_file: str = Field(default="users.json")
    messages_file: str = Field(default="messages.json")
    database_url: str = Field(default="sqlite:///./quickchat.db")

    # Messaging
    fingerprint_scheme: Literal["sha256", "shorthand"] = Field(default="sha256")
    unique_message_ids: bool = Field(default=False)
    message_id_attempts: int = Field(default=10, ge=1)

    class Config:
        env_file = ".env"
        env_prefix = "QUICKCHAT_"
        case_sensitive = False

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Any) -> Any:
        """Accept level names in any case"""
        return value.upper() if isinstance(value, str) else value

    @property
    def users_path(self) -> Path:
        """Location of the JSON account document"""
        return self.data_dir / self.users_file

    @property
    def messages_path(self) -> Path:
        """Location of the JSON message document"""
        return self.data_dir / self.messages_file


# Global settings instance
settings = Settings()
