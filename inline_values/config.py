"""
Configuration management for the wrapping transform.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from INLINE_VALUES_* environment variables."""

    # Logging
    log_level: str = "INFO"

    # Parsing
    default_language: str = "ruby"

    # Replace the fault-injection sentinel with its failure literal
    fault_injection: bool = True

    class Config:
        env_prefix = "INLINE_VALUES_"
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
