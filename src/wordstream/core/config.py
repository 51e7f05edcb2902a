from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProducerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STREAM_", extra="ignore")
    default_count: int = Field(default=12, ge=0)
    delay_seconds: float = Field(default=0.5, ge=0.0)
    min_word_length: int = Field(default=3, ge=1)
    max_word_length: int = Field(default=10, ge=1)

    @model_validator(mode="after")
    def _check_word_lengths(self) -> "ProducerSettings":
        if self.min_word_length > self.max_word_length:
            raise ValueError("min_word_length must not exceed max_word_length")
        return self


class ConsumerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CONSUMER_", extra="ignore")
    base_url: str = "http://127.0.0.1:8000"
    stream_path: str = "/stream"
    connect_timeout: float = 5.0
    read_timeout: float = 30.0
    # Treat a body that closes without [DONE] as a failure instead of a completion
    strict_termination: bool = False


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    wordstream_env: str = "development"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Nested settings
    producer: ProducerSettings = ProducerSettings()
    consumer: ConsumerSettings = ConsumerSettings()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
