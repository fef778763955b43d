"""Configuration management for Statement OCR."""

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from statement_ocr.errors import ConfigurationError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # LLM Configuration
    llm_provider: Literal["gemini", "openai", "ollama"] = "gemini"
    gemini_api_key: str = ""
    openai_api_key: str = ""
    ollama_host: str = "http://localhost:11434"
    gemini_model: str = "gemini-flash-latest"
    openai_model: str = "gpt-4o-mini"
    ollama_model: str = "llama3.2-vision"

    # Extraction call
    extraction_timeout: float = 180.0
    extraction_temperature: float = 0.1  # Low temperature for consistency
    extraction_max_tokens: int = 8192

    # Summary call
    summary_timeout: float = 60.0
    summary_temperature: float = 0.4

    # Retry policy (applies to transport failures only)
    llm_max_attempts: int = Field(default=3, ge=1)
    llm_retry_backoff: float = Field(default=1.0, ge=0)

    # Rasterizer
    page_render_scale: float = Field(default=2.0, gt=0)
    frame_jpeg_quality: int = Field(default=92, ge=1, le=95)
    supported_image_types: list[str] = ["image/png", "image/jpeg", "image/webp"]

    # Pipeline policies
    validation_policy: Literal["strict", "tolerant"] = "strict"
    skip_failed_documents: bool = False

    log_level: str = "INFO"

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # LLM_PROVIDER and llm_provider both work
        extra="ignore",  # Ignore extra environment variables
    )

    @property
    def model_name(self) -> str:
        """LiteLLM model identifier for the configured provider."""
        if self.llm_provider == "openai":
            return self.openai_model
        if self.llm_provider == "ollama":
            return f"ollama/{self.ollama_model}"
        return f"gemini/{self.gemini_model}"

    @property
    def api_base(self) -> str | None:
        """API base URL, only needed for Ollama."""
        if self.llm_provider == "ollama":
            return self.ollama_host
        return None

    @property
    def api_key(self) -> str | None:
        if self.llm_provider == "openai":
            return self.openai_api_key or None
        if self.llm_provider == "gemini":
            return self.gemini_api_key or None
        return None

    def validate_credentials(self) -> None:
        """
        Check that the selected provider can be reached.

        Raises:
            ConfigurationError: If the provider needs an API key and none is set
        """
        if self.llm_provider == "ollama":
            if not self.ollama_host:
                raise ConfigurationError("OLLAMA_HOST must be set when LLM_PROVIDER=ollama")
            return

        if not self.api_key:
            env_name = f"{self.llm_provider.upper()}_API_KEY"
            raise ConfigurationError(
                f"{env_name} environment variable not set.",
                {"llm_provider": self.llm_provider},
            )

    def log_config(self) -> None:
        """Log current configuration with sensitive values redacted."""

        def _redact(value: str) -> str:
            if not value:
                return "not set"
            if len(value) <= 12:
                return "set"
            return f"set ({value[:4]}...{value[-4:]})"

        logger.info("LLM provider: %s (model %s)", self.llm_provider, self.model_name)
        logger.info("Gemini API key: %s", _redact(self.gemini_api_key))
        logger.info("OpenAI API key: %s", _redact(self.openai_api_key))
        logger.info("Ollama host: %s", self.ollama_host)
        logger.info(
            "Rasterizer: scale=%.1f jpeg_quality=%d images=%s",
            self.page_render_scale,
            self.frame_jpeg_quality,
            ",".join(self.supported_image_types),
        )
        logger.info(
            "Policies: validation=%s skip_failed_documents=%s attempts=%d",
            self.validation_policy,
            self.skip_failed_documents,
            self.llm_max_attempts,
        )


@lru_cache
def get_settings() -> Settings:
    """Cached settings for the HTTP layer; pipeline code receives settings explicitly."""
    return Settings()
