"""Configuration management for StyleSwap.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the STYLESWAP_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (STYLESWAP_* prefix)
2. .env file in the project root
3. Default values defined in StyleSwapConfig

The Gemini API key is also accepted from the plain ``GEMINI_API_KEY`` variable,
which is what the Google tooling exports by default.

Example .env file:
    STYLESWAP_GEMINI_API_KEY=...
    STYLESWAP_MODEL_ID=gemini-3-pro-image-preview
    STYLESWAP_IMAGE_SIZE=1K
    STYLESWAP_OUTPUTS_DIR=outputs

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
This ensures a single source of truth for all configuration values across
the application.

Usage Example
-------------
    from styleswap.core.config import config

    print(config.model_id)
    print(config.outputs_dir)

Credential Error Marker
-----------------------
``credential_error_marker`` is the substring the generation service puts in
its failure message when the API key or project is not usable. The workflow
matches on it to send the user back to key selection. Changing it here is
the only change needed if the service wording changes.
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import CREDENTIAL_MISSING_MARKER


class StyleSwapConfig(BaseSettings):
    """Main configuration for StyleSwap.

    Attributes
    ----------
    Generation Service:
        gemini_api_key : str | None
            API key used for the Gemini image model. When unset the credential
            gate starts blocked and asks the user for a key.
        model_id : str
            Gemini model used to re-composite the backdrop
        image_size : Literal["1K", "2K", "4K"]
            Output resolution requested from the model
        credential_error_marker : str
            Substring identifying missing/invalid credential failures

    Export:
        download_prefix : str
            Prefix of suggested download names (``<prefix>-<epoch-ms>.png``)
        outputs_dir : Path
            Directory where downloads are written for the browser

    Logging:
        log_level : str
            Root log level for the application entry point

    UI Settings:
        gradio_server_name : str
            Server bind address (0.0.0.0 for local network)
        gradio_server_port : int
            Server port (1024-65535)
        gradio_share : bool
            Create public gradio.live link (keep False for local-only)

    Examples
    --------
        >>> custom_config = StyleSwapConfig(image_size="2K", gradio_server_port=8080)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STYLESWAP_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Generation service
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("STYLESWAP_GEMINI_API_KEY", "GEMINI_API_KEY", "gemini_api_key"),
        description="API key for the Gemini image model",
    )
    model_id: str = Field(
        default="gemini-3-pro-image-preview",
        description="Gemini model used for backdrop generation",
    )
    image_size: Literal["1K", "2K", "4K"] = Field(
        default="1K",
        description="Output resolution requested from the model",
    )
    credential_error_marker: str = Field(
        default=CREDENTIAL_MISSING_MARKER,
        min_length=1,
        description="Substring marking a missing/invalid credential failure",
    )

    # Export
    download_prefix: str = Field(
        default="styleswap",
        min_length=1,
        description="Prefix for suggested download file names",
    )
    outputs_dir: Path = Field(
        default=Path("outputs"),
        description="Directory where downloadable results are written",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level",
    )

    # UI settings
    gradio_server_name: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    gradio_server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    gradio_share: bool = Field(
        default=False,
        description="Create public gradio.live link (keep False for local-only)",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the outputs directory.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.outputs_dir.mkdir(parents=True, exist_ok=True)


# Global configuration instance
# Loads values from environment variables (STYLESWAP_* prefix) and .env file.
config = StyleSwapConfig()
