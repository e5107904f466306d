"""Tests for styleswap.core.config - configuration management.

Tests cover:
- Default values for all configuration fields.
- Environment variable overrides via the STYLESWAP_ prefix.
- The plain GEMINI_API_KEY fallback.
- Automatic directory creation on initialisation.
- Pydantic validation constraints (port range, image size literals, etc.).
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from styleswap.core.config import StyleSwapConfig
from styleswap.core.errors import CREDENTIAL_MISSING_MARKER


@pytest.fixture
def clean_env(monkeypatch):
    """Remove environment variables that would leak into config defaults."""
    for name in (
        "GEMINI_API_KEY",
        "STYLESWAP_GEMINI_API_KEY",
        "STYLESWAP_MODEL_ID",
        "STYLESWAP_IMAGE_SIZE",
        "STYLESWAP_GRADIO_SERVER_PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestConfigDefaults:
    """Verify that StyleSwapConfig provides sensible defaults."""

    def test_default_model(self, clean_env, temp_dir: Path):
        cfg = StyleSwapConfig(_env_file=None, outputs_dir=temp_dir / "out")
        assert cfg.model_id == "gemini-3-pro-image-preview"
        assert cfg.image_size == "1K"

    def test_default_api_key_is_unset(self, clean_env, temp_dir: Path):
        """Without a key the credential gate must start blocked."""
        cfg = StyleSwapConfig(_env_file=None, outputs_dir=temp_dir / "out")
        assert cfg.gemini_api_key is None

    def test_default_marker(self, test_config: StyleSwapConfig):
        assert test_config.credential_error_marker == "API Key configuration"
        assert test_config.credential_error_marker == CREDENTIAL_MISSING_MARKER

    def test_default_download_prefix(self, test_config: StyleSwapConfig):
        assert test_config.download_prefix == "styleswap"

    def test_default_server_settings(self, clean_env, temp_dir: Path):
        cfg = StyleSwapConfig(_env_file=None, outputs_dir=temp_dir / "out")
        assert cfg.gradio_server_name == "0.0.0.0"
        assert cfg.gradio_server_port == 7860
        assert cfg.gradio_share is False


class TestConfigEnvironment:
    """Verify environment variable overrides."""

    def test_prefixed_override(self, clean_env, temp_dir: Path):
        clean_env.setenv("STYLESWAP_MODEL_ID", "gemini-2.5-flash-image")
        clean_env.setenv("STYLESWAP_IMAGE_SIZE", "2K")

        cfg = StyleSwapConfig(_env_file=None, outputs_dir=temp_dir / "out")

        assert cfg.model_id == "gemini-2.5-flash-image"
        assert cfg.image_size == "2K"

    def test_prefixed_api_key(self, clean_env, temp_dir: Path):
        clean_env.setenv("STYLESWAP_GEMINI_API_KEY", "prefixed")
        cfg = StyleSwapConfig(_env_file=None, outputs_dir=temp_dir / "out")
        assert cfg.gemini_api_key == "prefixed"

    def test_plain_gemini_api_key(self, clean_env, temp_dir: Path):
        """The Google tooling's GEMINI_API_KEY is also accepted."""
        clean_env.setenv("GEMINI_API_KEY", "plain")
        cfg = StyleSwapConfig(_env_file=None, outputs_dir=temp_dir / "out")
        assert cfg.gemini_api_key == "plain"

    def test_keyword_api_key(self, test_config: StyleSwapConfig):
        assert test_config.gemini_api_key == "test-key"


class TestConfigDirectoryCreation:
    """Verify that StyleSwapConfig creates required directories."""

    def test_outputs_dir_created(self, test_config: StyleSwapConfig):
        assert test_config.outputs_dir.is_dir()

    def test_nested_outputs_dir_created(self, clean_env, temp_dir: Path):
        cfg = StyleSwapConfig(_env_file=None, outputs_dir=temp_dir / "a" / "b")
        assert cfg.outputs_dir.is_dir()


class TestConfigValidation:
    """Verify Pydantic validation constraints."""

    def test_invalid_image_size(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            StyleSwapConfig(_env_file=None, outputs_dir=temp_dir, image_size="8K")

    @pytest.mark.parametrize("port", [80, 70000])
    def test_port_out_of_range(self, temp_dir: Path, port: int):
        with pytest.raises(ValidationError):
            StyleSwapConfig(_env_file=None, outputs_dir=temp_dir, gradio_server_port=port)

    def test_empty_marker_rejected(self, temp_dir: Path):
        with pytest.raises(ValidationError):
            StyleSwapConfig(_env_file=None, outputs_dir=temp_dir, credential_error_marker="")
