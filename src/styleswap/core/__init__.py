"""Core functionality for backdrop generation.

This module provides the components behind the StyleSwap workflow:

- **Image Codec** (codec.py): uploaded bytes to data URI and media type
- **Prompt Composer** (prompts.py): preset catalog and prompt resolution
- **Credential Gate** (credentials.py): blocks the workflow until an API key is selected
- **Generation Orchestrator** (workflow.py): the status state machine
- **Export** (export.py): results as downloadable PNG files
- **Gemini client** (gemini_client.py): the external generation service
- **StyleSwapConfig** (config.py): Pydantic Settings configuration

Usage Example
-------------
    from styleswap.core import (
        ApiKeyStore, CredentialGate, GeminiBackdropService,
        GenerationOrchestrator, encode_image,
    )

    keys = ApiKeyStore(config.gemini_api_key)
    gate = CredentialGate(keys)
    await gate.check_initial()

    workflow = GenerationOrchestrator(GeminiBackdropService(keys), gate)
    workflow.ingest(await encode_image("product.jpg"))
    workflow.select_preset("studio-white")
    if await workflow.start():
        download = workflow.export()
"""

from styleswap.core.codec import encode_image, parse_data_uri, to_data_uri
from styleswap.core.config import StyleSwapConfig, config
from styleswap.core.credentials import ApiKeyStore, CredentialGate, CredentialHost
from styleswap.core.errors import (
    GenerationServiceError,
    ImageReadError,
    PreconditionViolation,
    StyleSwapError,
    classify_error,
)
from styleswap.core.export import save_downloadable, to_downloadable
from styleswap.core.gemini_client import GeminiBackdropService, GenerationService
from styleswap.core.models import (
    DownloadableImage,
    ErrorKind,
    GenerationStatus,
    Preset,
    SourceImage,
    WorkflowError,
)
from styleswap.core.prompts import BACKDROP_PRESETS, get_preset, resolve_prompt
from styleswap.core.workflow import GenerationOrchestrator

__all__ = [
    "ApiKeyStore",
    "BACKDROP_PRESETS",
    "CredentialGate",
    "CredentialHost",
    "DownloadableImage",
    "ErrorKind",
    "GeminiBackdropService",
    "GenerationOrchestrator",
    "GenerationService",
    "GenerationServiceError",
    "GenerationStatus",
    "ImageReadError",
    "PreconditionViolation",
    "Preset",
    "SourceImage",
    "StyleSwapConfig",
    "StyleSwapError",
    "WorkflowError",
    "classify_error",
    "config",
    "encode_image",
    "get_preset",
    "parse_data_uri",
    "resolve_prompt",
    "save_downloadable",
    "to_data_uri",
    "to_downloadable",
]
