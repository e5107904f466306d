"""State management utilities for StyleSwap UI.

The credential gate, API key store and generation service are process-wide
and created once. Each UI session owns only its workflow, which is wired to
those shared services on first use.
"""

import logging
from dataclasses import dataclass

from styleswap.core.config import StyleSwapConfig, config
from styleswap.core.credentials import ApiKeyStore, CredentialGate
from styleswap.core.gemini_client import GeminiBackdropService, GenerationService
from styleswap.core.workflow import GenerationOrchestrator

from .models import UIState

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    """Process-wide collaborators shared by all sessions."""

    key_store: ApiKeyStore
    gate: CredentialGate
    service: GenerationService
    config: StyleSwapConfig


_services: AppServices | None = None


def build_services(cfg: StyleSwapConfig | None = None) -> AppServices:
    """Create the shared services from configuration.

    Args:
        cfg: Configuration to use (default: global config)

    Returns:
        New AppServices instance
    """
    cfg = cfg or config
    key_store = ApiKeyStore(cfg.gemini_api_key)
    gate = CredentialGate(key_store)
    service = GeminiBackdropService(
        key_store,
        model_id=cfg.model_id,
        image_size=cfg.image_size,
        credential_marker=cfg.credential_error_marker,
    )
    logger.info(f"Services created for model {cfg.model_id} ({cfg.image_size})")
    return AppServices(key_store=key_store, gate=gate, service=service, config=cfg)


def get_services() -> AppServices:
    """Return the shared services, creating them on first use."""
    global _services
    if _services is None:
        _services = build_services()
    return _services


def set_services(services: AppServices | None) -> None:
    """Replace the shared services (None forces re-creation on next use)."""
    global _services
    _services = services


def initialize_ui_state(state: UIState | None = None) -> UIState:
    """Initialize or ensure UI state is ready.

    Args:
        state: Existing UIState or None

    Returns:
        Initialized UIState instance
    """
    if state is None:
        logger.info("Creating new UIState")
        state = UIState()

    if state.is_initialized():
        return state

    services = get_services()
    state.orchestrator = GenerationOrchestrator(
        services.service,
        services.gate,
        credential_marker=services.config.credential_error_marker,
        download_prefix=services.config.download_prefix,
    )
    logger.info(f"UIState initialization complete: {state}")
    return state


def cleanup_ui_state(state: UIState) -> None:
    """Drop the session workflow when a session ends."""
    if state.orchestrator is not None:
        state.orchestrator.reset()
    state.orchestrator = None
    state.last_download = None
    logger.info("UIState cleanup complete")
