"""StyleSwap - AI backdrop replacement for product photos."""

__version__ = "0.1.0"

from styleswap.core.config import StyleSwapConfig, config
from styleswap.core.workflow import GenerationOrchestrator

__all__ = [
    "GenerationOrchestrator",
    "StyleSwapConfig",
    "config",
]
