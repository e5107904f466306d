"""Data models for StyleSwap UI state."""

from dataclasses import dataclass
from typing import Any


@dataclass
class UIState:
    """Session state for the Gradio UI.

    Each browser session gets its own UIState, and with it its own
    generation workflow. The credential gate and generation service behind
    the workflow are shared by all sessions.

    Attributes
    ----------
    orchestrator : Any | None
        GenerationOrchestrator for this session (created lazily)
    last_download : str | None
        Path of the most recently exported file
    """

    orchestrator: Any | None = None  # GenerationOrchestrator instance
    last_download: str | None = None

    def is_initialized(self) -> bool:
        """Check if the session workflow has been created."""
        return self.orchestrator is not None

    def __repr__(self) -> str:
        """String representation for debugging."""
        status = self.orchestrator.status.value if self.orchestrator is not None else None
        return f"UIState(initialized={self.is_initialized()}, status={status})"


# Status captions shown above the canvas
STATUS_CAPTIONS = {
    "idle_empty": "Waiting for upload",
    "idle": "Ready to transform",
    "generating": "⏳ Reimagining...",
    "success": "✅ Perfect! Image ready for your shop.",
    "error": "❌ Generation failed",
}

GENERATE_LABEL = "🪄 Generate Backdrop"
GENERATING_LABEL = "⏳ Reimagining..."

BILLING_DOCS_URL = "https://ai.google.dev/gemini-api/docs/billing"
