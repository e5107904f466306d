"""Generation workflow: the state machine behind the StyleSwap UI.

The orchestrator owns everything the presentation layer reads: the status,
the uploaded source image, the result image and the last error. The UI only
calls the operations below and re-renders from the resulting state.

Transitions
-----------
=================  ======================  ==========  =====================================
From               Event                   To          Side effect
=================  ======================  ==========  =====================================
any                ``ingest(image)``       Idle        set source image, clear result/error
Idle/Success/Error ``start()``             Generating  clear result/error, call the service
Generating         ``start()``             Generating  none (duplicate start is rejected)
Generating         service returns image   Success     set result image
Generating         service fails           Error       set error; reopen gate on key errors
any                ``reset()``             Idle        clear image, result, error, custom text
=================  ======================  ==========  =====================================

Stale responses
---------------
The service call cannot be cancelled. Each ``start()`` takes a new attempt
token, and ``reset()``/``ingest()`` invalidate the current one. When a call
finishes, its outcome is applied only if its token is still the latest, so a
response that arrives after the user started over never resurrects old state.
"""

import logging

from .credentials import CredentialGate
from .errors import CREDENTIAL_MISSING_MARKER, PreconditionViolation, classify_error
from .export import DEFAULT_PREFIX, to_downloadable
from .gemini_client import GenerationService
from .models import (
    DownloadableImage,
    ErrorKind,
    GenerationRequest,
    GenerationStatus,
    Preset,
    SourceImage,
    WorkflowError,
)
from .prompts import BACKDROP_PRESETS, get_preset, resolve_prompt

logger = logging.getLogger(__name__)

FALLBACK_ERROR_MESSAGE = "Something went wrong."


class GenerationOrchestrator:
    """Single-session controller for backdrop generation.

    Args:
        service: Generation service collaborator
        gate: Process-wide credential gate, reopened on credential failures
        credential_marker: Substring identifying credential failures
        download_prefix: Prefix for exported file names
    """

    def __init__(
        self,
        service: GenerationService,
        gate: CredentialGate,
        credential_marker: str = CREDENTIAL_MISSING_MARKER,
        download_prefix: str = DEFAULT_PREFIX,
    ):
        self.service = service
        self.gate = gate
        self.credential_marker = credential_marker
        self.download_prefix = download_prefix

        self.status = GenerationStatus.IDLE
        self.source_image: SourceImage | None = None
        self.result_image: str | None = None
        self.error: WorkflowError | None = None

        self.selected_preset: Preset = BACKDROP_PRESETS[0]
        self.custom_prompt = ""

        self._attempt = 0

    @property
    def is_generating(self) -> bool:
        return self.status is GenerationStatus.GENERATING

    @property
    def can_generate(self) -> bool:
        """Whether the generate action should be enabled."""
        return self.source_image is not None and not self.is_generating

    @property
    def prompt(self) -> str:
        """The instruction the next ``start()`` will send."""
        return resolve_prompt(self.custom_prompt, self.selected_preset)

    def ingest(self, image: SourceImage) -> None:
        """Replace the source image and return to Idle."""
        self._attempt += 1
        self.source_image = image
        self.result_image = None
        self.error = None
        self.status = GenerationStatus.IDLE
        logger.info(f"Source image ingested ({image.mime_type})")

    def select_preset(self, preset: Preset | str) -> Preset:
        """Select a backdrop preset. Clears any custom prompt."""
        if isinstance(preset, str):
            preset = get_preset(preset)
        self.selected_preset = preset
        self.custom_prompt = ""
        logger.debug(f"Preset selected: {preset.id}")
        return preset

    def set_custom_prompt(self, text: str | None) -> None:
        self.custom_prompt = text or ""

    async def start(self, prompt: str | None = None) -> bool:
        """Run one generation for the current source image.

        Args:
            prompt: Instruction to send; defaults to the resolved session prompt

        Returns:
            True if this attempt's result was committed as Success, False if
            the call was rejected, failed, or was superseded while in flight
        """
        if self.is_generating:
            logger.warning("Generation already in progress; ignoring start()")
            return False
        if self.source_image is None:
            logger.warning("No source image; ignoring start()")
            return False

        request = GenerationRequest(
            image_data=self.source_image.encoded_data,
            mime_type=self.source_image.mime_type,
            prompt=self.prompt if prompt is None else prompt,
        )

        self._attempt += 1
        attempt = self._attempt
        self.status = GenerationStatus.GENERATING
        self.error = None
        self.result_image = None
        logger.info(f"Generation attempt {attempt} started")

        try:
            result = await self.service.generate(request.image_data, request.mime_type, request.prompt)
        except Exception as e:
            if attempt != self._attempt:
                logger.warning(f"Discarding failure of superseded attempt {attempt}: {e}")
                return False
            self._fail(str(e) or FALLBACK_ERROR_MESSAGE)
            logger.error(f"Generation attempt {attempt} failed: {e}", exc_info=True)
            return False

        if attempt != self._attempt:
            logger.warning(f"Discarding result of superseded attempt {attempt}")
            return False

        self.result_image = result
        self.status = GenerationStatus.SUCCESS
        logger.info(f"Generation attempt {attempt} succeeded")
        return True

    def _fail(self, message: str) -> None:
        kind = classify_error(message, self.credential_marker)
        self.error = WorkflowError(message=message, kind=kind)
        self.result_image = None
        self.status = GenerationStatus.ERROR
        if kind is ErrorKind.CREDENTIAL_MISSING:
            self.gate.reopen()

    def reset(self) -> None:
        """Start over: clear everything and return to Idle.

        An in-flight call keeps running; its outcome is discarded.
        """
        self._attempt += 1
        self.source_image = None
        self.result_image = None
        self.error = None
        self.custom_prompt = ""
        self.status = GenerationStatus.IDLE
        logger.info("Workflow reset")

    def export(self) -> DownloadableImage:
        """Package the current result for download.

        Raises:
            PreconditionViolation: If the workflow is not in Success
        """
        if self.status is not GenerationStatus.SUCCESS:
            raise PreconditionViolation(f"Cannot export in status {self.status.value}")
        return to_downloadable(self.result_image, prefix=self.download_prefix)
