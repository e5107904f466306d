"""Gemini image client used as the backdrop generation service.

The service takes the encoded product photo and an instruction and returns a
new image as a data URI. It makes exactly one request per call; retries and
timeouts are left to the SDK.

Failure messages
----------------
Every failure is raised as :class:`~styleswap.core.errors.GenerationServiceError`
with a message suitable for showing to the user. When the failure means the
API key or its project cannot be used (no key, rejected key, project not
found), the message contains the credential marker so the workflow can send
the user back to key selection.
"""

import logging
from collections.abc import Callable
from typing import Any, Protocol

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from .codec import parse_data_uri, to_data_uri
from .credentials import ApiKeyStore
from .errors import CREDENTIAL_MISSING_MARKER, GenerationServiceError

logger = logging.getLogger(__name__)

BACKDROP_INSTRUCTION = (
    "Keep the product in this photo exactly as it is: same shape, proportions, "
    "colors, materials, labels and logos. Do not add text or watermarks. "
    "Replace only the background and adjust lighting and shadows so the product "
    "sits naturally in the new scene. New background: {prompt}"
)

# Status codes the API uses for unusable keys or projects
CREDENTIAL_STATUS_CODES = frozenset({401, 403})
CREDENTIAL_ERROR_HINTS = (
    "Requested entity was not found",
    "API key not valid",
    "API_KEY_INVALID",
    "PERMISSION_DENIED",
)


class GenerationService(Protocol):
    """External service that re-composites the backdrop of an image."""

    async def generate(self, image_data: str, mime_type: str, prompt: str) -> str: ...


class GeminiBackdropService:
    """Generation service backed by a Gemini image model.

    Args:
        key_store: Source of the API key, read at call time
        model_id: Gemini model name
        image_size: Requested output size ("1K", "2K" or "4K")
        credential_marker: Substring put in credential failure messages
        client_factory: Callable building a ``genai.Client`` from an API key
    """

    def __init__(
        self,
        key_store: ApiKeyStore,
        model_id: str = "gemini-3-pro-image-preview",
        image_size: str = "1K",
        credential_marker: str = CREDENTIAL_MISSING_MARKER,
        client_factory: Callable[..., Any] = genai.Client,
    ):
        self.key_store = key_store
        self.model_id = model_id
        self.image_size = image_size
        self.credential_marker = credential_marker
        self._client_factory = client_factory
        self._client: Any = None
        self._client_key: str | None = None

    async def _get_client(self, api_key: str) -> Any:
        """Return the client for ``api_key``, replacing it when the key changes."""
        if self._client is not None and self._client_key == api_key:
            return self._client

        if self._client is not None:
            logger.info("API key changed; closing previous Gemini client")
            await self._client.aio.aclose()

        self._client = self._client_factory(api_key=api_key)
        self._client_key = api_key
        return self._client

    def _credential_error(self, detail: str, status_code: int | None = None) -> GenerationServiceError:
        return GenerationServiceError(
            f"{self.credential_marker} error: {detail}. Please select a valid API key.",
            status_code=status_code,
        )

    def _is_credential_failure(self, error: genai_errors.APIError) -> bool:
        if error.code in CREDENTIAL_STATUS_CODES:
            return True
        text = f"{error.status or ''} {error.message or ''}"
        return any(hint in text for hint in CREDENTIAL_ERROR_HINTS)

    async def generate(self, image_data: str, mime_type: str, prompt: str) -> str:
        """Generate a new backdrop for the product photo.

        Args:
            image_data: Data URI produced by the image codec
            mime_type: Media type of the photo
            prompt: Resolved backdrop description

        Returns:
            Data URI of the generated image

        Raises:
            GenerationServiceError: On any failure
        """
        api_key = self.key_store.api_key
        if not api_key:
            raise self._credential_error("no API key selected")

        try:
            raw, _ = parse_data_uri(image_data)
        except ValueError as e:
            raise GenerationServiceError(f"Source image is not a valid data URI: {e}") from e

        client = await self._get_client(api_key)
        contents = [
            types.Part.from_bytes(data=raw, mime_type=mime_type),
            types.Part.from_text(text=BACKDROP_INSTRUCTION.format(prompt=prompt)),
        ]
        generate_config = types.GenerateContentConfig(
            response_modalities=["IMAGE"],
            image_config=types.ImageConfig(image_size=self.image_size),
        )

        logger.info(f"Requesting backdrop from {self.model_id} ({len(raw)} byte {mime_type} input)")
        try:
            response = await client.aio.models.generate_content(
                model=self.model_id,
                contents=contents,
                config=generate_config,
            )
        except genai_errors.APIError as e:
            logger.warning(f"Gemini request failed ({e.code} {e.status}): {e.message}")
            if self._is_credential_failure(e):
                raise self._credential_error(e.message or str(e), status_code=e.code) from e
            raise GenerationServiceError(e.message or str(e), status_code=e.code) from e

        return self._extract_image(response)

    def _extract_image(self, response: Any) -> str:
        """Return the first inline image of a response as a data URI."""
        text_parts = []
        for candidate in getattr(response, "candidates", None) or []:
            content = getattr(candidate, "content", None)
            for part in getattr(content, "parts", None) or []:
                inline = getattr(part, "inline_data", None)
                if inline is not None and inline.data:
                    logger.info(f"Received {len(inline.data)} byte {inline.mime_type} result")
                    return to_data_uri(inline.data, inline.mime_type or "image/png")
                if getattr(part, "text", None):
                    text_parts.append(part.text)

        detail = " ".join(text_parts).strip()
        if detail:
            raise GenerationServiceError(f"The model did not return an image: {detail}")
        raise GenerationServiceError("The model did not return an image. Try a different description.")
