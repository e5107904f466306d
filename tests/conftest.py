"""Shared pytest fixtures for StyleSwap tests."""

import asyncio
import io
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from PIL import Image

from styleswap.core.codec import to_data_uri
from styleswap.core.config import StyleSwapConfig
from styleswap.core.credentials import ApiKeyStore, CredentialGate
from styleswap.core.models import SourceImage
from styleswap.core.workflow import GenerationOrchestrator
from styleswap.ui import state as ui_state_module
from styleswap.ui.models import UIState


class FakeGenerationService:
    """Generation service double with controllable outcomes.

    By default every call returns ``result`` immediately. Set ``hold=True``
    to park calls until ``release()`` is called, which lets tests observe the
    Generating state and deliver late responses.
    """

    def __init__(self, result: str = "data:image/png;base64,UkVTVUxU", error: Exception | None = None):
        self.result = result
        self.error = error
        self.hold = False
        self.calls: list[tuple[str, str, str]] = []
        self._release = asyncio.Event()

    def release(self) -> None:
        self._release.set()

    async def generate(self, image_data: str, mime_type: str, prompt: str) -> str:
        self.calls.append((image_data, mime_type, prompt))
        if self.hold:
            await self._release.wait()
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> StyleSwapConfig:
    """Create a test configuration with temporary directories."""
    return StyleSwapConfig(
        _env_file=None,
        gemini_api_key="test-key",
        outputs_dir=str(temp_dir / "outputs"),
        model_id="gemini-test-image",
        image_size="1K",
    )


def _image_bytes(fmt: str, color: tuple[int, int, int] = (200, 30, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    """Bytes of a tiny valid PNG."""
    return _image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    """Bytes of a tiny valid JPEG."""
    return _image_bytes("JPEG", (20, 120, 220))


@pytest.fixture
def source_image(png_bytes: bytes) -> SourceImage:
    """An ingested PNG product photo."""
    return SourceImage(encoded_data=to_data_uri(png_bytes, "image/png"), mime_type="image/png")


@pytest.fixture
def result_uri(jpeg_bytes: bytes) -> str:
    """A generated result as the service would return it."""
    return to_data_uri(jpeg_bytes, "image/jpeg")


@pytest.fixture
def fake_service(result_uri: str) -> FakeGenerationService:
    """Generation service returning ``result_uri``."""
    return FakeGenerationService(result=result_uri)


@pytest.fixture
def gate() -> CredentialGate:
    """Credential gate without a host (starts open)."""
    return CredentialGate()


@pytest.fixture
def orchestrator(fake_service: FakeGenerationService, gate: CredentialGate) -> GenerationOrchestrator:
    """Workflow wired to the fake service and the open gate."""
    return GenerationOrchestrator(fake_service, gate)


@pytest.fixture
def app_services(test_config: StyleSwapConfig, fake_service: FakeGenerationService):
    """Install shared UI services backed by the fake service.

    Restores lazy creation after the test.
    """
    key_store = ApiKeyStore(test_config.gemini_api_key)
    services = ui_state_module.AppServices(
        key_store=key_store,
        gate=CredentialGate(key_store),
        service=fake_service,
        config=test_config,
    )
    ui_state_module.set_services(services)
    try:
        yield services
    finally:
        ui_state_module.set_services(None)


@pytest.fixture
def ui_state() -> UIState:
    """Create empty UI state for testing."""
    return UIState()


@pytest.fixture
def service_factory():
    """Build FakeGenerationService instances with custom outcomes."""
    return FakeGenerationService
