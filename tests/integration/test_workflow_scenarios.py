"""End-to-end workflow scenarios.

These run the real codec, prompt composer, credential gate, orchestrator and
export together. Only the generation service is replaced by a fake.
"""

import pytest

from styleswap.core.codec import encode_image
from styleswap.core.credentials import ApiKeyStore, CredentialGate
from styleswap.core.errors import GenerationServiceError
from styleswap.core.models import ErrorKind, GenerationStatus
from styleswap.core.prompts import get_preset_by_name
from styleswap.core.workflow import GenerationOrchestrator

pytestmark = pytest.mark.integration


@pytest.fixture
def key_store():
    return ApiKeyStore("initial-key")


@pytest.fixture
def host_gate(key_store):
    return CredentialGate(key_store)


@pytest.mark.asyncio
async def test_scenario_a_preset_generation_succeeds(service_factory, host_gate, png_bytes, result_uri):
    """Ingest, pick "Studio White", generate: the service result becomes the result image."""
    service = service_factory(result=result_uri)
    workflow = GenerationOrchestrator(service, host_gate)
    assert await host_gate.check_initial() is False

    workflow.ingest(await encode_image(png_bytes, "image/png"))
    workflow.select_preset(get_preset_by_name("Studio White"))
    assert await workflow.start() is True

    assert workflow.status is GenerationStatus.SUCCESS
    assert workflow.result_image == result_uri
    assert service.calls[0][1:] == ("image/png", "clean white studio backdrop")


@pytest.mark.asyncio
async def test_scenario_b_start_without_image_is_noop(service_factory, host_gate, result_uri):
    """Without an ingested image start() changes nothing."""
    service = service_factory(result=result_uri)
    workflow = GenerationOrchestrator(service, host_gate)

    assert await workflow.start() is False

    assert workflow.status is GenerationStatus.IDLE
    assert service.calls == []


@pytest.mark.asyncio
async def test_scenario_c_and_d_credential_failure_then_reselection(service_factory, host_gate, key_store, png_bytes, result_uri):
    """A credential failure blocks the gate; selecting a key unblocks it for a retry."""
    service = service_factory(error=GenerationServiceError("API Key configuration invalid"))
    workflow = GenerationOrchestrator(service, host_gate)
    await host_gate.check_initial()

    # Scenario C
    workflow.ingest(await encode_image(png_bytes, "image/png"))
    await workflow.start()

    assert workflow.status is GenerationStatus.ERROR
    assert workflow.error.kind is ErrorKind.CREDENTIAL_MISSING
    assert workflow.error.message == "API Key configuration invalid"
    assert host_gate.needs_credential is True

    # Scenario D
    key_store.stage_key("replacement-key")
    await host_gate.request_selection()

    assert host_gate.needs_credential is False
    assert key_store.api_key == "replacement-key"

    service.error = None
    assert await workflow.start() is True
    assert workflow.status is GenerationStatus.SUCCESS
    assert workflow.error is None


@pytest.mark.asyncio
async def test_missing_key_at_startup_blocks_until_selected(service_factory, png_bytes, result_uri):
    """No key configured: the gate starts blocked and opens after selection."""
    key_store = ApiKeyStore(None)
    gate = CredentialGate(key_store)

    assert await gate.check_initial() is True

    key_store.stage_key("user-key")
    await gate.request_selection()

    workflow = GenerationOrchestrator(service_factory(result=result_uri), gate)
    workflow.ingest(await encode_image(png_bytes))
    assert await workflow.start() is True


@pytest.mark.asyncio
async def test_full_session_with_export(service_factory, temp_dir, host_gate, png_bytes, result_uri):
    """Upload from disk, custom prompt, generate, export, start over."""
    from styleswap.core.export import save_downloadable

    photo = temp_dir / "mug.png"
    photo.write_bytes(png_bytes)
    service = service_factory(result=result_uri)
    workflow = GenerationOrchestrator(service, host_gate, download_prefix="shop")

    workflow.ingest(await encode_image(photo))
    workflow.set_custom_prompt("on a rustic wooden table")
    await workflow.start()

    saved = save_downloadable(workflow.export(), temp_dir / "downloads")
    assert saved.name.startswith("shop-")
    assert saved.read_bytes().startswith(b"\x89PNG")

    workflow.reset()
    assert workflow.status is GenerationStatus.IDLE
    assert workflow.source_image is None
    assert workflow.result_image is None
    assert workflow.error is None
